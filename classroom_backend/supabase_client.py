"""
Shared Supabase client.

Created lazily on first use so the app (and the tests) run without
credentials; callers fall back to the local JSON store in that case.
"""
import os

from supabase import Client, ClientOptions, create_client

from .config import config

supabase: Client = None


def is_supabase_configured() -> bool:
    """True when Supabase use is enabled and credentials are present."""
    if not config.use_supabase:
        return False
    return bool(os.getenv("SUPABASE_URL") and os.getenv("SUPABASE_SERVICE_KEY"))


def get_supabase() -> Client:
    """Get or create Supabase client."""
    global supabase
    if supabase is None:
        url = os.getenv("SUPABASE_URL")
        key = os.getenv("SUPABASE_SERVICE_KEY")
        if not url or not key:
            raise RuntimeError("Supabase credentials not configured. Check SUPABASE_URL and SUPABASE_SERVICE_KEY in .env")
        options = ClientOptions(postgrest_client_timeout=config.supabase_timeout)
        supabase = create_client(url, key, options=options)
    return supabase


def reset_supabase():
    """Drop the cached client (used when credentials change)."""
    global supabase
    supabase = None
