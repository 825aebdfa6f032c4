"""
Configuration management for the Vividclass backend.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base paths
BASE_DIR = Path(__file__).parent.parent
BACKEND_DIR = Path(__file__).parent

# Local data (fallback store when Supabase is not reachable)
HOME_DIR = Path.home()
DATA_DIR = Path(os.getenv("VIVIDCLASS_DATA_DIR", str(HOME_DIR / ".vividclass_data")))
ASSIGNMENTS_FILE = DATA_DIR / "student_assignments.json"
SUBMISSIONS_FILE = DATA_DIR / "student_submissions.json"
AUDIT_LOG_FILE = DATA_DIR / "audit.log"

# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY", "")
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET", "")
SUPABASE_TIMEOUT = int(os.getenv("SUPABASE_TIMEOUT", "5"))

# Server configuration
HOST = "0.0.0.0"
PORT = int(os.getenv("PORT", "3000"))
DEBUG = os.getenv("FLASK_DEBUG", "1") == "1"


class Config:
    """Application configuration class."""

    def __init__(self):
        self.data_dir = str(DATA_DIR)
        self.supabase_url = SUPABASE_URL
        self.supabase_timeout = SUPABASE_TIMEOUT
        self.use_supabase = bool(SUPABASE_URL and SUPABASE_SERVICE_KEY)

    def to_dict(self):
        return {
            "data_dir": self.data_dir,
            "supabase_url": self.supabase_url,
            "supabase_timeout": self.supabase_timeout,
            "use_supabase": self.use_supabase,
        }

    def update(self, data: dict):
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)


# Global config instance
config = Config()
