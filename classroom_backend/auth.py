"""
Teacher authentication for Vividclass.

Teacher endpoints expect a Supabase session JWT in the Authorization
header. Student endpoints (/api/student/) stay open: students join through
their class and never hold a Supabase account.
"""
import os
import logging

import jwt
from flask import request, jsonify, g

logger = logging.getLogger(__name__)

STUDENT_PREFIX = '/api/student/'
OPEN_PATHS = {'/api/status'}
JWT_AUDIENCE = 'authenticated'
JWT_LEEWAY_SECONDS = 10


def auth_disabled() -> bool:
    """Local development switch (VIVIDCLASS_AUTH_DISABLED=1)."""
    return os.getenv('VIVIDCLASS_AUTH_DISABLED', '') == '1'


def needs_teacher_token(path: str) -> bool:
    if not path.startswith('/api/'):
        return False
    return path not in OPEN_PATHS and not path.startswith(STUDENT_PREFIX)


def bearer_token(header: str):
    """Token part of 'Bearer <token>', or None."""
    scheme, _, token = (header or '').partition(' ')
    if scheme != 'Bearer' or not token.strip():
        return None
    return token.strip()


def decode_teacher_token(token: str):
    """
    Decode a Supabase JWT (HS256). Returns the claims, or None when the
    token is expired, malformed or signed with another secret.
    """
    secret = os.getenv('SUPABASE_JWT_SECRET')
    if not secret:
        raise RuntimeError('SUPABASE_JWT_SECRET not configured')

    try:
        return jwt.decode(
            token,
            secret,
            algorithms=['HS256'],
            audience=JWT_AUDIENCE,
            leeway=JWT_LEEWAY_SECONDS,
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired teacher token")
        return None
    except jwt.InvalidTokenError as e:
        logger.info("Rejected teacher token: %s", e)
        return None


def init_auth(app):
    """
    Register the teacher-token check on the Flask app.
    Call this BEFORE registering blueprints.
    """
    if auth_disabled():
        logger.warning("Teacher authentication is disabled (VIVIDCLASS_AUTH_DISABLED=1)")

    @app.before_request
    def check_teacher_token():
        if auth_disabled() or not needs_teacher_token(request.path):
            return None

        token = bearer_token(request.headers.get('Authorization'))
        if token is None:
            return jsonify({'error': 'Authentication required'}), 401

        claims = decode_teacher_token(token)
        if claims is None:
            return jsonify({'error': 'Invalid or expired token'}), 401

        g.user_id = claims.get('sub')
        g.user_email = claims.get('email', '')
        return None
