"""
Audit log of teacher-visible actions (AI flags, grading, deletions).
Entries are kept locally and hold ids only, never student text.
"""
import os
import logging
from datetime import datetime

from .config import AUDIT_LOG_FILE as _DEFAULT_AUDIT_LOG_FILE

logger = logging.getLogger(__name__)

AUDIT_LOG_FILE = str(_DEFAULT_AUDIT_LOG_FILE)


def audit_log(action: str, details: str = "", user: str = "system"):
    """Append one entry to the audit log. Failures are logged, never raised."""
    try:
        timestamp = datetime.now().isoformat()
        log_entry = f"{timestamp} | {user} | {action} | {details}\n"

        os.makedirs(os.path.dirname(AUDIT_LOG_FILE) or ".", exist_ok=True)
        with open(AUDIT_LOG_FILE, 'a', encoding='utf-8') as f:
            f.write(log_entry)
    except OSError as e:
        logger.error("Audit log error: %s", e)


def get_audit_logs(limit: int = 100):
    """Retrieve recent audit log entries, newest first."""
    if not os.path.exists(AUDIT_LOG_FILE):
        return []

    try:
        with open(AUDIT_LOG_FILE, 'r', encoding='utf-8') as f:
            lines = f.readlines()
    except OSError as e:
        logger.error("Error reading audit logs: %s", e)
        return []

    recent = lines[-limit:] if len(lines) > limit else lines
    logs = []
    for line in recent:
        parts = line.strip().split(' | ', 3)
        if len(parts) >= 4:
            logs.append({
                'timestamp': parts[0],
                'user': parts[1],
                'action': parts[2],
                'details': parts[3],
            })
    return logs[::-1]
