"""
Shared Assignment Configuration
===============================
Single source of truth for assignment types, submission statuses and
AI-flag settings. Used by models.py, the assignment service and the routes.
"""

# Kinds of work a teacher can assign
ASSIGNMENT_TYPES = ("document", "presentation", "test")

# Where the student's work lives
CONTENT_TYPES = ("document", "board", "worksheet")

# Submission lifecycle
SUBMISSION_STATUSES = ("not_started", "draft", "submitted", "graded")

SUBMISSION_STATUS_LABELS = {
    "not_started": "Nezahájeno",
    "draft": "Rozpracováno",
    "submitted": "Odevzdáno",
    "graded": "Ohodnoceno",
}

# AI detection flags
FLAG_TYPES = ("paste", "generation", "pattern")
SNIPPET_LENGTH = 100  # characters of flagged text kept on the flag
FLAG_DETAILS_SEPARATOR = "; "

# Pastes shorter than this are never analyzed
MIN_ANALYZED_PASTE_CHARS = 100

# Paste warning dialog
MIN_PASTE_WORDS = 3
