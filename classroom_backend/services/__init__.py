"""
Vividclass Services
===================

Business logic services for the Vividclass backend.

Services:
- ai_detection: rule-based AI-generated text scorer
- paste_monitor: AI checks on pasted text, paste events, suspicion level
- assignment_service: assignments, submissions and AI flags
"""

# Services are imported directly when needed to avoid circular imports
# Example: from classroom_backend.services.ai_detection import analyze_text_for_ai

__all__ = [
    'ai_detection',
    'paste_monitor',
    'assignment_service',
]
