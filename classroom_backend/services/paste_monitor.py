"""
Paste Monitor
=============
Runs the AI-text scorer on text a student pastes (or otherwise adds in a
single edit) into work for an assignment that does not allow AI, records
flags on the submission, and tracks pasted passages for the teacher.

Persisting a flag or paste event may fail (store unavailable); such
failures are logged and the analysis is still returned to the caller.
"""

import logging
from datetime import datetime, timezone
from enum import Enum

from bs4 import BeautifulSoup

from classroom_backend.assignment_config import (
    SNIPPET_LENGTH, FLAG_DETAILS_SEPARATOR, MIN_ANALYZED_PASTE_CHARS, MIN_PASTE_WORDS,
)
from classroom_backend.models import PasteEvent
from classroom_backend.services import assignment_service
from classroom_backend.services.ai_detection import analyze_text_for_ai

logger = logging.getLogger(__name__)


class PasteDecision(str, Enum):
    """What the student chose in the paste warning dialog."""
    CONFIRM_WITH_SOURCE = "confirm_with_source"
    CONFIRM_WITHOUT_SOURCE = "confirm_without_source"
    CANCEL = "cancel"


# =============================================================================
# TEXT HELPERS
# =============================================================================

def html_to_text(html: str) -> str:
    """Plain text of editor HTML, the way the browser's textContent reads it."""
    if not html:
        return ""
    return BeautifulSoup(html, "html.parser").get_text()


def count_words(text: str) -> int:
    return len((text or "").split())


# =============================================================================
# PASTE WARNING / PASTE EVENTS
# =============================================================================

def should_warn_about_paste(pasted_text: str) -> bool:
    """Pastes of more than MIN_PASTE_WORDS words open the warning dialog."""
    return count_words(pasted_text) > MIN_PASTE_WORDS


def build_paste_warning(pasted_text: str) -> dict:
    """Payload for the paste warning dialog."""
    return {
        "pasted_text": pasted_text,
        "word_count": count_words(pasted_text),
    }


def build_paste_event(pasted_text: str, source_url: str = None) -> PasteEvent:
    """Record of a confirmed paste. No source URL means the student dismissed without one."""
    timestamp = datetime.now(timezone.utc)
    return PasteEvent(
        id=f"paste-{int(timestamp.timestamp() * 1000)}",
        timestamp=timestamp.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
        word_count=count_words(pasted_text),
        source_url=source_url or None,
        dismissed_without_source=not source_url,
        text_preview=(pasted_text or "")[:SNIPPET_LENGTH],
    )


def calculate_ai_suspicion(paste_events: list) -> str:
    """
    Suspicion level from the student's paste history.

    Returns:
        'none', 'low', 'medium' or 'high'
    """
    if not paste_events:
        return "none"

    without_source = [e for e in paste_events if e.dismissed_without_source]
    words_without_source = sum(e.word_count for e in without_source)

    # Many unsourced pastes or a lot of unsourced text
    if len(without_source) >= 5 or words_without_source >= 200:
        return "high"
    if len(without_source) >= 2 or words_without_source >= 50:
        return "medium"
    if len(without_source) >= 1:
        return "low"

    # All pastes have sources
    return "none"


def resolve_paste(submission_id: str, pasted_text: str, decision,
                  source_url: str = None):
    """
    Apply the student's choice from the warning dialog.

    Confirmed pastes are recorded as paste events; a cancelled paste is
    dropped (the editor restores its previous content).

    Returns:
        The recorded PasteEvent, or None when cancelled.
    """
    decision = PasteDecision(decision)
    if decision == PasteDecision.CANCEL:
        return None
    if decision == PasteDecision.CONFIRM_WITHOUT_SOURCE:
        source_url = None
    elif not source_url:
        raise ValueError("source_url is required when confirming with a source")

    event = build_paste_event(pasted_text, source_url)
    try:
        assignment_service.record_paste_event(submission_id, event)
    except Exception as e:
        logger.error("Failed to record paste event for %s: %s", submission_id, e)
    return event


# =============================================================================
# AI FLAGS
# =============================================================================

def build_flag_record(text: str, analysis, flag_type: str = "paste") -> dict:
    """Flag payload for the submission store."""
    return {
        "type": flag_type,
        "confidence": analysis.confidence,
        "text_snippet": text[:SNIPPET_LENGTH],
        "details": FLAG_DETAILS_SEPARATOR.join(analysis.reasons),
    }


def _analyze_and_flag(submission_id: str, text: str):
    analysis = analyze_text_for_ai(text)
    if analysis.is_likely_ai:
        try:
            assignment_service.add_ai_flag(submission_id, build_flag_record(text, analysis))
        except Exception as e:
            logger.error("Failed to save AI flag for %s: %s", submission_id, e)
    return analysis


def check_pasted_text(submission_id: str, pasted_text: str, allow_ai: bool):
    """
    Analyze a paste event.

    Returns:
        AiTextAnalysis, or None when AI is allowed or the paste is too short
        to analyze.
    """
    if allow_ai or not submission_id:
        return None
    if len(pasted_text or "") < MIN_ANALYZED_PASTE_CHARS:
        return None
    return _analyze_and_flag(submission_id, pasted_text)


def check_content_change(submission_id: str, previous_html: str, new_html: str,
                         allow_ai: bool):
    """
    Analyze an editor change that may hide a paste.

    Only a change that grows the plain text by more than
    MIN_ANALYZED_PASTE_CHARS characters is analyzed, and only the part past
    the previous length.

    Returns:
        AiTextAnalysis, or None when nothing was analyzed.
    """
    if allow_ai or not submission_id:
        return None

    plain_text = html_to_text(new_html)
    prev_text = html_to_text(previous_html)
    if len(plain_text) - len(prev_text) <= MIN_ANALYZED_PASTE_CHARS:
        return None

    added_text = plain_text[len(prev_text):]
    return _analyze_and_flag(submission_id, added_text)
