"""
Assignment, submission and AI-flag records.

These are stored as plain dicts (local JSON store / Supabase rows) and
validated through the pydantic models below on the way in and out.
"""
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .assignment_config import (
    ASSIGNMENT_TYPES, CONTENT_TYPES, SUBMISSION_STATUSES, FLAG_TYPES,
)


class AIDetectionFlag(BaseModel):
    id: str
    timestamp: str
    type: str  # "paste", "generation", "pattern"
    confidence: float  # 0-1
    text_snippet: str  # first 100 chars of flagged text
    details: Optional[str] = None

    @field_validator("type")
    @classmethod
    def _known_type(cls, value):
        if value not in FLAG_TYPES:
            raise ValueError(f"Unknown flag type: {value}")
        return value


class PasteEvent(BaseModel):
    id: str
    timestamp: str
    word_count: int
    source_url: Optional[str] = None
    dismissed_without_source: bool
    text_preview: str


class StudentAssignment(BaseModel):
    id: str
    class_id: str
    title: str
    description: str = ""
    type: str = "document"
    allow_ai: bool = False
    due_date: Optional[str] = None
    created_by: str = "unknown"
    created_at: str
    updated_at: Optional[str] = None
    max_points: Optional[float] = None
    subject: Optional[str] = None

    @field_validator("type")
    @classmethod
    def _known_type(cls, value):
        if value not in ASSIGNMENT_TYPES:
            raise ValueError(f"Unknown assignment type: {value}")
        return value


class StudentSubmission(BaseModel):
    id: str
    student_id: str
    assignment_id: str
    content_type: str
    content_id: str
    status: str = "draft"
    started_at: str
    submitted_at: Optional[str] = None
    ai_flags: List[AIDetectionFlag] = Field(default_factory=list)
    ai_warning_shown: bool = False
    paste_events: List[PasteEvent] = Field(default_factory=list)
    # Grading
    score: Optional[float] = None
    max_score: Optional[float] = None
    teacher_comment: Optional[str] = None
    graded_at: Optional[str] = None
    graded_by: Optional[str] = None

    @field_validator("content_type")
    @classmethod
    def _known_content_type(cls, value):
        if value not in CONTENT_TYPES:
            raise ValueError(f"Unknown content type: {value}")
        return value

    @field_validator("status")
    @classmethod
    def _known_status(cls, value):
        if value not in SUBMISSION_STATUSES:
            raise ValueError(f"Unknown submission status: {value}")
        return value


def map_supabase_assignment(data: dict) -> StudentAssignment:
    """Build an assignment from a Supabase row, ignoring unknown columns."""
    return StudentAssignment(
        id=data.get("id"),
        class_id=data.get("class_id"),
        title=data.get("title") or "",
        description=data.get("description") or "",
        type=data.get("type") or "document",
        allow_ai=bool(data.get("allow_ai")),
        due_date=data.get("due_date"),
        created_by=data.get("created_by") or "unknown",
        created_at=data.get("created_at") or "",
        updated_at=data.get("updated_at"),
        max_points=data.get("max_points"),
        subject=data.get("subject"),
    )


def map_supabase_submission(data: dict) -> StudentSubmission:
    """Build a submission from a Supabase row. Missing flag columns default to empty."""
    return StudentSubmission(
        id=data.get("id"),
        student_id=data.get("student_id"),
        assignment_id=data.get("assignment_id"),
        content_type=data.get("content_type") or "document",
        content_id=data.get("content_id") or "",
        status=data.get("status") or "draft",
        started_at=data.get("started_at") or "",
        submitted_at=data.get("submitted_at"),
        ai_flags=data.get("ai_flags") or [],
        ai_warning_shown=data.get("ai_warning_shown") or False,
        paste_events=data.get("paste_events") or [],
        score=data.get("score"),
        max_score=data.get("max_score"),
        teacher_comment=data.get("teacher_comment"),
        graded_at=data.get("graded_at"),
        graded_by=data.get("graded_by"),
    )
