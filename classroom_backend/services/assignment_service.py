"""
Student Assignments Service
===========================
Manages teacher assignments, student submissions and the AI detection
flags attached to them.

Writes go to the local JSON store first and are then mirrored to Supabase.
Reads try Supabase first and fall back to the local store when Supabase is
not configured, fails, or has no rows. Supabase errors are logged and
never surfaced to the caller.
"""

import logging
import math
import random
import string
import time
from datetime import datetime, timezone

from pydantic import ValidationError

from classroom_backend import audit
from classroom_backend.config import ASSIGNMENTS_FILE as _DEFAULT_ASSIGNMENTS_FILE
from classroom_backend.config import SUBMISSIONS_FILE as _DEFAULT_SUBMISSIONS_FILE
from classroom_backend.assignment_config import SUBMISSION_STATUSES
from classroom_backend.local_store import (
    load_records, append_record, update_record, remove_record,
)
from classroom_backend.models import (
    AIDetectionFlag, PasteEvent, StudentAssignment, StudentSubmission,
    map_supabase_assignment, map_supabase_submission,
)
from classroom_backend.supabase_client import get_supabase, is_supabase_configured

logger = logging.getLogger(__name__)

ASSIGNMENTS_FILE = str(_DEFAULT_ASSIGNMENTS_FILE)
SUBMISSIONS_FILE = str(_DEFAULT_SUBMISSIONS_FILE)

ASSIGNMENTS_TABLE = 'student_assignments'
SUBMISSIONS_TABLE = 'student_submissions'
STUDENTS_TABLE = 'students'

DEFAULT_STUDENT_NAME = 'Student'


# =============================================================================
# HELPERS
# =============================================================================

def _generate_id(prefix: str) -> str:
    """e.g. 'assign_1718000000000_k3j9x0a1b'."""
    suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def _from_supabase(label: str, query_fn):
    """
    Run a Supabase read. Returns the row list, or None when Supabase is
    unavailable or the query fails.
    """
    if not is_supabase_configured():
        return None
    try:
        return query_fn(get_supabase()).data
    except Exception as e:
        logger.info("[%s] Supabase not available, using local store: %s", label, e)
        return None


def _mirror_to_supabase(label: str, write_fn):
    """Run a Supabase write. Failures are logged and skipped."""
    if not is_supabase_configured():
        return None
    try:
        return write_fn(get_supabase()).data
    except Exception as e:
        logger.info("[%s] Supabase write skipped (table may not exist): %s", label, e)
        return None


def _parse_records(records: list, parse_fn, label: str) -> list:
    parsed = []
    for record in records:
        try:
            parsed.append(parse_fn(record))
        except ValidationError as e:
            logger.warning("[%s] Skipping invalid record %s: %s", label, record.get("id"), e)
    return parsed


def _local_assignments() -> list:
    return _parse_records(load_records(ASSIGNMENTS_FILE),
                          lambda r: StudentAssignment(**r), "Assignments")


def _local_submissions() -> list:
    return _parse_records(load_records(SUBMISSIONS_FILE),
                          lambda r: StudentSubmission(**r), "Submissions")


def _newest_first(items: list, attr: str) -> list:
    return sorted(items, key=lambda item: getattr(item, attr) or "", reverse=True)


# =============================================================================
# ASSIGNMENT CRUD (Teacher side)
# =============================================================================

def create_assignment(class_id: str, title: str, description: str = "",
                      type: str = "document", allow_ai: bool = False,
                      due_date: str = None, created_by: str = None,
                      subject: str = None, max_points: float = None) -> StudentAssignment:
    """
    Create a new assignment for a class.

    Raises:
        ValueError: missing class/title or unknown assignment type.
    """
    if not class_id:
        raise ValueError("class_id is required")
    if not title or not title.strip():
        raise ValueError("title is required")

    assignment = StudentAssignment(
        id=_generate_id("assign"),
        class_id=class_id,
        title=title.strip(),
        description=description or "",
        type=type,
        allow_ai=bool(allow_ai),
        due_date=due_date,
        created_by=created_by or "unknown",
        created_at=_now_iso(),
        max_points=max_points,
        subject=subject,
    )

    append_record(ASSIGNMENTS_FILE, assignment.model_dump())

    _mirror_to_supabase("Assignments", lambda db: db.table(ASSIGNMENTS_TABLE).insert(
        assignment.model_dump(exclude={"updated_at"}, exclude_none=True)
    ).execute())

    logger.info("[Assignments] Created %s for class %s", assignment.id, class_id)
    return assignment


def get_assignments_for_class(class_id: str) -> list:
    """Assignments of a class, newest first."""
    start_time = time.time()
    rows = _from_supabase("Assignments", lambda db: db.table(ASSIGNMENTS_TABLE)
                          .select("*").eq("class_id", class_id)
                          .order("created_at", desc=True).execute())
    if rows:
        duration_ms = (time.time() - start_time) * 1000
        logger.debug("[Assignments] Supabase returned %d rows in %.0fms", len(rows), duration_ms)
        return _parse_records(rows, map_supabase_assignment, "Assignments")

    assignments = [a for a in _local_assignments() if a.class_id == class_id]
    logger.debug("[Assignments] Using local store, found %d assignments", len(assignments))
    return _newest_first(assignments, "created_at")


def get_assignments_for_student(class_id: str, student_id: str = None) -> list:
    """
    Assignments of a class, each as a dict with the student's submission
    (or None) under the 'submission' key. Without a student_id no
    submission is attached.
    """
    assignments = get_assignments_for_class(class_id)
    submissions = get_student_submissions(student_id) if student_id else []

    by_assignment = {}
    for submission in submissions:
        by_assignment.setdefault(submission.assignment_id, submission)

    result = []
    for assignment in assignments:
        submission = by_assignment.get(assignment.id)
        result.append({
            **assignment.model_dump(),
            "submission": submission.model_dump() if submission else None,
        })
    return result


def get_assignment(assignment_id: str):
    """Get a single assignment by ID, or None."""
    rows = _from_supabase("Assignments", lambda db: db.table(ASSIGNMENTS_TABLE)
                          .select("*").eq("id", assignment_id).limit(1).execute())
    parsed = _parse_records(rows or [], map_supabase_assignment, "Assignments")
    if parsed:
        return parsed[0]

    for assignment in _local_assignments():
        if assignment.id == assignment_id:
            return assignment
    return None


def delete_assignment(assignment_id: str) -> bool:
    """Delete an assignment. Returns True if it existed anywhere."""
    deleted = remove_record(ASSIGNMENTS_FILE, assignment_id)

    rows = _mirror_to_supabase("Assignments", lambda db: db.table(ASSIGNMENTS_TABLE)
                               .delete().eq("id", assignment_id).execute())
    if rows:
        deleted = True

    if deleted:
        audit.audit_log("DELETE_ASSIGNMENT", f"assignment={assignment_id}", user="teacher")
    return deleted


# =============================================================================
# SUBMISSION CRUD (Student side)
# =============================================================================

def start_assignment(student_id: str, assignment_id: str,
                     content_type: str, content_id: str) -> StudentSubmission:
    """
    Start working on an assignment (create draft submission).

    A student has one submission per assignment; starting again returns
    the existing one.
    """
    if not student_id or not assignment_id:
        raise ValueError("student_id and assignment_id are required")

    existing = get_submission(student_id, assignment_id)
    if existing:
        return existing

    submission = StudentSubmission(
        id=_generate_id("sub"),
        student_id=student_id,
        assignment_id=assignment_id,
        content_type=content_type,
        content_id=content_id or "",
        status="draft",
        started_at=_now_iso(),
    )

    append_record(SUBMISSIONS_FILE, submission.model_dump())

    _mirror_to_supabase("Submissions", lambda db: db.table(SUBMISSIONS_TABLE).insert({
        "id": submission.id,
        "student_id": student_id,
        "assignment_id": assignment_id,
        "content_type": submission.content_type,
        "content_id": submission.content_id,
        "status": "draft",
        "started_at": submission.started_at,
        "ai_flags": [],
    }).execute())

    return submission


def get_submission(student_id: str, assignment_id: str):
    """Get submission for a specific assignment and student, or None."""
    rows = _from_supabase("Submissions", lambda db: db.table(SUBMISSIONS_TABLE)
                          .select("*").eq("student_id", student_id)
                          .eq("assignment_id", assignment_id).limit(1).execute())
    parsed = _parse_records(rows or [], map_supabase_submission, "Submissions")
    if parsed:
        return parsed[0]

    for submission in _local_submissions():
        if submission.student_id == student_id and submission.assignment_id == assignment_id:
            return submission
    return None


def get_submission_by_id(submission_id: str):
    """
    Get a submission by ID, or None.

    A submission only known to Supabase is copied into the local store so
    later updates have a record to change.
    """
    for submission in _local_submissions():
        if submission.id == submission_id:
            return submission

    rows = _from_supabase("Submissions", lambda db: db.table(SUBMISSIONS_TABLE)
                          .select("*").eq("id", submission_id).limit(1).execute())
    parsed = _parse_records(rows or [], map_supabase_submission, "Submissions")
    if not parsed:
        return None

    submission = parsed[0]
    append_record(SUBMISSIONS_FILE, submission.model_dump())
    return submission


def get_student_submissions(student_id: str) -> list:
    """All submissions of a student, newest first."""
    rows = _from_supabase("Submissions", lambda db: db.table(SUBMISSIONS_TABLE)
                          .select("*").eq("student_id", student_id)
                          .order("started_at", desc=True).execute())
    if rows:
        return _parse_records(rows, map_supabase_submission, "Submissions")

    submissions = [s for s in _local_submissions() if s.student_id == student_id]
    return _newest_first(submissions, "started_at")


def _update_submission(submission_id: str, changes_fn):
    """
    Apply changes_fn(submission) -> dict of field changes to a submission
    and save it locally. Returns the updated submission, or None.
    """
    if get_submission_by_id(submission_id) is None:
        return None

    def apply(record):
        current = StudentSubmission(**record)
        return StudentSubmission(**{**record, **changes_fn(current)}).model_dump()

    record = update_record(SUBMISSIONS_FILE, submission_id, apply)
    return StudentSubmission(**record) if record else None


def update_submission_status(submission_id: str, status: str):
    """
    Update submission status. Moving to 'submitted' stamps submitted_at.

    Returns the updated submission, or None if it doesn't exist.
    """
    if status not in SUBMISSION_STATUSES:
        raise ValueError(f"Unknown submission status: {status}")

    changes = {"status": status}
    if status == "submitted":
        changes["submitted_at"] = _now_iso()

    updated = _update_submission(submission_id, lambda s: changes)
    if updated is None:
        logger.info("[Submissions] Status update for unknown submission %s", submission_id)
        return None

    _mirror_to_supabase("Submissions", lambda db: db.table(SUBMISSIONS_TABLE)
                        .update(changes).eq("id", submission_id).execute())
    return updated


def submit_assignment(submission_id: str):
    """Submit an assignment."""
    return update_submission_status(submission_id, "submitted")


def grade_submission(submission_id: str, score: float, max_score: float = None,
                     comment: str = None, graded_by: str = None):
    """
    Grade a submission. max_score defaults to the assignment's max_points.

    Raises:
        ValueError: score is negative, not a finite number, or above max_score.
    """
    try:
        score = float(score)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid score: {score!r}")
    if not math.isfinite(score):
        raise ValueError(f"Invalid score: {score!r}")
    if score < 0:
        raise ValueError("score must not be negative")

    submission = get_submission_by_id(submission_id)
    if submission is None:
        return None

    if max_score is None:
        assignment = get_assignment(submission.assignment_id)
        max_score = assignment.max_points if assignment else None
    if max_score is not None:
        try:
            max_score = float(max_score)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid max_score: {max_score!r}")
        if not math.isfinite(max_score):
            raise ValueError(f"Invalid max_score: {max_score!r}")
        if score > max_score:
            raise ValueError(f"score {score} exceeds max_score {max_score}")

    changes = {
        "status": "graded",
        "score": score,
        "max_score": max_score,
        "teacher_comment": comment,
        "graded_at": _now_iso(),
        "graded_by": graded_by,
    }
    updated = _update_submission(submission_id, lambda s: changes)

    _mirror_to_supabase("Submissions", lambda db: db.table(SUBMISSIONS_TABLE)
                        .update(changes).eq("id", submission_id).execute())
    audit.audit_log("GRADE_SUBMISSION", f"submission={submission_id} score={score}",
                    user=graded_by or "teacher")
    return updated


# =============================================================================
# AI DETECTION
# =============================================================================

def add_ai_flag(submission_id: str, flag: dict):
    """
    Add an AI detection flag to a submission.

    Args:
        flag: {type, confidence, text_snippet, details}; id and timestamp
              are assigned here.

    Returns:
        The stored AIDetectionFlag, or None if the submission doesn't exist.
    """
    new_flag = AIDetectionFlag(**{
        **flag,
        "id": _generate_id("flag"),
        "timestamp": _now_iso(),
    })

    updated = _update_submission(submission_id, lambda s: {
        "ai_flags": [f.model_dump() for f in s.ai_flags] + [new_flag.model_dump()],
        "ai_warning_shown": True,
    })
    if updated is None:
        logger.info("[AI Flags] Submission %s not found, flag dropped", submission_id)
        return None

    _mirror_to_supabase("AI Flags", lambda db: db.table(SUBMISSIONS_TABLE).update({
        "ai_flags": [f.model_dump() for f in updated.ai_flags],
        "ai_warning_shown": True,
    }).eq("id", submission_id).execute())

    audit.audit_log("AI_FLAG", f"submission={submission_id} type={new_flag.type} "
                               f"confidence={new_flag.confidence:.2f}")
    return new_flag


def record_paste_event(submission_id: str, event: PasteEvent):
    """Append a paste event to a submission. Returns the updated submission, or None."""
    updated = _update_submission(submission_id, lambda s: {
        "paste_events": [e.model_dump() for e in s.paste_events] + [event.model_dump()],
    })
    if updated is None:
        return None

    _mirror_to_supabase("Paste Events", lambda db: db.table(SUBMISSIONS_TABLE).update({
        "paste_events": [e.model_dump() for e in updated.paste_events],
    }).eq("id", submission_id).execute())
    return updated


def _student_names(student_ids: list) -> dict:
    if not student_ids:
        return {}
    rows = _from_supabase("Students", lambda db: db.table(STUDENTS_TABLE)
                          .select("id, name").in_("id", student_ids).execute())
    return {row.get("id"): row.get("name") for row in rows or []}


def get_submissions_with_ai_flags(class_id: str) -> list:
    """
    Flagged submissions for a class (teacher view).

    Returns:
        List of {submission, assignment, student_name} dicts.
    """
    assignments = {a.id: a for a in get_assignments_for_class(class_id)}
    if not assignments:
        return []

    rows = _from_supabase("AI Flags", lambda db: db.table(SUBMISSIONS_TABLE)
                          .select("*").in_("assignment_id", list(assignments)).execute())
    if rows:
        submissions = _parse_records(rows, map_supabase_submission, "Submissions")
    else:
        submissions = _local_submissions()

    flagged = [s for s in submissions
               if s.assignment_id in assignments and s.ai_flags]
    names = _student_names(sorted({s.student_id for s in flagged}))

    return [{
        "submission": submission.model_dump(),
        "assignment": assignments[submission.assignment_id].model_dump(),
        "student_name": names.get(submission.student_id) or DEFAULT_STUDENT_NAME,
    } for submission in flagged]
