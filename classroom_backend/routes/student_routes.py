"""
Student Assignment Routes for Vividclass.
Handles starting and submitting assignment work, and AI checks on pasted
or newly added text. Public like the rest of /api/student/ (students sign
in through the class, not through Supabase auth).
"""
import logging

from flask import Blueprint, request, jsonify

from classroom_backend.assignment_config import SUBMISSION_STATUS_LABELS
from classroom_backend.services import assignment_service, paste_monitor
from classroom_backend.services.ai_detection import analyze_text_for_ai

logger = logging.getLogger(__name__)

student_bp = Blueprint('student', __name__)


def _submission_payload(submission):
    data = submission.model_dump()
    data["status_label"] = SUBMISSION_STATUS_LABELS.get(submission.status, submission.status)
    data["ai_suspicion_level"] = paste_monitor.calculate_ai_suspicion(submission.paste_events)
    return data


def _load_submission_and_assignment(submission_id):
    submission = assignment_service.get_submission_by_id(submission_id)
    if submission is None:
        return None, None
    return submission, assignment_service.get_assignment(submission.assignment_id)


# ============ Assignments ============

@student_bp.route('/api/student/classes/<class_id>/assignments')
def list_student_assignments(class_id):
    """Assignments of the student's class with their own submission attached."""
    student_id = request.args.get('student_id')
    if not student_id:
        return jsonify({"error": "student_id is required"}), 400

    assignments = assignment_service.get_assignments_for_student(class_id, student_id)
    return jsonify({"assignments": assignments})


@student_bp.route('/api/student/assignments/<assignment_id>/start', methods=['POST'])
def start_assignment(assignment_id):
    """Create (or return) the student's draft submission."""
    data = request.get_json(silent=True) or {}

    assignment = assignment_service.get_assignment(assignment_id)
    if assignment is None:
        return jsonify({"error": "Assignment not found"}), 404

    try:
        submission = assignment_service.start_assignment(
            student_id=data.get('student_id'),
            assignment_id=assignment_id,
            content_type=data.get('content_type', 'document'),
            content_id=data.get('content_id', ''),
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({
        "submission": _submission_payload(submission),
        "allow_ai": assignment.allow_ai,
    })


# ============ Submissions ============

@student_bp.route('/api/student/submissions')
def list_student_submissions():
    """All submissions of a student."""
    student_id = request.args.get('student_id')
    if not student_id:
        return jsonify({"error": "student_id is required"}), 400

    submissions = assignment_service.get_student_submissions(student_id)
    return jsonify({"submissions": [_submission_payload(s) for s in submissions]})


@student_bp.route('/api/student/submissions/<submission_id>/submit', methods=['POST'])
def submit_assignment(submission_id):
    """Hand in the work."""
    submission = assignment_service.submit_assignment(submission_id)
    if submission is None:
        return jsonify({"error": "Submission not found"}), 404
    return jsonify({"status": "submitted", "submission": _submission_payload(submission)})


@student_bp.route('/api/student/submissions/<submission_id>/paste', methods=['POST'])
def check_paste(submission_id):
    """
    Check pasted text.

    Without a decision: returns the AI analysis (and flags the submission
    when the text looks AI-generated) plus the warning dialog payload.
    With a decision: records the student's choice from the dialog.
    """
    data = request.get_json(silent=True) or {}
    pasted_text = data.get('text') or ''

    submission, assignment = _load_submission_and_assignment(submission_id)
    if submission is None:
        return jsonify({"error": "Submission not found"}), 404
    allow_ai = assignment.allow_ai if assignment else False

    decision = data.get('decision')
    if decision:
        try:
            event = paste_monitor.resolve_paste(
                submission_id, pasted_text, decision, data.get('source_url'))
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({
            "status": "recorded" if event else "cancelled",
            "paste_event": event.model_dump() if event else None,
        })

    analysis = paste_monitor.check_pasted_text(submission_id, pasted_text, allow_ai)
    warning = None
    if not allow_ai and paste_monitor.should_warn_about_paste(pasted_text):
        warning = paste_monitor.build_paste_warning(pasted_text)

    return jsonify({
        "analysis": analysis.to_dict() if analysis else None,
        "warning": warning,
    })


@student_bp.route('/api/student/submissions/<submission_id>/content', methods=['POST'])
def check_content(submission_id):
    """Check an editor change (previous and new HTML) for a hidden paste."""
    data = request.get_json(silent=True) or {}

    submission, assignment = _load_submission_and_assignment(submission_id)
    if submission is None:
        return jsonify({"error": "Submission not found"}), 404
    allow_ai = assignment.allow_ai if assignment else False

    analysis = paste_monitor.check_content_change(
        submission_id,
        data.get('previous_html') or '',
        data.get('html') or '',
        allow_ai,
    )
    return jsonify({"analysis": analysis.to_dict() if analysis else None})


@student_bp.route('/api/student/analyze-text', methods=['POST'])
def analyze_text():
    """Run the AI-text heuristics on raw text without recording anything."""
    data = request.get_json(silent=True) or {}
    return jsonify(analyze_text_for_ai(data.get('text') or '').to_dict())
