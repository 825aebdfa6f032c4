"""
Teacher Assignment API routes for Vividclass.
Handles creating, listing, loading and deleting assignments, reviewing
AI-flagged submissions and grading.
"""
import logging

from flask import Blueprint, request, jsonify, g

from classroom_backend.services import assignment_service

logger = logging.getLogger(__name__)

assignment_bp = Blueprint('assignment', __name__)


def _teacher_id():
    return getattr(g, 'user_id', None)


@assignment_bp.route('/api/assignments', methods=['POST'])
def create_assignment():
    """Create an assignment for a class."""
    data = request.get_json(silent=True) or {}

    try:
        assignment = assignment_service.create_assignment(
            class_id=data.get('class_id'),
            title=data.get('title', ''),
            description=data.get('description', ''),
            type=data.get('type', 'document'),
            allow_ai=data.get('allow_ai', False),
            due_date=data.get('due_date'),
            created_by=data.get('created_by') or _teacher_id(),
            subject=data.get('subject'),
            max_points=data.get('max_points'),
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({"status": "created", "assignment": assignment.model_dump()}), 201


@assignment_bp.route('/api/classes/<class_id>/assignments')
def list_class_assignments(class_id):
    """List assignments of a class, newest first."""
    assignments = assignment_service.get_assignments_for_class(class_id)
    return jsonify({"assignments": [a.model_dump() for a in assignments]})


@assignment_bp.route('/api/assignments/<assignment_id>')
def load_assignment(assignment_id):
    """Load a single assignment."""
    assignment = assignment_service.get_assignment(assignment_id)
    if assignment is None:
        return jsonify({"error": "Assignment not found"}), 404
    return jsonify({"assignment": assignment.model_dump()})


@assignment_bp.route('/api/assignments/<assignment_id>', methods=['DELETE'])
def delete_assignment(assignment_id):
    """Delete an assignment."""
    if not assignment_service.delete_assignment(assignment_id):
        return jsonify({"error": "Assignment not found"}), 404
    return jsonify({"status": "deleted"})


@assignment_bp.route('/api/classes/<class_id>/ai-flags')
def list_flagged_submissions(class_id):
    """Submissions of a class with AI detection flags (teacher review)."""
    flagged = assignment_service.get_submissions_with_ai_flags(class_id)
    return jsonify({"submissions": flagged, "total": len(flagged)})


@assignment_bp.route('/api/submissions/<submission_id>/grade', methods=['POST'])
def grade_submission(submission_id):
    """Grade a submitted assignment."""
    data = request.get_json(silent=True) or {}
    if data.get('score') is None:
        return jsonify({"error": "score is required"}), 400

    try:
        submission = assignment_service.grade_submission(
            submission_id,
            score=data.get('score'),
            max_score=data.get('max_score'),
            comment=data.get('teacher_comment'),
            graded_by=data.get('graded_by') or _teacher_id(),
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    if submission is None:
        return jsonify({"error": "Submission not found"}), 404
    return jsonify({"status": "graded", "submission": submission.model_dump()})
