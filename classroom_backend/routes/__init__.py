"""
Vividclass API Routes
=====================

All API route blueprints for the Vividclass backend.

Usage:
    from classroom_backend.routes import register_routes
    register_routes(app)
"""
from .assignment_routes import assignment_bp
from .student_routes import student_bp


def register_routes(app):
    """Register all route blueprints with the Flask app."""
    app.register_blueprint(assignment_bp)
    app.register_blueprint(student_bp)


__all__ = [
    'register_routes',
    'assignment_bp',
    'student_bp',
]
