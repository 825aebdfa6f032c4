"""
Vividclass Backend Package
==========================

Flask-based backend for Vividclass student assignments.

Structure:
- routes/: API route blueprints
- services/: Business logic services (AI-text detection, paste checks, assignments)
- models.py: Assignment, submission and flag records
- config.py: Configuration management
"""

from .config import config, Config

__version__ = "1.0.0"

__all__ = ['config', 'Config']
