#!/usr/bin/env python3
"""
Vividclass - Student Assignments Backend
========================================
Run: python3 -m classroom_backend.app
Then the API is served at: http://localhost:3000/api/
"""

import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from classroom_backend import __version__
from classroom_backend.audit import get_audit_logs
from classroom_backend.auth import init_auth
from classroom_backend.config import HOST, PORT, DEBUG, config
from classroom_backend.routes import register_routes
from classroom_backend.supabase_client import is_supabase_configured

logger = logging.getLogger(__name__)


def create_app(test_config: dict = None) -> Flask:
    """Build the Flask app with auth, blueprints and JSON error handling."""
    app = Flask(__name__)
    if test_config:
        app.config.update(test_config)
    CORS(app)

    # ══════════════════════════════════════════════════════════════
    # AUTHENTICATION (before blueprints)
    # ══════════════════════════════════════════════════════════════
    init_auth(app)
    register_routes(app)

    @app.route('/api/status')
    def get_status():
        return jsonify({
            "status": "ok",
            "version": __version__,
            "storage": "supabase" if is_supabase_configured() else "local",
        })

    @app.route('/api/audit-log')
    def audit_log_entries():
        """Recent flag / grading actions for the teacher."""
        return jsonify({"entries": get_audit_logs()})

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception("Unhandled error: %s", e)
        return jsonify({"error": "Internal server error"}), 500

    return app


# ══════════════════════════════════════════════════════════════
# MAIN
# ══════════════════════════════════════════════════════════════

if __name__ == '__main__':
    logging.basicConfig(
        level=logging.DEBUG if DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Vividclass backend %s on http://localhost:%d (data dir %s)",
                __version__, PORT, config.data_dir)
    create_app().run(host=HOST, port=PORT, debug=DEBUG)
