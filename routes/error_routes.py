"""Error handlers."""

import logging

from flask import jsonify

from services.log_helpers import log_error

logger = logging.getLogger(__name__)


def register_error_handlers(app) -> None:
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def server_error(error):
        log_error(logger, "Unhandled error", getattr(error, "original_exception", None) or error)
        return jsonify({"error": "Server error occurred"}), 500
