from flask import jsonify
from werkzeug.exceptions import HTTPException
import logging
from app.libs.errors import APIError

logger = logging.getLogger(__name__)


def handle_error(e):
    """Map any exception escaping a view to a JSON body and status code"""
    if isinstance(e, APIError):
        # Client mistakes are routine, server-side APIErrors are not
        log = logger.error if e.status_code >= 500 else logger.warning
        log(f"API Error {e.status_code}: {e.message}")
        return jsonify(e.to_dict()), e.status_code
    elif isinstance(e, HTTPException):
        logger.warning(f"HTTP Error {e.code}: {e.description}")
        return jsonify({"message": e.description}), e.code
    else:
        logger.exception("Unhandled exception")
        return jsonify({"message": "Internal server error"}), 500


def register_error_handlers(app):
    app.register_error_handler(APIError, handle_error)
    app.register_error_handler(Exception, handle_error)
