from functools import wraps

from flask import jsonify, request, abort, current_app
from werkzeug.exceptions import HTTPException

from . import db


def api_success(status=200, **payload):
    body = {"success": True}
    body.update(payload)
    return jsonify(body), status


def api_error(message="", status=400):
    return jsonify({"error": message}), status


def json_body():
    """Parsed JSON object body; 400 when the body is not a JSON object."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        abort(400, "Request body must be a JSON object")
    return data


def handle_errors(message):
    """
    Handler boundary: HTTP errors pass through to the app error handler,
    anything else is rolled back, logged and answered with a generic 500.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(*args, **kwargs):
            try:
                return view_func(*args, **kwargs)
            except HTTPException:
                raise
            except Exception:
                db.session.rollback()
                current_app.logger.exception("%s (%s %s)", message, request.method, request.path)
                return api_error(message, 500)
        return _wrapped
    return decorator
