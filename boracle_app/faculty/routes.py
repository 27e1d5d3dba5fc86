from flask import current_app, jsonify, abort
from flask_login import current_user

from . import faculty_bp
from .services import build_faculty_map, get_faculty_detail
from ..api_utils import api_success, handle_errors
from ..decorators import session_required


@faculty_bp.route("/lookup", methods=["GET"])
@session_required
@handle_errors("Failed to fetch faculty data")
def faculty_lookup():
    current_app.logger.info("Faculty lookup accessed by %s", current_user.email)
    return api_success(facultyMap=build_faculty_map())


@faculty_bp.route("/<faculty_id>", methods=["GET"])
@session_required
@handle_errors("Failed to fetch faculty")
def faculty_detail(faculty_id):
    data = get_faculty_detail(faculty_id)
    if data is None:
        abort(404, "Faculty not found")
    return jsonify(data)
