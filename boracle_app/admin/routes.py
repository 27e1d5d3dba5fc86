import os

from flask import current_app, jsonify, request, abort
from flask_login import current_user

from . import admin_bp
from .services import list_users, delete_user
from .. import db
from ..api_utils import api_success, json_body, handle_errors
from ..decorators import role_required
from ..faculty.services import read_csv_rows, read_xlsx_rows, import_faculty_rows
from ..models import CourseSwap

# ==========================================
# USERS
# ==========================================

@admin_bp.route("/users", methods=["GET"])
@role_required("admin")
@handle_errors("Failed to fetch users")
def admin_list_users():
    current_app.logger.info("Admin user list accessed by %s", current_user.email)
    return jsonify(list_users())


@admin_bp.route("/users", methods=["DELETE"])
@role_required("admin")
@handle_errors("Failed to delete user")
def admin_delete_user():
    email = json_body().get("email")
    if not email or not isinstance(email, str):
        abort(400, "Email is required")
    if not delete_user(email):
        abort(404, "User not found")
    current_app.logger.info("User %s deleted by admin %s", email, current_user.email)
    return api_success(message="User deleted successfully", deletedUserEmail=email)

# ==========================================
# SWAPS
# ==========================================

@admin_bp.route("/swap/<swap_id>", methods=["DELETE"])
@role_required("admin")
@handle_errors("Failed to delete swap")
def admin_delete_swap(swap_id):
    offer = db.session.get(CourseSwap, swap_id)
    if offer is None:
        abort(404, "Swap not found")
    db.session.delete(offer)
    db.session.commit()
    current_app.logger.info("Swap %s deleted by admin %s", swap_id, current_user.email)
    return api_success(message="Swap deleted successfully", deletedSwapId=swap_id)

# ==========================================
# FACULTY IMPORT
# ==========================================

def _truthy(value):
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")


def _read_upload():
    """Returns (headers, rows, dry_run) from a multipart upload or a JSON body."""
    upload = request.files.get("file")
    if upload is not None and upload.filename:
        dry_run = _truthy(request.form.get("dryRun"))
        ext = os.path.splitext(upload.filename)[1].lower()
        if ext == ".xlsx":
            try:
                headers, rows = read_xlsx_rows(upload.stream)
            except Exception:
                current_app.logger.exception("Unreadable workbook %s", upload.filename)
                abort(400, "Could not read Excel file")
            return headers, rows, dry_run
        if ext == ".csv":
            try:
                text = upload.read().decode("utf-8")
            except UnicodeDecodeError:
                abort(400, "CSV file must be UTF-8 encoded")
            headers, rows = read_csv_rows(text)
            return headers, rows, dry_run
        abort(400, "Only .csv and .xlsx files are supported")

    body = request.get_json(silent=True) or {}
    text = body.get("file") if isinstance(body, dict) else None
    if not text or not isinstance(text, str):
        abort(400, "No file provided")
    headers, rows = read_csv_rows(text)
    return headers, rows, _truthy(body.get("dryRun"))


@admin_bp.route("/import/faculty", methods=["POST"])
@role_required("admin")
@handle_errors("Internal server error")
def admin_import_faculty():
    headers, rows, dry_run = _read_upload()
    if not headers:
        abort(400, "No data found in file")
    try:
        results = import_faculty_rows(headers, rows, dry_run=dry_run)
    except ValueError as e:
        abort(400, str(e))
    current_app.logger.info(
        "Faculty import by %s: %s ok, %s failed (dry_run=%s)",
        current_user.email, results["successCount"], results["errorCount"], dry_run,
    )
    return jsonify(results)
