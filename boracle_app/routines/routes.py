import json

from flask import current_app, abort
from flask_login import current_user
from sqlalchemy import select

from . import routines_bp
from .. import db
from ..api_utils import api_success, json_body, handle_errors
from ..authz import get_owned_or_abort
from ..decorators import session_required
from ..models import User, SavedRoutine, SavedMergedRoutine, epoch_now

ANONYMOUS_OWNER = "Anonymous"


def _owner_first_name(email):
    owner = db.session.get(User, email) if email else None
    return owner.first_name if owner else None


def _check_claimed_owner(body):
    """A client-supplied owner must match the session; it is never used as the owner."""
    if "email" not in body:
        return
    claimed = body.get("email")
    if not isinstance(claimed, str) or claimed.strip().lower() != current_user.email:
        abort(403, "Email mismatch")


def _routine_dict(r):
    return {
        "id": r.routine_id,
        "routineStr": r.routine_str,
        "routineName": r.routine_name,
        "email": r.email,
        "createdAt": r.created_at,
        "semester": r.semester,
    }


def _merged_dict(r):
    return {
        "id": r.routine_id,
        "routineData": r.routine_data,
        "email": r.email,
        "createdAt": r.created_at,
        "semester": r.semester,
    }

# ==========================================
# SAVED ROUTINES
# ==========================================

@routines_bp.route("/routine", methods=["GET"])
@session_required
@handle_errors("Failed to fetch routines")
def list_routines():
    current_app.logger.info("Routine list accessed by %s", current_user.email)
    rows = db.session.execute(
        select(SavedRoutine)
        .filter_by(email=current_user.email)
        .order_by(SavedRoutine.created_at.desc())
    ).scalars().all()
    return api_success(routines=[_routine_dict(r) for r in rows])


@routines_bp.route("/routine", methods=["POST"])
@session_required
@handle_errors("Failed to save routine")
def create_routine():
    body = json_body()
    _check_claimed_owner(body)
    routine_str = body.get("routineStr")
    if not isinstance(routine_str, str) or not routine_str.strip():
        abort(400, "Routine string is required")
    routine_name = body.get("routineName")
    if routine_name is not None and not isinstance(routine_name, str):
        abort(400, "Routine name must be a string")

    routine = SavedRoutine(
        routine_str=routine_str,
        routine_name=(routine_name or None),
        email=current_user.email,
        semester=current_app.config["CURRENT_SEMESTER"],
        created_at=epoch_now(),
    )
    db.session.add(routine)
    db.session.commit()
    current_app.logger.info("Routine %s saved by %s", routine.routine_id, current_user.email)
    return api_success(routineId=routine.routine_id)


@routines_bp.route("/routine/<routine_id>", methods=["GET"])
@handle_errors("Failed to fetch routine")
def get_routine(routine_id):
    routine = db.session.get(SavedRoutine, routine_id)
    if routine is None:
        abort(404, "Routine not found")
    data = _routine_dict(routine)
    data["email"] = ANONYMOUS_OWNER
    data["ownerName"] = _owner_first_name(routine.email)
    return api_success(routine=data)


@routines_bp.route("/routine/<routine_id>", methods=["DELETE"])
@session_required
@handle_errors("Failed to delete routine")
def delete_routine(routine_id):
    current_app.logger.info("Routine delete accessed by %s", current_user.email)
    routine = get_owned_or_abort(
        SavedRoutine, routine_id, current_user, "email",
        not_found="Routine not found",
        forbidden="Access denied. You can only delete your own routines.",
    )
    db.session.delete(routine)
    db.session.commit()
    return api_success(message="Routine deleted successfully", deletedRoutineId=routine_id)

# ==========================================
# MERGED ROUTINES
# ==========================================

@routines_bp.route("/merged-routine", methods=["GET"])
@session_required
@handle_errors("Failed to fetch merged routines")
def list_merged_routines():
    current_app.logger.info("Merged routine list accessed by %s", current_user.email)
    rows = db.session.execute(
        select(SavedMergedRoutine)
        .filter_by(email=current_user.email)
        .order_by(SavedMergedRoutine.created_at.desc())
    ).scalars().all()
    return api_success(routines=[_merged_dict(r) for r in rows])


@routines_bp.route("/merged-routine", methods=["POST"])
@session_required
@handle_errors("Failed to save merged routine")
def create_merged_routine():
    body = json_body()
    _check_claimed_owner(body)
    routine_data = body.get("routineData")
    if not routine_data:
        abort(400, "Routine data is required")
    if not isinstance(routine_data, str):
        # Clients may post the [{friendName, sectionIds}] structure directly
        routine_data = json.dumps(routine_data)

    routine = SavedMergedRoutine(
        routine_data=routine_data,
        email=current_user.email,
        semester=current_app.config["CURRENT_SEMESTER"],
        created_at=epoch_now(),
    )
    db.session.add(routine)
    db.session.commit()
    current_app.logger.info("Merged routine %s saved by %s", routine.routine_id, current_user.email)
    return api_success(routineId=routine.routine_id)


@routines_bp.route("/merged-routine/<routine_id>", methods=["GET"])
@handle_errors("Failed to fetch merged routine")
def get_merged_routine(routine_id):
    routine = db.session.get(SavedMergedRoutine, routine_id)
    if routine is None:
        abort(404, "Merged routine not found")
    data = _merged_dict(routine)
    data["email"] = ANONYMOUS_OWNER
    data["ownerName"] = _owner_first_name(routine.email)
    return api_success(routine=data)


@routines_bp.route("/merged-routine/<routine_id>", methods=["DELETE"])
@session_required
@handle_errors("Failed to delete merged routine")
def delete_merged_routine(routine_id):
    current_app.logger.info("Merged routine delete accessed by %s", current_user.email)
    routine = get_owned_or_abort(
        SavedMergedRoutine, routine_id, current_user, "email",
        not_found="Merged routine not found",
        forbidden="Access denied. You can only delete your own merged routines.",
    )
    db.session.delete(routine)
    db.session.commit()
    return api_success(message="Merged routine deleted successfully", deletedRoutineId=routine_id)
