from flask import current_app, jsonify, abort
from flask_login import current_user
from sqlalchemy import select, update

from . import swaps_bp
from .services import (
    DECIDED_STATUSES,
    list_swaps,
    parse_swap_offer,
    create_swap_offer,
    list_requests_for,
)
from .. import db, limiter
from ..api_utils import api_success, json_body, handle_errors
from ..authz import get_owned_or_abort
from ..decorators import session_required
from ..models import CourseSwap, SwapRequest, epoch_now

# ==========================================
# SWAP OFFERS
# ==========================================

@swaps_bp.route("", methods=["GET"])
@session_required
@handle_errors("Internal server error")
def list_swap_offers():
    current_app.logger.info("Swap list accessed by %s", current_user.email)
    return jsonify(list_swaps(viewer_email=current_user.email))


@swaps_bp.route("/public", methods=["GET"])
@handle_errors("Internal server error")
def list_public_swap_offers():
    return jsonify(list_swaps(include_owner_flag=False))


@swaps_bp.route("", methods=["POST"])
@session_required
@handle_errors("Internal server error")
def create_swap():
    current_app.logger.info("Swap create accessed by %s", current_user.email)
    try:
        giving, asking = parse_swap_offer(json_body())
    except ValueError as e:
        abort(400, str(e))
    offer = create_swap_offer(
        current_user.email,
        giving,
        asking,
        current_app.config["CURRENT_SEMESTER"],
    )
    return api_success(swapId=offer.swap_id)


@swaps_bp.route("/<swap_id>", methods=["DELETE"])
@session_required
@handle_errors("Failed to delete swap")
def delete_swap(swap_id):
    current_app.logger.info("Swap delete accessed by %s", current_user.email)
    offer = get_owned_or_abort(
        CourseSwap, swap_id, current_user, "u_email",
        not_found="Swap not found",
        forbidden="Access denied. You can only delete your own swaps.",
    )
    # Asked sections and requests go with the offer (ORM cascade)
    db.session.delete(offer)
    db.session.commit()
    return api_success(message="Swap deleted successfully", deletedSwapId=swap_id)


@swaps_bp.route("/<swap_id>", methods=["PATCH"])
@session_required
@handle_errors("Failed to update swap")
def mark_swap_done(swap_id):
    current_app.logger.info("Swap patch accessed by %s", current_user.email)
    offer = get_owned_or_abort(
        CourseSwap, swap_id, current_user, "u_email",
        not_found="Swap not found",
        forbidden="Access denied. You can only update your own swaps.",
    )
    offer.is_done = True
    db.session.commit()
    return api_success(
        message="Swap marked as done",
        updatedSwap={"swapId": offer.swap_id, "isDone": offer.is_done},
    )

# ==========================================
# SWAP REQUESTS
# ==========================================

@swaps_bp.route("/requests", methods=["GET"])
@session_required
@handle_errors("Failed to fetch swap requests")
def list_swap_requests():
    return jsonify(list_requests_for(current_user.email))


@swaps_bp.route("/requests", methods=["POST"])
@session_required
@limiter.limit("20 per minute")
@handle_errors("Internal server error")
def create_swap_request():
    swap_id = json_body().get("swapId")
    if not swap_id or not isinstance(swap_id, str):
        abort(400, "Swap ID is required")

    sender_email = current_user.email
    offer = db.session.get(CourseSwap, swap_id)
    if offer is None:
        abort(404, "Swap not found")
    if offer.u_email == sender_email:
        abort(400, "Cannot request your own swap")

    existing = db.session.execute(
        select(SwapRequest).filter_by(swap_id=swap_id, sender_email=sender_email)
    ).scalars().first()
    if existing is not None:
        abort(400, "You have already requested this swap")

    req = SwapRequest(
        swap_id=swap_id,
        sender_email=sender_email,
        receiver_email=offer.u_email,
        status="PENDING",
        created_at=epoch_now(),
    )
    db.session.add(req)
    db.session.commit()
    current_app.logger.info("Swap request %s created by %s", req.request_id, sender_email)
    return jsonify({"message": "Swap request created successfully", "requestId": req.request_id})


@swaps_bp.route("/requests", methods=["PATCH"])
@session_required
@handle_errors("Failed to mark requests as read")
def mark_outgoing_read():
    result = db.session.execute(
        update(SwapRequest)
        .where(SwapRequest.sender_email == current_user.email)
        .where(SwapRequest.is_read.is_(False))
        .values(is_read=True)
    )
    db.session.commit()
    return api_success(updated=result.rowcount or 0)


@swaps_bp.route("/requests/<request_id>", methods=["PATCH"])
@session_required
@handle_errors("Failed to update request")
def decide_swap_request(request_id):
    status = json_body().get("status")
    if status not in DECIDED_STATUSES:
        abort(400, "Invalid status update")

    # Filtered by receiver: a request that exists but belongs to someone else is a 404
    req = db.session.execute(
        select(SwapRequest).filter_by(request_id=request_id, receiver_email=current_user.email)
    ).scalars().first()
    if req is None:
        abort(404, "Request not found or unauthorized")
    if req.status != "PENDING":
        abort(400, "Request already resolved")

    req.status = status
    # Unread again so the sender picks up the outcome on next fetch
    req.is_read = False
    db.session.commit()
    current_app.logger.info("Swap request %s %s by %s", request_id, status.lower(), current_user.email)
    return jsonify({"message": f"Swap request {status.lower()} successfully"})
