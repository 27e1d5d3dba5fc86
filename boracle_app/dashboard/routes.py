from flask import current_app, jsonify
from flask_login import current_user
from sqlalchemy import select, func

from . import dashboard_bp
from .. import db
from ..api_utils import handle_errors
from ..decorators import session_required
from ..models import Review, CourseMaterial, CourseSwap, Vote

RECENT_LIMIT = 5


def _count(column, email):
    return db.session.execute(
        select(func.count()).where(column == email)
    ).scalar() or 0


@dashboard_bp.route("/userStatCount", methods=["GET"])
@session_required
@handle_errors("Internal server error")
def user_stat_count():
    email = current_user.email
    current_app.logger.info("Dashboard accessed by %s", email)
    return jsonify({
        "counts": {
            "reviews": _count(Review.u_email, email),
            "materials": _count(CourseMaterial.u_email, email),
            "swaps": _count(CourseSwap.u_email, email),
            "votes": _count(Vote.u_email, email),
        }
    })


@dashboard_bp.route("/recentActivity", methods=["GET"])
@session_required
@handle_errors("Internal server error")
def recent_activity():
    email = current_user.email
    current_app.logger.info("Dashboard accessed by %s", email)
    reviews = db.session.execute(
        select(Review)
        .filter_by(u_email=email)
        .order_by(Review.created_at.desc())
        .limit(RECENT_LIMIT)
    ).scalars().all()
    materials = db.session.execute(
        select(CourseMaterial)
        .filter_by(u_email=email)
        .order_by(CourseMaterial.created_at.desc())
        .limit(RECENT_LIMIT)
    ).scalars().all()
    return jsonify({
        "recentActivities": {
            "reviews": [r.to_dict() for r in reviews],
            "materials": [m.to_dict() for m in materials],
        }
    })
