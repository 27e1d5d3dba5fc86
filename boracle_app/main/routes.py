import requests
from flask import current_app, jsonify
from sqlalchemy import select, func

from . import main_bp
from .. import db, cache
from ..api_utils import api_error, handle_errors
from ..models import CourseSwap, Review, CourseMaterial, ServiceStatus

GITHUB_API = "https://api.github.com"


def _total(model):
    return db.session.execute(select(func.count()).select_from(model)).scalar() or 0


@main_bp.route("/home/stats", methods=["GET"])
@handle_errors("Failed to fetch stats")
def home_stats():
    return jsonify({
        "totalSwaps": _total(CourseSwap),
        "totalReviews": _total(Review),
        "totalMaterials": _total(CourseMaterial),
    })


@main_bp.route("/services", methods=["GET"])
@handle_errors("Failed to fetch services")
def service_status():
    rows = db.session.execute(
        select(ServiceStatus).order_by(ServiceStatus.id.asc())
    ).scalars().all()
    return jsonify([s.to_dict() for s in rows])


def _only_success(rv):
    # Error responses are returned as (response, status) tuples
    return not isinstance(rv, tuple)


@main_bp.route("/contributors", methods=["GET"])
@cache.cached(timeout=3600, response_filter=_only_success)
@handle_errors("Failed to fetch contributors")
def contributors():
    repo = current_app.config["CONTRIBUTORS_REPO"]
    headers = {"Accept": "application/vnd.github.v3+json"}
    token = current_app.config.get("GITHUB_TOKEN")
    if token:
        headers["Authorization"] = f"token {token}"

    try:
        resp = requests.get(f"{GITHUB_API}/repos/{repo}/contributors", headers=headers, timeout=10)
    except requests.RequestException:
        current_app.logger.exception("Contributors fetch failed for %s", repo)
        return api_error("Failed to fetch contributors", 500)

    if not resp.ok:
        current_app.logger.warning("GitHub API error %s for %s", resp.status_code, repo)
        body = jsonify({
            "error": f"GitHub API error: {resp.status_code} {resp.reason}",
            "details": resp.text,
        })
        return body, resp.status_code

    return jsonify(resp.json())
