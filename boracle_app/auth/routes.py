from flask import current_app, redirect, session, url_for, jsonify, abort
from flask_login import current_user, logout_user
from authlib.integrations.base_client import OAuthError
from sqlalchemy import select

from . import auth_bp
from .identity import sign_in, start_session
from .. import db, limiter
from ..api_utils import api_success, json_body, handle_errors
from ..models import User


def _google():
    return current_app.extensions["google_oauth"]


@auth_bp.route("/signin/google", methods=["GET"])
@limiter.limit("10 per minute")
def google_signin():
    redirect_uri = url_for("auth.google_callback", _external=True)
    return _google().authorize_redirect(redirect_uri)


@auth_bp.route("/callback/google", methods=["GET"])
@limiter.limit("10 per minute")
@handle_errors("Authentication failed")
def google_callback():
    try:
        token = _google().authorize_access_token()
    except OAuthError as e:
        current_app.logger.info("OAuth token exchange failed: %s", e.error)
        abort(401, "Authentication failed")
    profile = token.get("userinfo") or {}
    identity = sign_in(profile.get("email"), profile.get("name"))
    if identity is None:
        abort(401, "Authentication failed")
    return redirect(current_app.config.get("POST_LOGIN_REDIRECT") or "/")


@auth_bp.route("/dev-login", methods=["POST"])
@limiter.limit("10 per minute")
@handle_errors("Authentication failed")
def dev_login():
    # Developer bypass: existing accounts only, never enabled in production
    if not current_app.config.get("DEV_LOGIN_ENABLED"):
        abort(404, "Not found")
    email = (json_body().get("email") or "").strip().lower()
    if not email:
        abort(400, "Email is required")
    user = db.session.execute(select(User).filter_by(email=email)).scalars().first()
    if user is None:
        abort(404, "User not found")
    identity = start_session(user)
    current_app.logger.info("Developer sign-in as %s", email)
    return api_success(user=identity.to_claims())


@auth_bp.route("/session", methods=["GET"])
def current_session():
    if not current_user.is_authenticated:
        return jsonify({"user": None})
    return jsonify({"user": {
        "email": current_user.email,
        "name": current_user.name,
        "role": current_user.role,
    }})


@auth_bp.route("/signout", methods=["POST"])
def signout():
    if current_user.is_authenticated:
        logout_user()
    session.clear()
    return api_success()
