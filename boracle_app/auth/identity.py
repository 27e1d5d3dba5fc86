from flask import session, current_app
from flask_login import UserMixin, login_user
from sqlalchemy import select

from .. import db
from ..models import User, epoch_now


class SessionUser(UserMixin):
    """Signed-in identity rebuilt from session claims; never re-read from storage."""

    def __init__(self, email, name=None, role="student", created_at=None):
        self.email = email
        self.name = name
        self.role = role or "student"
        self.created_at = created_at

    def get_id(self):
        return self.email

    def to_claims(self):
        return {
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "createdAt": self.created_at,
        }


def load_session_user(user_id):
    claims = session.get("claims") or {}
    if not user_id or claims.get("email") != user_id:
        return None
    return SessionUser(
        claims.get("email"),
        name=claims.get("name"),
        role=claims.get("role"),
        created_at=claims.get("createdAt"),
    )


def is_institutional_email(email) -> bool:
    domain = (current_app.config.get("INSTITUTIONAL_DOMAIN") or "").lower()
    if not email or not domain:
        return False
    return email.strip().lower().endswith(domain)


def provision_user(email, name):
    """Create the user row on first sign-in; an existing row (and its role) is left untouched."""
    user = db.session.execute(select(User).filter_by(email=email)).scalars().first()
    if user is None:
        user = User(
            email=email,
            user_name=(name or email.split("@")[0]),
            user_role="student",
            created_at=epoch_now(),
        )
        db.session.add(user)
        db.session.commit()
        current_app.logger.info("Created new user profile for %s", email)
    return user


def start_session(user):
    session.clear()
    session.permanent = True
    identity = SessionUser(user.email, name=user.user_name, role=user.user_role, created_at=user.created_at)
    session["claims"] = identity.to_claims()
    login_user(identity)
    return identity


def sign_in(email, name):
    """
    Complete an upstream sign-in. Returns the session identity, or None when
    the email is outside the institutional domain (nothing is created).
    """
    email = (email or "").strip().lower()
    if not is_institutional_email(email):
        current_app.logger.info("Non-institutional email attempted sign-in: %s", email or "<none>")
        return None
    user = provision_user(email, name)
    return start_session(user)
