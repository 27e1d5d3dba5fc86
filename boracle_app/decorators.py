from functools import wraps
from flask import abort
from flask_login import current_user


def session_required(func):
    """Reject the request with 401 unless a signed-in session is present."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not current_user.is_authenticated or not getattr(current_user, "email", None):
            abort(401, "Unauthorized")
        return func(*args, **kwargs)
    return wrapper


def role_required(*roles):
    """
    Decorator to ensure the current user has one of the allowed roles.
    Missing sessions and wrong roles both answer 401 so that callers learn
    nothing about the target resource.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                abort(401, "Unauthorized")

            user_role = (getattr(current_user, "role", "") or "").strip().lower()
            allowed = {r.strip().lower() for r in roles}

            if user_role not in allowed:
                abort(401, "Unauthorized")

            return func(*args, **kwargs)
        return wrapper
    return decorator
