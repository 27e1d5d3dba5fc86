import enum

from flask import abort

from . import db


class Access(enum.Enum):
    ALLOWED = "allowed"
    FORBIDDEN = "forbidden"
    UNAUTHENTICATED = "unauthenticated"


def can_mutate(user, owner_email, allow_admin=False) -> Access:
    """Decide whether `user` may change or delete a row owned by `owner_email`."""
    if user is None or not getattr(user, "is_authenticated", False):
        return Access.UNAUTHENTICATED
    email = getattr(user, "email", None)
    if not email:
        return Access.UNAUTHENTICATED
    if allow_admin and getattr(user, "role", None) == "admin":
        return Access.ALLOWED
    if owner_email is not None and email == owner_email:
        return Access.ALLOWED
    return Access.FORBIDDEN


def enforce(access: Access, forbidden_message="Forbidden"):
    if access is Access.UNAUTHENTICATED:
        abort(401, "Unauthorized")
    if access is Access.FORBIDDEN:
        abort(403, forbidden_message)


def get_owned_or_abort(model, ident, user, owner_attr, not_found="Not found", forbidden="Forbidden", allow_admin=False):
    """
    Fetch a row by primary key and check ownership before a mutation.
    404 when absent, then 401/403 from `can_mutate`. This is check-then-act:
    a concurrent delete between this read and the caller's write is possible.
    """
    row = db.session.get(model, ident)
    if row is None:
        abort(404, not_found)
    enforce(can_mutate(user, getattr(row, owner_attr), allow_admin=allow_admin), forbidden)
    return row
