from flask import Blueprint

routines_bp = Blueprint("routines", __name__)

from . import routes  # noqa: E402,F401
