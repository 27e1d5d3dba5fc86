from flask import Blueprint

swaps_bp = Blueprint("swaps", __name__)

from . import routes  # noqa: E402,F401
