import os
import logging
from datetime import timedelta
from urllib.parse import quote_plus

from flask import Flask, request
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_caching import Cache
from authlib.integrations.flask_client import OAuth
from werkzeug.exceptions import HTTPException

# Global extensions
db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()


def _rate_key():
    try:
        ip = (request.headers.get("X-Forwarded-For") or get_remote_address() or "local")
        path = (getattr(request, "path", "/") or "/")
        return f"{ip}|{path}"
    except Exception:
        return "local"


limiter = Limiter(key_func=_rate_key)
cache = Cache()


def _database_url():
    database_url = os.environ.get("DATABASE_URL")
    if database_url:
        return database_url
    host = os.environ.get("DB_HOST")
    if host:
        user = quote_plus(os.environ.get("DB_USER", ""))
        password = quote_plus(os.environ.get("DB_PASS", ""))
        port = os.environ.get("DB_PORT", "5432")
        name = os.environ.get("DB_NAME", "")
        return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{name}"
    db_path = os.path.join(os.path.dirname(__file__), "..", "portal.db")
    return f"sqlite:///{os.path.abspath(db_path)}"


def create_app(config=None):
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY") or os.environ.get("AUTH_SECRET") or "dev-secret-key"

    # Session lifetime is fixed at sign-in; claims are not refreshed per request
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(days=3)
    app.config["SESSION_REFRESH_EACH_REQUEST"] = False
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"

    REDIS_URL = os.environ.get("REDIS_URL")
    if REDIS_URL:
        app.config["CACHE_TYPE"] = "RedisCache"
        app.config["CACHE_REDIS_URL"] = REDIS_URL
        app.config["RATELIMIT_STORAGE_URI"] = REDIS_URL
    else:
        app.config["CACHE_TYPE"] = "SimpleCache"

    # Academic settings
    app.config["CURRENT_SEMESTER"] = os.environ.get("CURRENT_SEMESTER", "SPRING2026")
    app.config["INSTITUTIONAL_DOMAIN"] = os.environ.get("INSTITUTIONAL_DOMAIN", "@g.bracu.ac.bd")

    # Auth provider
    app.config["GOOGLE_CLIENT_ID"] = os.environ.get("GOOGLE_ID")
    app.config["GOOGLE_CLIENT_SECRET"] = os.environ.get("GOOGLE_SECRET")
    app.config["POST_LOGIN_REDIRECT"] = os.environ.get("POST_LOGIN_REDIRECT", "/")
    app.config["DEV_LOGIN_ENABLED"] = (os.environ.get("DEV_LOGIN_ENABLED", "false").lower() == "true")

    # Contributors integration (optional token raises the GitHub rate limit)
    app.config["GITHUB_TOKEN"] = os.environ.get("GITHUB_TOKEN")
    app.config["CONTRIBUTORS_REPO"] = os.environ.get("CONTRIBUTORS_REPO", "Eniamza/boracle")

    app.config["LOG_LEVEL"] = os.environ.get("LOG_LEVEL", "INFO").upper()

    app.config["SQLALCHEMY_DATABASE_URI"] = _database_url()
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config.setdefault("RATELIMIT_STORAGE_URI", "memory://")

    if config:
        app.config.update(config)

    from .semesters import normalize_semester
    app.config["CURRENT_SEMESTER"] = normalize_semester(app.config["CURRENT_SEMESTER"])

    app.logger.setLevel(getattr(logging, app.config["LOG_LEVEL"], logging.INFO))

    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cache.init_app(app)
    # Per-app registry; Authlib caches clients by name
    app.extensions["google_oauth"] = OAuth(app).register(
        name="google",
        server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
        client_kwargs={"scope": "openid email profile"},
    )

    # Auth: Flask-Login over the signed session cookie
    login_manager.init_app(app)

    # Import models so they are registered with SQLAlchemy
    from . import models  # noqa: F401

    @login_manager.user_loader
    def load_user(user_id: str):
        from .auth.identity import load_session_user
        return load_session_user(user_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        from .api_utils import api_error
        return api_error("Unauthorized", 401)

    # Blueprints
    from .auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix="/api/auth")

    from .routines import routines_bp
    app.register_blueprint(routines_bp, url_prefix="/api")

    from .swaps import swaps_bp
    app.register_blueprint(swaps_bp, url_prefix="/api/swap")

    from .faculty import faculty_bp
    app.register_blueprint(faculty_bp, url_prefix="/api/faculty")

    from .admin import admin_bp
    app.register_blueprint(admin_bp, url_prefix="/api/admin")

    from .dashboard import dashboard_bp
    app.register_blueprint(dashboard_bp, url_prefix="/api/dashboard")

    from .main import main_bp
    app.register_blueprint(main_bp, url_prefix="/api")

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        from .api_utils import api_error
        return api_error(e.description or e.name, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        from .api_utils import api_error
        try:
            db.session.rollback()
        except Exception:
            app.logger.warning("Session rollback failed after unhandled error")
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return api_error("Internal server error", 500)

    # Create tables on first run (dev convenience)
    with app.app_context():
        db.create_all()

    return app
