import pytest

from boracle_app import create_app, db
from boracle_app.models import User, epoch_now


@pytest.fixture()
def app():
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "RATELIMIT_ENABLED": False,
        "CACHE_TYPE": "NullCache",
        "DEV_LOGIN_ENABLED": True,
        "CURRENT_SEMESTER": "SPRING2026",
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


def make_user(app, email, name="Test Student", role="student"):
    with app.app_context():
        db.session.add(User(email=email, user_name=name, user_role=role, created_at=epoch_now()))
        db.session.commit()
    return email


def login(client, email):
    resp = client.post("/api/auth/dev-login", json={"email": email})
    assert resp.status_code == 200, resp.get_json()
    return resp


@pytest.fixture()
def student(app, client):
    email = make_user(app, "alice@g.bracu.ac.bd", name="alice rahman")
    login(client, email)
    return email


@pytest.fixture()
def admin_client(app):
    make_user(app, "root@g.bracu.ac.bd", name="Root Admin", role="admin")
    c = app.test_client()
    login(c, "root@g.bracu.ac.bd")
    return c
