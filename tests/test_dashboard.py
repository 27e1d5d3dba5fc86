import requests

from boracle_app import db
from boracle_app.models import Review, CourseMaterial, Faculty, ServiceStatus


def _seed_activity(app, email, n):
    with app.app_context():
        fac = Faculty(faculty_name="F", email="f@g.bracu.ac.bd")
        db.session.add(fac)
        db.session.flush()
        for i in range(n):
            db.session.add(Review(
                faculty_id=fac.faculty_id, u_email=email, semester="SPRING2026",
                behaviour_rating=5, teaching_rating=5, marking_rating=5,
                section="01", course_code=f"CSE{i}", created_at=1000 + i,
            ))
            db.session.add(CourseMaterial(
                u_email=email, material_url=f"https://m/{i}", course_code=f"CSE{i}",
                semester="SPRING2026", post_description="d", created_at=2000 + i,
            ))
        db.session.commit()


def test_user_stat_count(client, app, student):
    _seed_activity(app, student, 2)
    client.post("/api/swap", json={"givingSection": 1, "askingSection": [2]})
    counts = client.get("/api/dashboard/userStatCount").get_json()["counts"]
    assert counts == {"reviews": 2, "materials": 2, "swaps": 1, "votes": 0}


def test_recent_activity_is_newest_first_and_limited(client, app, student):
    _seed_activity(app, student, 7)
    data = client.get("/api/dashboard/recentActivity").get_json()["recentActivities"]
    assert len(data["reviews"]) == 5
    assert len(data["materials"]) == 5
    assert data["reviews"][0]["courseCode"] == "CSE6"
    assert data["materials"][0]["createdAt"] == 2006


def test_home_stats_is_public(client, app, student):
    _seed_activity(app, student, 3)
    client.post("/api/swap", json={"givingSection": 1, "askingSection": [2]})
    stats = app.test_client().get("/api/home/stats").get_json()
    assert stats == {"totalSwaps": 1, "totalReviews": 3, "totalMaterials": 3}


def test_services_listing(client, app):
    with app.app_context():
        db.session.add(ServiceStatus(title="Routine builder", is_active=True, message="ok"))
        db.session.commit()
    assert client.get("/api/services").get_json() == [
        {"id": 1, "title": "Routine builder", "isActive": True, "message": "ok"}
    ]


class _FakeResponse:
    def __init__(self, status_code, payload=None, text="", reason="OK"):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload
        self.text = text
        self.reason = reason

    def json(self):
        return self._payload


def test_contributors_proxy(client, app, monkeypatch):
    app.config["GITHUB_TOKEN"] = "abc"
    seen = {}

    def _get(url, headers=None, timeout=None):
        seen["url"] = url
        seen["headers"] = headers
        return _FakeResponse(200, [{"login": "octocat"}])

    monkeypatch.setattr(requests, "get", _get)
    resp = client.get("/api/contributors")
    assert resp.status_code == 200
    assert resp.get_json() == [{"login": "octocat"}]
    assert seen["url"].endswith("/repos/Eniamza/boracle/contributors")
    assert seen["headers"]["Authorization"] == "token abc"


def test_contributors_upstream_error(client, monkeypatch):
    monkeypatch.setattr(requests, "get", lambda *a, **k: _FakeResponse(403, text="rate limited", reason="Forbidden"))
    resp = client.get("/api/contributors")
    assert resp.status_code == 403
    assert resp.get_json() == {"error": "GitHub API error: 403 Forbidden", "details": "rate limited"}


def test_contributors_transport_failure(client, monkeypatch):
    def _boom(*args, **kwargs):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(requests, "get", _boom)
    resp = client.get("/api/contributors")
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to fetch contributors"}
