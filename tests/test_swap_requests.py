from boracle_app import db
from boracle_app.models import SwapRequest
from conftest import make_user, login


def _setup(app, client):
    """alice owns a swap; bob is signed in on a second client."""
    swap_id = client.post("/api/swap", json={"givingSection": 11, "askingSection": [12]}).get_json()["swapId"]
    make_user(app, "bob@g.bracu.ac.bd", name="bob khan")
    bob = app.test_client()
    login(bob, "bob@g.bracu.ac.bd")
    return swap_id, bob


def _request_id(bob, swap_id):
    resp = bob.post("/api/swap/requests", json={"swapId": swap_id})
    assert resp.status_code == 200
    return resp.get_json()["requestId"]


def test_create_request_rules(client, app, student):
    swap_id, bob = _setup(app, client)

    assert bob.post("/api/swap/requests", json={}).status_code == 400
    assert bob.post("/api/swap/requests", json={"swapId": "missing"}).status_code == 404
    assert client.post("/api/swap/requests", json={"swapId": swap_id}).status_code == 400

    _request_id(bob, swap_id)
    dup = bob.post("/api/swap/requests", json={"swapId": swap_id})
    assert dup.status_code == 400

    with app.app_context():
        req = db.session.query(SwapRequest).one()
        assert req.sender_email == "bob@g.bracu.ac.bd"
        assert req.receiver_email == student
        assert req.status == "PENDING"
        assert req.is_read is False


def test_pending_request_hides_sender_email(client, app, student):
    swap_id, bob = _setup(app, client)
    _request_id(bob, swap_id)

    incoming = client.get("/api/swap/requests").get_json()
    assert len(incoming) == 1
    assert incoming[0]["type"] == "INCOMING"
    assert incoming[0]["senderFirstName"] == "Bob"
    assert incoming[0]["senderEmail"] is None
    assert incoming[0]["getSectionId"] == 11

    outgoing = bob.get("/api/swap/requests").get_json()
    assert outgoing[0]["type"] == "OUTGOING"
    assert outgoing[0]["receiverEmail"] == student


def test_only_receiver_can_decide(client, app, student):
    swap_id, bob = _setup(app, client)
    request_id = _request_id(bob, swap_id)

    make_user(app, "carol@g.bracu.ac.bd", name="Carol")
    carol = app.test_client()
    login(carol, "carol@g.bracu.ac.bd")

    assert bob.patch(f"/api/swap/requests/{request_id}", json={"status": "ACCEPTED"}).status_code == 404
    assert carol.patch(f"/api/swap/requests/{request_id}", json={"status": "ACCEPTED"}).status_code == 404

    with app.app_context():
        assert db.session.get(SwapRequest, request_id).status == "PENDING"


def test_invalid_status_rejected_before_lookup(client, app, student):
    assert client.patch("/api/swap/requests/anything", json={"status": "PENDING"}).status_code == 400
    assert client.patch("/api/swap/requests/anything", json={"status": "accepted"}).status_code == 400


def test_accept_reveals_emails_and_marks_unread(client, app, student):
    swap_id, bob = _setup(app, client)
    request_id = _request_id(bob, swap_id)

    # bob has seen his outgoing requests
    resp = bob.patch("/api/swap/requests")
    assert resp.get_json() == {"success": True, "updated": 1}

    resp = client.patch(f"/api/swap/requests/{request_id}", json={"status": "ACCEPTED"})
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "Swap request accepted successfully"}

    with app.app_context():
        req = db.session.get(SwapRequest, request_id)
        assert req.status == "ACCEPTED"
        assert req.is_read is False

    outgoing = bob.get("/api/swap/requests").get_json()[0]
    assert outgoing["senderEmail"] == "bob@g.bracu.ac.bd"
    assert outgoing["receiverEmail"] == student
    assert outgoing["isRead"] is False


def test_decided_request_cannot_change(client, app, student):
    swap_id, bob = _setup(app, client)
    request_id = _request_id(bob, swap_id)

    assert client.patch(f"/api/swap/requests/{request_id}", json={"status": "REJECTED"}).status_code == 200
    resp = client.patch(f"/api/swap/requests/{request_id}", json={"status": "ACCEPTED"})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Request already resolved"}

    with app.app_context():
        assert db.session.get(SwapRequest, request_id).status == "REJECTED"


def test_mark_read_only_touches_own_outgoing(client, app, student):
    swap_id, bob = _setup(app, client)
    _request_id(bob, swap_id)

    assert client.patch("/api/swap/requests").get_json()["updated"] == 0
    assert bob.patch("/api/swap/requests").get_json()["updated"] == 1
    assert bob.patch("/api/swap/requests").get_json()["updated"] == 0
