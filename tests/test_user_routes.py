"""Tests for profile edits, account deletion, and user statistics."""

from __future__ import annotations

from flask.testing import FlaskClient

from models import db
from models.location import Location
from models.user import User


def _auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _create(client: FlaskClient, token: str, name: str, latitude: float):
    response = client.post(
        "/api/locations",
        json={"name": name, "latitude": latitude, "longitude": -124.21},
        headers=_auth_headers(token),
    )
    assert response.status_code == 201
    return response.get_json()["location"]


def test_update_profile_changes_name_and_email(client: FlaskClient, register_user):
    token, _ = register_user(email="ann@x.com")

    response = client.put(
        "/api/user/profile",
        json={"name": "Annie", "email": "annie@x.com"},
        headers=_auth_headers(token),
    )

    assert response.status_code == 200
    user = response.get_json()["user"]
    assert user["name"] == "Annie"
    assert user["email"] == "annie@x.com"

    me = client.get("/api/auth/me", headers=_auth_headers(token)).get_json()["user"]
    assert me["email"] == "annie@x.com"


def test_update_profile_rejects_taken_email(client: FlaskClient, register_user):
    token, _ = register_user(email="ann@x.com")
    register_user(name="Bob", email="bob@x.com")

    response = client.put(
        "/api/user/profile",
        json={"name": "Ann", "email": "bob@x.com"},
        headers=_auth_headers(token),
    )

    assert response.status_code == 409


def test_update_profile_email_race_is_conflict(client: FlaskClient, register_user, monkeypatch):
    token, _ = register_user(email="ann@x.com")
    register_user(name="Bob", email="bob@x.com")
    # Bob's row lands after the lookup, so only the unique index catches it.
    monkeypatch.setattr("routes.user.find_user_by_email", lambda email: None)

    response = client.put(
        "/api/user/profile",
        json={"name": "Ann", "email": "bob@x.com"},
        headers=_auth_headers(token),
    )

    assert response.status_code == 409
    me = client.get("/api/auth/me", headers=_auth_headers(token)).get_json()["user"]
    assert me["email"] == "ann@x.com"


def test_update_profile_keeps_own_email(client: FlaskClient, register_user):
    token, _ = register_user(email="ann@x.com")

    response = client.put(
        "/api/user/profile",
        json={"name": "Ann B", "email": "ann@x.com"},
        headers=_auth_headers(token),
    )

    assert response.status_code == 200


def test_update_profile_validates_shape(client: FlaskClient, register_user):
    token, _ = register_user()

    response = client.put(
        "/api/user/profile",
        json={"name": "A", "email": "nope"},
        headers=_auth_headers(token),
    )

    assert response.status_code == 400
    fields = {error["field"] for error in response.get_json()["errors"]}
    assert fields == {"name", "email"}


def test_password_change_requires_current_password(client: FlaskClient, register_user):
    token, _ = register_user(email="ann@x.com", password="secret1")

    missing = client.put(
        "/api/user/profile",
        json={"name": "Ann", "email": "ann@x.com", "newPassword": "better1"},
        headers=_auth_headers(token),
    )
    wrong = client.put(
        "/api/user/profile",
        json={
            "name": "Ann",
            "email": "ann@x.com",
            "currentPassword": "guess99",
            "newPassword": "better1",
        },
        headers=_auth_headers(token),
    )

    assert missing.status_code == 400
    assert wrong.status_code == 400
    assert wrong.get_json()["message"] == "Current password is incorrect."


def test_password_change_rehashes(client: FlaskClient, register_user):
    token, _ = register_user(email="ann@x.com", password="secret1")

    response = client.put(
        "/api/user/profile",
        json={
            "name": "Ann",
            "email": "ann@x.com",
            "currentPassword": "secret1",
            "newPassword": "better1",
        },
        headers=_auth_headers(token),
    )
    assert response.status_code == 200

    old = client.post("/api/auth/login", json={"email": "ann@x.com", "password": "secret1"})
    new = client.post("/api/auth/login", json={"email": "ann@x.com", "password": "better1"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_short_new_password_is_rejected(client: FlaskClient, register_user):
    token, _ = register_user(email="ann@x.com", password="secret1")

    response = client.put(
        "/api/user/profile",
        json={
            "name": "Ann",
            "email": "ann@x.com",
            "currentPassword": "secret1",
            "newPassword": "abc",
        },
        headers=_auth_headers(token),
    )

    assert response.status_code == 400


def test_delete_account_cascades_to_locations(app, client: FlaskClient, register_user):
    ann, ann_user = register_user(email="ann@x.com")
    bob, _ = register_user(name="Bob", email="bob@x.com")
    _create(client, ann, "One", 43.0)
    _create(client, ann, "Two", 44.0)
    kept = _create(client, bob, "Bob's", 45.0)

    response = client.delete("/api/user/account", headers=_auth_headers(ann))

    assert response.status_code == 200
    assert response.get_json()["deletedLocations"] == 2

    # The account is gone, so its token can no longer list anything.
    mine = client.get("/api/locations/user/mine", headers=_auth_headers(ann))
    assert mine.status_code == 403

    with app.app_context():
        assert db.session.get(User, ann_user["id"]) is None
        assert Location.query.filter_by(created_by_id=ann_user["id"]).count() == 0
        assert db.session.get(Location, kept["id"]) is not None

    listed = client.get("/api/locations").get_json()
    assert [loc["id"] for loc in listed["locations"]] == [kept["id"]]

    relogin = client.post("/api/auth/login", json={"email": "ann@x.com", "password": "secret1"})
    assert relogin.status_code == 401


def test_stats_counts_by_status(app, client: FlaskClient, register_user):
    token, _ = register_user()
    _create(client, token, "Active", 43.0)
    pending = _create(client, token, "Pending", 44.0)
    with app.app_context():
        db.session.get(Location, pending["id"]).status = "pending"
        db.session.commit()

    response = client.get("/api/user/stats", headers=_auth_headers(token))

    assert response.status_code == 200
    assert response.get_json()["stats"] == {
        "totalLocations": 2,
        "activeLocations": 1,
        "pendingLocations": 1,
    }
