"""HTTP tests for the /api/follow and /api/users routes."""
import pytest
from datetime import timedelta
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from lovculator.core.security import create_access_token
from lovculator.main import app
from lovculator.services import relationship_service, store


def toggle(client, headers, target_id):
    return client.post(f"/api/follow/toggle/{target_id}", headers=headers)


def ids(response):
    return [item["id"] for item in response.json()]


class TestToggleEndpoint:

    def test_follow_unfollow_scenario(self, client, make_user, auth_headers):
        make_user(user_id=7)
        make_user(user_id=42)
        me = auth_headers(7)

        response = toggle(client, me, 42)
        assert response.status_code == 200
        assert response.json() == {"following": True}
        assert 42 in ids(client.get("/api/follow/following", headers=me))
        assert 7 in ids(client.get("/api/follow/followers", headers=auth_headers(42)))

        response = toggle(client, me, 42)
        assert response.status_code == 200
        assert response.json() == {"following": False}
        assert ids(client.get("/api/follow/following", headers=me)) == []
        assert ids(client.get("/api/follow/followers", headers=auth_headers(42))) == []

    def test_self_follow_is_bad_request(self, client, make_user, auth_headers, count_edges):
        make_user(user_id=7)

        response = toggle(client, auth_headers(7), 7)

        assert response.status_code == 400
        assert response.json() == {"error": "You cannot follow yourself"}
        assert count_edges() == 0

    def test_missing_token_is_unauthorized(self, client, make_user):
        make_user(user_id=42)

        response = client.post("/api/follow/toggle/42")

        assert response.status_code == 401
        assert response.json() == {"error": "Login required"}

    def test_invalid_token_is_unauthorized(self, client, make_user):
        make_user(user_id=42)

        response = toggle(client, {"Authorization": "Bearer not-a-jwt"}, 42)

        assert response.status_code == 401

    def test_expired_token_is_unauthorized(self, client, make_user):
        make_user(user_id=7)
        make_user(user_id=42)
        token = create_access_token(7, expires_delta=timedelta(seconds=-1))

        response = toggle(client, {"Authorization": f"Bearer {token}"}, 42)

        assert response.status_code == 401

    def test_token_for_deleted_user_is_unauthorized(self, client, make_user, auth_headers, count_edges):
        make_user(user_id=42)

        response = toggle(client, auth_headers(7), 42)

        assert response.status_code == 401
        assert response.json() == {"error": "Login required"}
        assert count_edges() == 0

    def test_unknown_target_is_not_found(self, client, make_user, auth_headers):
        make_user(user_id=7)

        response = toggle(client, auth_headers(7), 4242)

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    def test_non_numeric_target_is_rejected(self, client, make_user, auth_headers):
        make_user(user_id=7)

        response = toggle(client, auth_headers(7), "bob")

        assert response.status_code == 422

    def test_store_failure_is_generic_server_error(self, client, make_user, auth_headers, monkeypatch):
        make_user(user_id=7)
        make_user(user_id=42)

        def broken(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("password authentication failed"))

        monkeypatch.setattr(store, "edge_exists", broken)

        response = toggle(client, auth_headers(7), 42)

        assert response.status_code == 500
        assert response.json() == {"error": "Follow action failed"}


class TestListEndpoints:

    @pytest.mark.parametrize("path", ["/api/follow/followers", "/api/follow/following", "/api/follow/suggestions"])
    def test_lists_require_login(self, client, path):
        response = client.get(path)

        assert response.status_code == 401
        assert response.json() == {"error": "Login required"}

    def test_followers_shape(self, client, make_user, add_edge, auth_headers):
        make_user(user_id=1, username="alice", display_name="Alice")
        make_user(user_id=2, username="bob", display_name="Bob", bio="Loves long walks")
        add_edge(2, 1)

        response = client.get("/api/follow/followers", headers=auth_headers(1))

        assert response.status_code == 200
        assert response.json() == [{
            "id": 2,
            "username": "bob",
            "display_name": "Bob",
            "avatar_url": None,
            "bio": "Loves long walks",
            "is_following": False,
        }]

    def test_suggestions_default_limit(self, client, make_user, auth_headers):
        me = make_user()
        for _ in range(25):
            make_user()

        response = client.get("/api/follow/suggestions", headers=auth_headers(me.id))

        assert response.status_code == 200
        assert len(response.json()) == 20
        assert me.id not in ids(response)

    def test_suggestions_exclude_followed(self, client, make_user, add_edge, auth_headers):
        me = make_user()
        followed = make_user()
        other = make_user()
        add_edge(me.id, followed.id)

        response = client.get("/api/follow/suggestions", params={"limit": 5}, headers=auth_headers(me.id))

        assert ids(response) == [other.id]

    @pytest.mark.parametrize("limit", [-1, 101])
    def test_suggestions_limit_is_bounded(self, client, make_user, auth_headers, limit):
        me = make_user()

        response = client.get("/api/follow/suggestions", params={"limit": limit}, headers=auth_headers(me.id))

        assert response.status_code == 422


class TestStatusAndCounts:

    def test_status_for_logged_in_user(self, client, make_user, add_edge, auth_headers):
        make_user(user_id=7)
        make_user(user_id=42)
        add_edge(7, 42)

        following = client.get("/api/follow/status/42", headers=auth_headers(7)).json()
        assert following["is_following"] is True
        assert following["followed_at"] is not None

        not_following = client.get("/api/follow/status/7", headers=auth_headers(42)).json()
        assert not_following == {"is_following": False, "followed_at": None}

    def test_status_for_guest(self, client, make_user):
        make_user(user_id=42)

        response = client.get("/api/follow/status/42")

        assert response.status_code == 200
        assert response.json() == {"is_following": False, "followed_at": None}

    def test_counts(self, client, make_user, add_edge):
        for user_id in (1, 2, 3):
            make_user(user_id=user_id)
        add_edge(1, 2)
        add_edge(3, 2)
        add_edge(2, 1)

        response = client.get("/api/follow/counts/2")

        assert response.json() == {"user_id": 2, "follower_count": 2, "following_count": 1}


class TestUserEndpoints:

    def test_profile(self, client, make_user, add_edge, auth_headers):
        make_user(user_id=7, username="romeo", display_name="Romeo")
        make_user(user_id=42, username="juliet", display_name="Juliet")
        add_edge(7, 42)

        response = client.get("/api/users/42", headers=auth_headers(7))

        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "juliet"
        assert body["follower_count"] == 1
        assert body["following_count"] == 0
        assert body["is_following"] is True

    def test_profile_not_found(self, client):
        response = client.get("/api/users/999")

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    def test_public_lists(self, client, make_user, add_edge):
        for user_id in (1, 2, 3):
            make_user(user_id=user_id)
        add_edge(1, 2)
        add_edge(3, 2)

        assert ids(client.get("/api/users/2/followers")) == [1, 3]
        assert ids(client.get("/api/users/1/following")) == [2]
        assert client.get("/api/users/999/followers").json() == []


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_unexpected_error_keeps_error_shape(make_user, monkeypatch):
    make_user(user_id=2)

    def explode(db, user_id):
        raise RuntimeError("boom")

    monkeypatch.setattr(relationship_service, "follow_counts", explode)
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/follow/counts/2")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
