from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import auth_headers


def _heartbeat_online(client, user_id: str) -> None:
    response = client.post(
        "/api/presence/heartbeat",
        json={"userId": user_id, "presenceStatus": "online"},
        headers=auth_headers(user_id),
    )
    assert response.status_code == 200, response.text
    assert response.json() == {"success": True}


def _post_fix(client, clock, user_id: str, lat: float, lon: float, age_seconds: float) -> None:
    recorded = clock.now() - timedelta(seconds=age_seconds)
    response = client.post(
        "/api/locations/batch",
        json={
            "userId": user_id,
            "locations": [
                {"latitude": lat, "longitude": lon, "recordedAt": recorded.isoformat() + "Z"}
            ],
        },
        headers=auth_headers(user_id),
    )
    assert response.status_code == 200, response.text
    assert response.json() == {"success": True, "inserted": 1}


def _nearby(client, user_id: str, lat="0", lon="0", radius="1"):
    return client.get(
        "/api/users/nearby",
        params={"lat": lat, "lon": lon, "radius": radius},
        headers=auth_headers(user_id),
    )


@pytest.fixture()
def pair(client, clock, make_user):
    alice = make_user("Alice")
    bob = make_user("Bob")
    _heartbeat_online(client, alice)
    _heartbeat_online(client, bob)
    return alice, bob


def test_nearby_user_is_found(client, clock, pair) -> None:
    alice, bob = pair
    _post_fix(client, clock, bob, 0.0, 0.001, age_seconds=10)

    response = _nearby(client, alice)

    assert response.status_code == 200
    users = response.json()["users"]
    assert len(users) == 1
    assert users[0]["id"] == bob
    assert users[0]["name"] == "Bob"
    assert users[0]["profile_image_url"] is None
    assert users[0]["distance_km"] == pytest.approx(0.11, abs=0.005)


def test_fix_outside_freshness_window_is_ignored(client, clock, pair) -> None:
    alice, bob = pair
    _post_fix(client, clock, bob, 0.0, 0.001, age_seconds=301)

    response = _nearby(client, alice)

    assert response.status_code == 200
    assert response.json() == {"users": []}


@pytest.mark.parametrize("blocker_is_requester", [True, False])
def test_blocked_users_are_mutually_invisible(client, clock, pair, blocker_is_requester) -> None:
    alice, bob = pair
    _post_fix(client, clock, alice, 0.0, 0.0, age_seconds=5)
    _post_fix(client, clock, bob, 0.0, 0.001, age_seconds=5)

    blocker, blocked = (alice, bob) if blocker_is_requester else (bob, alice)
    response = client.post(
        "/api/blocks",
        json={"blockedUserId": blocked},
        headers=auth_headers(blocker),
    )
    assert response.status_code == 200

    assert _nearby(client, alice).json() == {"users": []}
    assert _nearby(client, bob).json() == {"users": []}


def test_user_disappears_after_read_window(client, clock, pair) -> None:
    alice, bob = pair
    _post_fix(client, clock, bob, 0.0, 0.001, age_seconds=0)

    clock.advance(119)
    _heartbeat_online(client, alice)
    assert len(_nearby(client, alice).json()["users"]) == 1

    clock.advance(2)
    assert _nearby(client, alice).json() == {"users": []}


def test_nearby_requires_authentication(client) -> None:
    response = client.get("/api/users/nearby", params={"lat": "0", "lon": "0", "radius": "1"})

    assert response.status_code == 401
    assert "error" in response.json()


def test_nearby_rejects_bad_token(client) -> None:
    response = client.get(
        "/api/users/nearby",
        params={"lat": "0", "lon": "0", "radius": "1"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == 401


@pytest.mark.parametrize(
    "params",
    [
        {"lat": "0", "lon": "0", "radius": "-1"},
        {"lat": "0", "lon": "0", "radius": "5.01"},
        {"lat": "x", "lon": "0", "radius": "1"},
        {"lat": "0", "lon": "0"},
    ],
)
def test_nearby_invalid_params(client, make_user, params) -> None:
    me = make_user()

    response = client.get("/api/users/nearby", params=params, headers=auth_headers(me))

    assert response.status_code == 400
    assert set(response.json()) == {"error"}


@pytest.mark.parametrize("radius", ["0", "5"])
def test_nearby_radius_edges_accepted(client, make_user, radius) -> None:
    me = make_user()

    response = _nearby(client, me, radius=radius)

    assert response.status_code == 200
    assert response.json() == {"users": []}


def test_latest_location_lookup_respects_blocks(client, clock, pair) -> None:
    alice, bob = pair
    _post_fix(client, clock, bob, 12.34567, 45.67891, age_seconds=30)

    response = client.get(f"/api/locations/{bob}", headers=auth_headers(alice))
    assert response.status_code == 200
    body = response.json()
    assert (body["latitude"], body["longitude"]) == (12.3456, 45.6789)

    client.post("/api/blocks", json={"blockedUserId": alice}, headers=auth_headers(bob))
    response = client.get(f"/api/locations/{bob}", headers=auth_headers(alice))
    assert response.status_code == 403
    assert response.json() == {"error": "User not accessible"}


def test_latest_location_lookup_without_recent_fix(client, pair) -> None:
    alice, bob = pair

    response = client.get(f"/api/locations/{bob}", headers=auth_headers(alice))

    assert response.status_code == 200
    assert response.json() is None


def test_location_batch_validation(client, make_user, clock) -> None:
    me = make_user()
    other = make_user()
    headers = auth_headers(me)
    recorded = clock.now().isoformat()

    forbidden = client.post(
        "/api/locations/batch",
        json={"userId": other, "locations": [{"latitude": 1, "longitude": 1, "recordedAt": recorded}]},
        headers=headers,
    )
    assert forbidden.status_code == 403

    empty = client.post("/api/locations/batch", json={"userId": me, "locations": []}, headers=headers)
    assert empty.status_code == 400

    malformed = client.post(
        "/api/locations/batch",
        json={"userId": me, "locations": [{"latitude": "north", "longitude": 1, "recordedAt": recorded}]},
        headers=headers,
    )
    assert malformed.status_code == 400


def test_presence_status_endpoint(client, make_user) -> None:
    me = make_user()

    ok = client.post("/api/presence/status", json={"status": "online"}, headers=auth_headers(me))
    assert ok.status_code == 200
    assert ok.json() == {"success": True, "status": "online"}

    bad = client.post("/api/presence/status", json={"status": "busy"}, headers=auth_headers(me))
    assert bad.status_code == 400
    assert bad.json() == {"error": "Invalid status"}


def test_heartbeat_for_other_user_is_forbidden(client, make_user) -> None:
    me = make_user()
    other = make_user()

    response = client.post(
        "/api/presence/heartbeat",
        json={"userId": other},
        headers=auth_headers(me),
    )

    assert response.status_code == 403
    assert response.json() == {"error": "Forbidden"}


def test_heartbeat_with_empty_status(client, make_user) -> None:
    me = make_user()

    response = client.post(
        "/api/presence/heartbeat",
        json={"userId": me, "presenceStatus": ""},
        headers=auth_headers(me),
    )

    assert response.status_code == 200
    assert response.json() == {"success": True}
