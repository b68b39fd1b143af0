from __future__ import annotations

import pytest

from app.core.rate_limit import limiter
from conftest import auth_headers


@pytest.fixture()
def rate_limited():
    limiter.reset()
    limiter.enabled = True
    yield limiter
    limiter.enabled = False
    limiter.reset()


def _batch(client, clock, user_id: str):
    return client.post(
        "/api/locations/batch",
        json={
            "userId": user_id,
            "locations": [{"latitude": 1.0, "longitude": 2.0, "recordedAt": clock.now().isoformat()}],
        },
        headers=auth_headers(user_id),
    )


def test_location_batch_allows_ten_per_minute(client, clock, make_user, rate_limited) -> None:
    me = make_user()

    statuses = [_batch(client, clock, me).status_code for _ in range(10)]
    assert statuses == [200] * 10

    blocked = _batch(client, clock, me)
    assert blocked.status_code == 429
    assert blocked.json() == {"error": "Rate limit exceeded"}


def test_global_budget_applies_to_every_route(client, rate_limited) -> None:
    statuses = [client.get("/health").status_code for _ in range(100)]
    assert statuses == [200] * 100

    over = client.get("/health")
    assert over.status_code == 429
    assert over.json() == {"error": "Rate limit exceeded"}


def test_limits_are_off_when_disabled(client) -> None:
    statuses = {client.get("/health").status_code for _ in range(110)}

    assert statuses == {200}
