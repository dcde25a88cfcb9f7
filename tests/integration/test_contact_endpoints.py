"""End-to-end tests for the token and submission endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from contactgate.infrastructure.email.mock import MockDeliverer
from tests.fixtures.app_factory import create_test_app, make_settings
from tests.fixtures.clock import FakeClock

VALID_FIELDS = {
    "email": "a@b.com",
    "subject": "Hi",
    "message": "Hello",
    "reason": "General",
}


async def _token(ac: AsyncClient, ip: str | None = None) -> str:
    headers = {"X-Forwarded-For": ip} if ip else {}
    resp = await ac.get("/api/token", headers=headers)
    assert resp.status_code == 200
    return resp.json()["token"]


@pytest.mark.anyio
async def test_issue_then_submit_delivers_once(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app.app), base_url="http://testserver"
    ) as ac:
        token = await _token(ac)
        resp = await ac.post("/api/send_email", data={**VALID_FIELDS, "token": token})

    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert len(test_app.deliverer.sent) == 1
    assert test_app.deliverer.sent[0].email == "a@b.com"


@pytest.mark.anyio
async def test_json_body_is_accepted(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app.app), base_url="http://testserver"
    ) as ac:
        token = await _token(ac)
        resp = await ac.post("/api/send_email", json={**VALID_FIELDS, "token": token})

    assert resp.status_code == 200
    assert resp.json() == {"success": True}


@pytest.mark.anyio
async def test_multipart_with_attachment_is_accepted(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app.app), base_url="http://testserver"
    ) as ac:
        token = await _token(ac)
        resp = await ac.post(
            "/api/send_email",
            data={**VALID_FIELDS, "token": token},
            files={"attachment": ("cv.txt", b"hello", "text/plain")},
        )

    assert resp.status_code == 200
    assert len(test_app.deliverer.sent) == 1


@pytest.mark.anyio
async def test_fourth_submission_in_window_is_rate_limited(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app.app), base_url="http://testserver"
    ) as ac:
        statuses = []
        for _ in range(4):
            token = await _token(ac)
            resp = await ac.post("/api/send_email", data={**VALID_FIELDS, "token": token})
            statuses.append(resp.status_code)

    assert statuses == [200, 200, 200, 429]
    assert resp.json() == {
        "success": False,
        "error": "Too many requests. Please try again later.",
    }
    assert len(test_app.deliverer.sent) == 3


@pytest.mark.anyio
async def test_rate_limit_is_per_client():
    ctx = create_test_app(make_settings(trusted_proxy_hops=1))

    async with AsyncClient(
        transport=ASGITransport(app=ctx.app), base_url="http://testserver"
    ) as ac:
        for _ in range(3):
            await ac.post(
                "/api/send_email",
                data={**VALID_FIELDS, "token": "x"},
                headers={"X-Forwarded-For": "198.51.100.1"},
            )
        token = await _token(ac, "198.51.100.2")
        resp = await ac.post(
            "/api/send_email",
            data={**VALID_FIELDS, "token": token},
            headers={"X-Forwarded-For": "198.51.100.1, 198.51.100.2"},
        )

    assert resp.status_code == 200


@pytest.mark.anyio
async def test_unissued_token_is_forbidden(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app.app), base_url="http://testserver"
    ) as ac:
        resp = await ac.post("/api/send_email", data={**VALID_FIELDS, "token": "never-issued"})

    assert resp.status_code == 403
    assert resp.json() == {"success": False, "error": "Invalid or expired security token"}
    assert test_app.deliverer.sent == []


@pytest.mark.anyio
async def test_missing_token_is_forbidden(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app.app), base_url="http://testserver"
    ) as ac:
        resp = await ac.post("/api/send_email", data=VALID_FIELDS)

    assert resp.status_code == 403


@pytest.mark.anyio
async def test_replayed_token_is_forbidden(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app.app), base_url="http://testserver"
    ) as ac:
        token = await _token(ac)
        first = await ac.post("/api/send_email", data={**VALID_FIELDS, "token": token})
        second = await ac.post("/api/send_email", data={**VALID_FIELDS, "token": token})

    assert first.status_code == 200
    assert second.status_code == 403
    assert len(test_app.deliverer.sent) == 1


@pytest.mark.anyio
async def test_expired_token_is_forbidden(test_app):
    clock = FakeClock()
    test_app.app.state.token_store.clock = clock

    async with AsyncClient(
        transport=ASGITransport(app=test_app.app), base_url="http://testserver"
    ) as ac:
        token = await _token(ac)
        clock.advance(minutes=30)
        resp = await ac.post("/api/send_email", data={**VALID_FIELDS, "token": token})

    assert resp.status_code == 403
    assert test_app.deliverer.sent == []


@pytest.mark.anyio
async def test_validation_errors_are_joined(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app.app), base_url="http://testserver"
    ) as ac:
        token = await _token(ac)
        resp = await ac.post(
            "/api/send_email",
            data={"email": "", "subject": "x" * 300, "message": "Hello", "reason": "Spam", "token": token},
        )

    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == (
        "Valid email address is required, "
        "Subject must be less than 200 characters, "
        "Invalid reason selected"
    )


@pytest.mark.anyio
async def test_script_tag_is_not_delivered_verbatim(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app.app), base_url="http://testserver"
    ) as ac:
        token = await _token(ac)
        resp = await ac.post(
            "/api/send_email",
            data={**VALID_FIELDS, "message": "<script>alert('pwned')</script>", "token": token},
        )

    assert resp.status_code == 200
    delivered = test_app.deliverer.sent[0]
    assert "<script>" not in delivered.message
    assert "&lt;script&gt;" in delivered.message


@pytest.mark.anyio
async def test_delivery_failure_hides_cause():
    ctx = create_test_app(deliverer=MockDeliverer(fail=True))

    async with AsyncClient(
        transport=ASGITransport(app=ctx.app), base_url="http://testserver"
    ) as ac:
        token = await _token(ac)
        resp = await ac.post("/api/send_email", data={**VALID_FIELDS, "token": token})

    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "error": "Failed to send message. Please try again later.",
    }


@pytest.mark.anyio
async def test_owner_binding_rejects_token_from_other_client():
    ctx = create_test_app(make_settings(bind_token_to_owner=True, trusted_proxy_hops=1))

    async with AsyncClient(
        transport=ASGITransport(app=ctx.app), base_url="http://testserver"
    ) as ac:
        token = await _token(ac, "198.51.100.10")
        stolen = await ac.post(
            "/api/send_email",
            data={**VALID_FIELDS, "token": token},
            headers={"X-Forwarded-For": "198.51.100.99"},
        )
        legit = await ac.post(
            "/api/send_email",
            data={**VALID_FIELDS, "token": token},
            headers={"X-Forwarded-For": "198.51.100.10"},
        )

    assert stolen.status_code == 403
    assert legit.status_code == 200


@pytest.mark.anyio
async def test_forwarded_header_ignored_by_default(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app.app), base_url="http://testserver"
    ) as ac:
        statuses = []
        for i in range(4):
            token = await _token(ac, f"198.51.100.{i}")
            resp = await ac.post(
                "/api/send_email",
                data={**VALID_FIELDS, "token": token},
                headers={"X-Forwarded-For": f"198.51.100.{i}"},
            )
            statuses.append(resp.status_code)

    # spoofed addresses all collapse onto the real peer address
    assert statuses == [200, 200, 200, 429]
    assert len(test_app.deliverer.sent) == 3


@pytest.mark.anyio
async def test_client_prepended_forwarded_entries_are_ignored():
    ctx = create_test_app(make_settings(trusted_proxy_hops=1))

    async with AsyncClient(
        transport=ASGITransport(app=ctx.app), base_url="http://testserver"
    ) as ac:
        statuses = []
        for i in range(4):
            # the proxy appends the real address after whatever the client sent
            headers = {"X-Forwarded-For": f"10.9.9.{i}, 198.51.100.30"}
            token = await _token(ac, headers["X-Forwarded-For"])
            resp = await ac.post(
                "/api/send_email",
                data={**VALID_FIELDS, "token": token},
                headers=headers,
            )
            statuses.append(resp.status_code)

    assert statuses == [200, 200, 200, 429]
