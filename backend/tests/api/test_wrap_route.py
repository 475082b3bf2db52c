"""POST /wrap: DEK located anywhere in the envelope, encrypted, returned as wrapped_key.

Invariants:
    - Success body has exactly one field: wrapped_key
    - {"reason": "..."} without key material is a benign 200 no-op
    - Missing candidate → 400 with received_keys; undecodable → 400
    - Provider failure → 500 wrap_failed with non-empty detail
"""

import asyncio
import base64

import pytest
from httpx import ASGITransport, AsyncClient

from kacls.main import create_app
from tests.api.conftest import KEY_RESOURCE
from tests.api.fake_kms import BlockingKeyManagementGateway, FakeKeyManagementGateway


async def test_wrap_returns_wrapped_key_only(client, gateway):
    res = await client.post("/wrap", json={"key": "SGVsbG8="})
    assert res.status_code == 200
    body = res.json()
    assert set(body) == {"wrapped_key"}
    assert base64.b64decode(body["wrapped_key"]) == b"fake-kms:olleH"
    assert gateway.calls == [("encrypt", KEY_RESOURCE, b"Hello")]


@pytest.mark.parametrize("payload", [
    {"key_to_wrap_b64": "SGVsbG8="},
    {"keyToWrap": "SGVsbG8="},
    {"plaintext": "SGVsbG8="},
    {"request": {"envelope": {"dek": "SGVsbG8="}}},
    [{"data": "SGVsbG8="}],
])
async def test_wrap_finds_key_under_alternate_names(client, gateway, payload):
    res = await client.post("/wrap", json=payload)
    assert res.status_code == 200
    assert gateway.calls[0][2] == b"Hello"


async def test_wrap_accepts_url_safe_alphabet(client, gateway):
    raw = b"\xfb\xff\xfe\xfd\xfc\xfb"
    res = await client.post(
        "/wrap", json={"key": base64.urlsafe_b64encode(raw).decode().rstrip("=")},
    )
    assert res.status_code == 200
    assert gateway.calls[0][2] == raw


async def test_wrap_prefers_canonical_key_over_other_fields(client, gateway):
    res = await client.post(
        "/wrap",
        json={"data": "ZGF0YWRhdGE=", "key": "SGVsbG8=", "reason": "ignored"},
    )
    assert res.status_code == 200
    assert gateway.calls[0][2] == b"Hello"


async def test_error_envelope_is_a_noop(client, gateway):
    res = await client.post("/wrap", json={"reason": "client error"})
    assert res.status_code == 200
    assert res.json() == {
        "ok": True, "note": "noop (error envelope)", "reason": "client error",
    }
    assert gateway.calls == []


async def test_empty_object_reports_missing_dek(client):
    res = await client.post("/wrap", json={})
    assert res.status_code == 400
    assert res.json() == {"error": "missing DEK (base64)", "received_keys": []}


async def test_missing_dek_echoes_top_level_keys(client):
    res = await client.post("/wrap", json={"authorization": "x", "resource_name": "y"})
    assert res.status_code == 400
    assert res.json()["received_keys"] == ["authorization", "resource_name"]


async def test_non_string_reason_is_not_an_error_envelope(client):
    res = await client.post("/wrap", json={"reason": 7})
    assert res.status_code == 400
    assert res.json()["received_keys"] == ["reason"]


async def test_unparseable_body_treated_as_empty(client):
    res = await client.post(
        "/wrap", content=b"{not json", headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "missing DEK (base64)", "received_keys": []}


async def test_no_body_treated_as_empty(client):
    res = await client.post("/wrap")
    assert res.status_code == 400
    assert res.json()["received_keys"] == []


async def test_undecodable_candidate_is_400(client, gateway):
    # 9 data chars: one past a 4-char quantum, never valid base64
    res = await client.post("/wrap", json={"key": "SGVsbG8hX"})
    assert res.status_code == 400
    assert res.json() == {"error": "invalid base64/plaintext"}
    assert gateway.calls == []


async def test_provider_failure_is_500_wrap_failed(settings):
    failing = FakeKeyManagementGateway(fail_with=PermissionError("403 Permission denied"))
    app = create_app(settings, gateway=failing)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        res = await c.post("/wrap", json={"key": "SGVsbG8="})
    assert res.status_code == 500
    assert res.json() == {"error": "wrap_failed", "detail": "403 Permission denied"}


async def test_provider_failure_without_message_still_has_detail(settings):
    app = create_app(settings, gateway=FakeKeyManagementGateway(fail_with=TimeoutError()))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        res = await c.post("/wrap", json={"key": "SGVsbG8="})
    assert res.status_code == 500
    assert res.json() == {"error": "wrap_failed", "detail": "TimeoutError"}


async def test_oversized_body_rejected_before_parsing(client, gateway):
    res = await client.post("/wrap", json={"key": "SGVsbG8=", "pad": "x" * 5000})
    assert res.status_code == 413
    assert res.json() == {"error": "payload_too_large", "limit_bytes": 4096}
    assert gateway.calls == []


async def test_chunked_body_cut_off_at_limit(client, gateway):
    sent = []

    async def chunks():
        for _ in range(50):
            sent.append(1024)
            yield b"x" * 1024

    res = await client.post("/wrap", content=chunks())
    assert res.status_code == 413
    assert res.json() == {"error": "payload_too_large", "limit_bytes": 4096}
    assert len(sent) < 10
    assert gateway.calls == []


async def test_chunked_body_within_limit_is_parsed(client, gateway):
    async def chunks():
        yield b'{"key": '
        yield b'"SGVsbG8="}'

    res = await client.post("/wrap", content=chunks())
    assert res.status_code == 200
    assert gateway.calls[0][2] == b"Hello"


async def test_over_padded_key_is_accepted(client, gateway):
    res = await client.post("/wrap", json={"key": "YWJjZGVmZ2g=="})
    assert res.status_code == 200
    assert gateway.calls[0][2] == b"abcdefgh"


async def test_overlapping_provider_calls(settings):
    gateway = BlockingKeyManagementGateway(expected_in_flight=2)
    app = create_app(settings, gateway=gateway)

    async def release_once_both_in_flight():
        await asyncio.wait_for(gateway.all_in_flight.wait(), timeout=5)
        gateway.release.set()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        first, second, _ = await asyncio.gather(
            c.post("/wrap", json={"key": "SGVsbG8="}),
            c.post("/wrap", json={"key": "d29ybGR3b3JsZA=="}),
            release_once_both_in_flight(),
        )

    assert first.status_code == second.status_code == 200
    assert len(gateway.calls) == 2
