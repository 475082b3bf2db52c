"""Discovery endpoints: fixed shapes, always 200."""

from tests.api.conftest import KEY_RESOURCE


async def test_root_tip(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json() == {"ok": True, "tip": "use /status, /wrap, /unwrap"}


async def test_status_descriptor(client):
    res = await client.get("/status")
    assert res.status_code == 200
    assert res.json() == {
        "server_type": "KACLS",
        "vendor_id": "POC",
        "version": "2.3.0",
        "operations_supported": ["wrap", "unwrap"],
        "key_resource": KEY_RESOURCE,
    }


async def test_well_known_kacls(client):
    res = await client.get("/.well-known/kacls")
    assert res.status_code == 200
    assert res.json() == {"ok": True, "path": "/.well-known/kacls"}
