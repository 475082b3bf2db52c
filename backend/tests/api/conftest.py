"""API test fixtures: app built by create_app with a fake gateway + httpx client.

Invariants:
    - Every test gets a fresh app and a fresh FakeKeyManagementGateway
    - Settings built explicitly (no .env lookup) so tests are hermetic
"""

import pytest
from httpx import ASGITransport, AsyncClient

from kacls.config import load_settings
from kacls.main import create_app
from tests.api.fake_kms import FakeKeyManagementGateway

KEY_RESOURCE = "projects/p/locations/global/keyRings/r/cryptoKeys/k"


@pytest.fixture
def settings():
    return load_settings(
        _env_file=None, kms_key_resource=KEY_RESOURCE, max_body_bytes=4096,
    )


@pytest.fixture
def gateway():
    return FakeKeyManagementGateway()


@pytest.fixture
async def client(settings, gateway):
    app = create_app(settings, gateway=gateway)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
