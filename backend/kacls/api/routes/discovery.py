"""Discovery Routes: root tip, /status descriptor and the well-known KACLS marker.

Invariants:
    - All three endpoints always return 200
    - /status and /.well-known/kacls shapes are fixed by the CSE protocol
"""

from fastapi import APIRouter, Depends

from kacls.api.dependencies import get_app_settings
from kacls.config import Settings
from kacls.core.domain_types import KeyResource
from kacls.core.key_access_protocol import (
    DISCOVERY_PATH,
    discovery_marker,
    root_descriptor,
    status_descriptor,
)

router = APIRouter(tags=["discovery"])


@router.get("/")
async def root():
    return root_descriptor()


@router.get("/status")
async def status(settings: Settings = Depends(get_app_settings)):
    """Capability descriptor polled by CSE clients."""
    return status_descriptor(KeyResource(settings.kms_key_resource))


@router.get(DISCOVERY_PATH)
async def well_known_kacls():
    return discovery_marker()
