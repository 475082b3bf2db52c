"""Key Wrapping Routes: POST /wrap and POST /unwrap.

Invariants:
    - Success bodies: {"wrapped_key"} for wrap, {"key"} for unwrap
    - Errors raised as KaclsError and rendered by the global handlers
    - Routes never contain protocol logic (delegated to KeyWrappingService)
"""

from fastapi import APIRouter, Depends

from kacls.api.dependencies import get_key_wrapping_service
from kacls.api.envelope import read_envelope
from kacls.core.domain_types import JsonValue
from kacls.services.key_wrapping import KeyWrappingService

router = APIRouter(tags=["key-wrapping"])


@router.post("/wrap")
async def wrap(
    envelope: JsonValue = Depends(read_envelope),
    service: KeyWrappingService = Depends(get_key_wrapping_service),
):
    """Encrypt a DEK with the configured KMS key."""
    return await service.wrap(envelope)


@router.post("/unwrap")
async def unwrap(
    envelope: JsonValue = Depends(read_envelope),
    service: KeyWrappingService = Depends(get_key_wrapping_service),
):
    """Decrypt a wrapped DEK with the configured KMS key."""
    return await service.unwrap(envelope)
