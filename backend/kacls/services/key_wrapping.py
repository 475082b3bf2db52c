"""Key Wrapping Service: locate, decode, call the provider, shape the response.

Invariants:
    - Exactly one terminal response shape per successful operation
    - Locator/decoder failures become 400-level KaclsErrors, never bare exceptions
    - Any provider failure becomes KeyManagementError (500); never retried
    - A wrap carrying a `reason` string and no key material is a benign no-op
    - Key material is never logged, only the path where it was found

Design Decisions:
    - One code path for wrap and unwrap, parameterized by OperationRules
    - Provider exceptions caught here, at the handler's boundary, so routes stay thin
"""

import logging

from kacls.core.boundary_protocols import KeyManagementGateway
from kacls.core.decode_base64 import decode_key_material
from kacls.core.domain_types import JsonValue, KeyOperation, KeyResource
from kacls.core.errors import (
    ErrorContext,
    InvalidKeyMaterialError,
    KeyManagementError,
    MissingKeyMaterialError,
)
from kacls.core.key_access_protocol import (
    UNWRAP_RULES,
    WRAP_RULES,
    OperationRules,
    error_envelope_reason,
    noop_response,
    received_keys,
    result_response,
)
from kacls.core.locate_base64 import locate_base64

logger = logging.getLogger(__name__)


class KeyWrappingService:
    """Serves wrap/unwrap for one configured key resource."""

    def __init__(self, gateway: KeyManagementGateway, key_resource: KeyResource):
        self.gateway = gateway
        self.key_resource = key_resource

    async def wrap(self, envelope: JsonValue) -> dict:
        return await self._run(WRAP_RULES, envelope)

    async def unwrap(self, envelope: JsonValue) -> dict:
        return await self._run(UNWRAP_RULES, envelope)

    async def _run(self, rules: OperationRules, envelope: JsonValue) -> dict:
        op = rules.operation.value
        located = locate_base64(envelope, rules.preferred_names)
        if located is None:
            reason = error_envelope_reason(envelope)
            if rules.accepts_error_envelope and reason is not None:
                logger.info(
                    "Error envelope acknowledged as no-op",
                    extra={"operation": op},
                )
                return noop_response(reason)
            raise MissingKeyMaterialError(
                rules.missing_message, received_keys(envelope),
                context=ErrorContext(operation=op),
            )

        context = ErrorContext(operation=op, field_path=located.path)
        material = decode_key_material(located.raw_value)
        if material is None:
            raise InvalidKeyMaterialError(rules.invalid_message, context=context)

        logger.info(
            f"{op}: key material located",
            extra={
                "operation": op,
                "field_name": located.field_name,
                "field_path": located.path,
            },
        )
        output = await self._call_provider(rules.operation, material, context)
        return result_response(rules, output)

    async def _call_provider(
        self, operation: KeyOperation, material: bytes, context: ErrorContext,
    ) -> bytes:
        try:
            if operation is KeyOperation.WRAP:
                return await self.gateway.encrypt(self.key_resource, material)
            return await self.gateway.decrypt(self.key_resource, material)
        except Exception as e:
            logger.error(
                f"{operation.value} error: {e}",
                exc_info=True,
                extra={"operation": operation.value},
            )
            raise KeyManagementError(
                operation.value, str(e) or type(e).__name__, context=context,
            ) from e
