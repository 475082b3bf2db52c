"""Cloud KMS Gateway: thin adapter over the async Cloud KMS client.

Invariants:
    - One network call per operation; no retries (retry=None), no caching
    - Failures propagate unchanged; the service maps them to KeyManagementError
    - Timeout applied only when configured; otherwise the call is unbounded
"""

import logging

from google.cloud import kms_v1

from kacls.core.domain_types import KeyResource

logger = logging.getLogger(__name__)


class CloudKmsGateway:
    """Implements KeyManagementGateway with KeyManagementServiceAsyncClient."""

    def __init__(
        self,
        client: kms_v1.KeyManagementServiceAsyncClient | None = None,
        timeout_seconds: float | None = None,
    ):
        self.client = client or kms_v1.KeyManagementServiceAsyncClient()
        self.timeout_seconds = timeout_seconds

    async def encrypt(self, key_resource: KeyResource, plaintext: bytes) -> bytes:
        response = await self.client.encrypt(
            request={"name": key_resource, "plaintext": plaintext},
            **self._call_options(),
        )
        return bytes(response.ciphertext)

    async def decrypt(self, key_resource: KeyResource, ciphertext: bytes) -> bytes:
        response = await self.client.decrypt(
            request={"name": key_resource, "ciphertext": ciphertext},
            **self._call_options(),
        )
        return bytes(response.plaintext)

    async def aclose(self) -> None:
        await self.client.transport.close()
        logger.info("Cloud KMS client closed")

    def _call_options(self) -> dict:
        options: dict = {"retry": None}
        if self.timeout_seconds is not None:
            options["timeout"] = self.timeout_seconds
        return options
