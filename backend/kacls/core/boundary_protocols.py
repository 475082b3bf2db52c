"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - The key-management provider is accessed only through KeyManagementGateway
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - No retries, caching or circuit breaking at this seam; failures propagate unchanged
"""

from typing import Protocol

from kacls.core.domain_types import KeyResource


class KeyManagementGateway(Protocol):
    """Contract for the external encrypt/decrypt provider, implemented by shell."""
    async def encrypt(self, key_resource: KeyResource, plaintext: bytes) -> bytes: ...
    async def decrypt(self, key_resource: KeyResource, ciphertext: bytes) -> bytes: ...
    async def aclose(self) -> None: ...
