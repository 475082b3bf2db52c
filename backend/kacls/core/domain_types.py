"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - KeyResource wraps the Cloud KMS CryptoKey name, never a bare str in service code
    - JsonValue models the request envelope; no fixed request schema exists
    - LocatedField is immutable once built by the locator
    - All valid operations encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers for identifiers (zero runtime cost)
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType, TypeAlias


# ─── Identity Types ──────────────────────────────────────────────

# projects/<P>/locations/<L>/keyRings/<R>/cryptoKeys/<K>
KeyResource = NewType("KeyResource", str)


# ─── Envelope ────────────────────────────────────────────────────

JsonValue: TypeAlias = (
    dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None
)


@dataclass(frozen=True)
class LocatedField:
    """A base64-looking string found inside an envelope.

    path is a dotted/bracketed locator (``a.b[0].c``), used only for logs.
    """
    field_name: str
    raw_value: str
    path: str


# ─── Enums ───────────────────────────────────────────────────────

class KeyOperation(str, Enum):
    """Operations advertised by /status and served by the router."""
    WRAP = "wrap"
    UNWRAP = "unwrap"
