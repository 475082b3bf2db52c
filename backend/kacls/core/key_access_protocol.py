"""Key Access Protocol: field names, messages and response shapes of the CSE wrap/unwrap API.

Invariants:
    - Response field names are fixed by the client-side encryption protocol:
      wrap answers {"wrapped_key"}, unwrap answers {"key"}
    - /status and /.well-known/kacls shapes must not change
    - All functions here are pure

Design Decisions:
    - Per-operation rules grouped in a frozen OperationRules value so the
      service runs one code path for both operations
"""

from dataclasses import dataclass

from kacls.core.decode_base64 import encode_key_material
from kacls.core.domain_types import JsonValue, KeyOperation, KeyResource

SERVER_TYPE = "KACLS"
VENDOR_ID = "POC"
PROTOCOL_VERSION = "2.3.0"
DISCOVERY_PATH = "/.well-known/kacls"
ROOT_TIP = "use /status, /wrap, /unwrap"
ERROR_ENVELOPE_NOTE = "noop (error envelope)"


@dataclass(frozen=True)
class OperationRules:
    """Where to look for input and how to complain, for one operation."""
    operation: KeyOperation
    preferred_names: tuple[str, ...]
    missing_message: str
    invalid_message: str
    result_field: str
    accepts_error_envelope: bool


WRAP_RULES = OperationRules(
    operation=KeyOperation.WRAP,
    preferred_names=(
        "key",  # canonical
        "key_to_wrap_b64", "keyToWrapB64", "keyToWrap",
        "dek", "plaintext_b64", "plaintext", "data",
    ),
    missing_message="missing DEK (base64)",
    invalid_message="invalid base64/plaintext",
    result_field="wrapped_key",
    accepts_error_envelope=True,
)

UNWRAP_RULES = OperationRules(
    operation=KeyOperation.UNWRAP,
    preferred_names=(
        "wrapped_key",  # canonical
        "wrapped_key_b64", "wrappedKeyB64", "wrappedDek",
        "ciphertext_b64", "ciphertext", "data",
    ),
    missing_message="missing wrapped_key/ciphertext (base64)",
    invalid_message="invalid base64/ciphertext",
    result_field="key",
    accepts_error_envelope=False,
)


def received_keys(body: JsonValue) -> list[str]:
    """Top-level field names, echoed back to help callers debug a 400."""
    if isinstance(body, dict):
        return list(body.keys())
    if isinstance(body, list):
        return [str(i) for i in range(len(body))]
    return []


def error_envelope_reason(body: JsonValue) -> str | None:
    """The `reason` string of an error-reporting envelope, if present."""
    if isinstance(body, dict):
        reason = body.get("reason")
        if isinstance(reason, str):
            return reason
    return None


def result_response(rules: OperationRules, output: bytes) -> dict:
    return {rules.result_field: encode_key_material(output)}


def noop_response(reason: str) -> dict:
    return {"ok": True, "note": ERROR_ENVELOPE_NOTE, "reason": reason}


def status_descriptor(key_resource: KeyResource) -> dict:
    """Capability descriptor served at /status."""
    return {
        "server_type": SERVER_TYPE,
        "vendor_id": VENDOR_ID,
        "version": PROTOCOL_VERSION,
        "operations_supported": [op.value for op in KeyOperation],
        "key_resource": key_resource,
    }


def discovery_marker() -> dict:
    return {"ok": True, "path": DISCOVERY_PATH}


def root_descriptor() -> dict:
    return {"ok": True, "tip": ROOT_TIP}
