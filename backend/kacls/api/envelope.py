"""Request Envelope: size-capped, schema-free JSON body reading.

Invariants:
    - Oversized bodies rejected (413) before parsing; declared Content-Length checked before reading
    - Chunked bodies counted while streaming; reading stops at the first chunk past the cap
    - Parse failure, empty body, or a top-level scalar all become {}
    - Content-Type is not consulted
"""

import json
import logging

from fastapi import Request

from kacls.core.domain_types import JsonValue
from kacls.core.errors import PayloadTooLargeError

logger = logging.getLogger(__name__)


async def read_envelope(request: Request) -> JsonValue:
    """FastAPI dependency: the request body as a JSON value."""
    limit = request.app.state.settings.max_body_bytes
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError(limit)

    chunks = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > limit:
            raise PayloadTooLargeError(limit)
        chunks.append(chunk)
    return parse_envelope(b"".join(chunks))


def parse_envelope(raw: bytes) -> JsonValue:
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (ValueError, RecursionError) as e:
        logger.warning(f"Unparseable request body treated as empty: {e}")
        return {}
    if not isinstance(body, (dict, list)):
        return {}
    return body
