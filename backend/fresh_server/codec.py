"""Metadata codec.

Converts the nested metadata document of a config entry to the compact JSON
text kept in the ``configs.metadata`` column, and back.
"""

from __future__ import annotations

import json
from typing import Any

from fresh_server.errors import DecodeError, EncodeError

Metadata = dict[str, Any]


def encode_metadata(document: Metadata) -> str:
    """Serialize *document* to compact JSON with sorted keys."""
    try:
        return json.dumps(
            document, separators=(",", ":"), sort_keys=True, allow_nan=False
        )
    except (TypeError, ValueError) as e:
        raise EncodeError(f"metadata is not serializable: {e}") from e


def decode_metadata(raw: Any) -> Metadata:
    """Decode stored metadata text.

    Storage drivers hand back either ``str`` or a bytes-like value; both are
    accepted. Anything else, empty input, malformed JSON, or a top-level value
    that is not an object raises :class:`DecodeError`.
    """
    if raw is None:
        raise DecodeError("empty input data")

    if isinstance(raw, (bytes, bytearray, memoryview)):
        try:
            text = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"metadata is not valid UTF-8: {e}") from e
    elif isinstance(raw, str):
        text = raw
    else:
        raise DecodeError(f"unexpected data type {type(raw).__name__}")

    if not text.strip():
        raise DecodeError("empty input data")

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"metadata is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise DecodeError(
            f"metadata must be a JSON object, got {type(document).__name__}"
        )
    return document
