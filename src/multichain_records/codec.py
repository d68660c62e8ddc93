# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Wire codec for stream payloads.

A payload is the JSON serialisation of an attribute mapping, hex-encoded so
it can be handed to ``publish`` as-is. Decoding is deliberately lossy: an
empty, non-hex, non-JSON, over-nested or non-object payload decodes to
``{}`` instead of raising, so that one malformed entry can never abort a
batch read.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from multichain_records.errors import EncodingError

logger = logging.getLogger("multichain.records.codec")

# Attribute whose truthy presence marks a version as a tombstone.
TOMBSTONE_FIELD: str = "deleted"


def encode(attributes: Mapping[str, Any]) -> str:
    """
    Serialise an attribute mapping to its hex wire payload.

    Raises:
        EncodingError: If any value is not JSON-serialisable (including NaN
            and infinities, which have no JSON representation) or the
            mapping is nested too deeply to serialise.
    """
    try:
        serialised = json.dumps(dict(attributes), allow_nan=False)
    except (TypeError, ValueError, RecursionError) as exc:
        raise EncodingError(f"Record attributes are not JSON-serialisable: {exc}", cause=exc) from exc
    return serialised.encode("utf-8").hex()


def decode(payload: str | bytes | None) -> dict[str, Any]:
    """Decode a hex wire payload back into an attribute mapping."""
    if not payload:
        return {}

    try:
        text = payload.decode("ascii") if isinstance(payload, bytes) else payload
        data = json.loads(bytes.fromhex(text).decode("utf-8"))
    except (ValueError, RecursionError):
        logger.warning("payload_undecodable", extra={"payload_length": len(payload)})
        return {}

    if not isinstance(data, dict):
        logger.warning("payload_undecodable", extra={"payload_length": len(payload)})
        return {}
    return data


def is_tombstone(attributes: Mapping[str, Any]) -> bool:
    """Return True when a decoded payload marks its record as deleted."""
    return bool(attributes.get(TOMBSTONE_FIELD))


def mark_deleted(attributes: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``attributes`` carrying the tombstone flag."""
    return {**attributes, TOMBSTONE_FIELD: True}
