# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation
"""Test helpers shared across modules."""

from __future__ import annotations

from typing import Any

from multichain_records.codec import encode
from multichain_records.types import LogEntry

STREAM = "products"


class FakeClock:
    """Deterministic blocktime source: every call advances by ``step`` seconds."""

    def __init__(self, start: int = 1_700_000_000, step: int = 10) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        current = self.now
        self.now += self.step
        return current


def make_entry(
    key: str | None,
    attributes: dict[str, Any] | None,
    blocktime: int | None = 1_700_000_000,
    txid: str | None = None,
) -> LogEntry:
    """Build a LogEntry the way the node would return it."""
    return LogEntry(
        keys=(key,) if key is not None else (),
        data=encode(attributes) if attributes is not None else None,
        txid=txid,
        blocktime=blocktime,
    )
