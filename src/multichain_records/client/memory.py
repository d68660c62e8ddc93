# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Volatile in-memory log client.

Entries are held in plain per-stream lists in append order. Suitable for
testing, short-lived processes and offline development; data is lost when
the process exits.
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

from multichain_records.client.interface import LogClient
from multichain_records.errors import InvalidArgument
from multichain_records.types import LogEntry


def _now() -> int:
    return int(time.time())


class MemoryLogClient(LogClient):
    """
    In-memory, non-persistent LogClient implementation.

    Parameters
    ----------
    clock:
        Returns the blocktime stamped on each appended entry. Defaults to the
        current Unix time; tests pass a fake clock for deterministic times.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock or _now
        self._streams: dict[str, list[LogEntry]] = {}

    def append(self, stream: str, key: str, payload: str) -> str:
        txid = uuid.uuid4().hex
        entry = LogEntry(keys=(key,), data=payload, txid=txid, blocktime=self._clock())
        self._streams.setdefault(stream, []).append(entry)
        return txid

    def read_all(self, stream: str) -> list[LogEntry]:
        return list(self._streams.get(stream, []))

    def read_batch(self, stream: str, count: int, offset: int) -> list[LogEntry]:
        if count < 1:
            raise InvalidArgument(f"count must be at least 1, got {count}.")
        entries = self._streams.get(stream, [])
        size = len(entries)

        # Same clamping as the node: a negative start counts from the end and a
        # start before the head shortens the window instead of failing.
        start = offset
        if start < 0:
            start += size
            if start < 0:
                count += start
                start = 0
        count = max(0, min(count, size - start))
        return entries[start : start + count]

    def read_by_key(self, stream: str, key: str) -> list[LogEntry]:
        return [entry for entry in self._streams.get(stream, []) if entry.key == key]

    def inject(self, stream: str, entry: LogEntry) -> None:
        """
        Append a pre-built entry verbatim.

        Lets tests reproduce what a real node can hand back: keyless items,
        corrupt payloads or out-of-order blocktimes.
        """
        self._streams.setdefault(stream, []).append(entry)
