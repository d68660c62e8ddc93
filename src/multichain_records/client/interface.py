# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Abstract base class that every log client must implement.

Implementations must guarantee append-only semantics: entries written through
``append`` are never altered or removed, and every read returns entries
oldest-first in the order the store decided.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from multichain_records.types import LogEntry


class LogClient(ABC):
    """
    Contract for the four primitives the record layer needs from a stream store.

    The interface is intentionally minimal — there is no server-side filtering,
    deduplication or cursor. Everything else (materialisation, pagination,
    tombstones) is built on top of these calls.
    """

    @abstractmethod
    def append(self, stream: str, key: str, payload: str) -> str:
        """
        Append one entry tagged with ``key`` to ``stream``.

        ``payload`` is the hex wire payload produced by the codec. Returns the
        new entry's identifier (the node's txid).
        """
        ...

    @abstractmethod
    def read_all(self, stream: str) -> list[LogEntry]:
        """Return every entry of ``stream``, oldest-first."""
        ...

    @abstractmethod
    def read_batch(self, stream: str, count: int, offset: int) -> list[LogEntry]:
        """
        Return up to ``count`` entries of ``stream``, oldest-within-window first.

        A non-negative ``offset`` counts from the head of the stream. A
        negative ``offset`` counts back from the tail, so ``offset=-count``
        is the newest window. A window reaching past the head is trimmed to
        the entries that exist; fewer than ``count`` entries therefore means
        the window touched an end of the stream.
        """
        ...

    @abstractmethod
    def read_by_key(self, stream: str, key: str) -> list[LogEntry]:
        """Return every entry ever appended under ``key``, oldest-first."""
        ...
