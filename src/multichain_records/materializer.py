# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Log-to-keyed-view materialisation.

The node only offers oldest-first windowed reads. To get a newest-first
traversal without reading the whole stream into memory, the stream is read in
fixed windows walking back from the tail (negative offsets, the node's own
"count from the end" convention) and every window is folded in reverse.
Within the traversal the first version seen for a key wins:

- a tombstone seen first hides the key for good, even if older live
  versions turn up later;
- a live version seen first becomes the key's record; later (older)
  sightings may only move ``created_at`` earlier.

Recency follows stream order, not ``blocktime``. Entries appended while a
traversal is in progress shift the tail-relative windows: they are either
not seen or cause an entry to be seen twice, and first-seen-wins makes the
duplicate harmless.

``from_tail=False`` walks forward from offset 0 instead, still reversing
each window. That mode is exact within a window but not across window
boundaries: when a key's versions straddle two windows, the version in the
earlier (older) window is the one kept.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import Any

from multichain_records.client.interface import LogClient
from multichain_records.codec import decode, is_tombstone
from multichain_records.types import LogEntry, Record

logger = logging.getLogger("multichain.records.materializer")


def iter_batches(
    client: LogClient,
    stream: str,
    batch_size: int,
    *,
    from_tail: bool = True,
) -> Iterator[list[LogEntry]]:
    """
    Yield successive ``batch_size`` windows of ``stream``.

    Window ``n`` starts at offset ``-(n + 1) * batch_size`` when reading from
    the tail, or ``n * batch_size`` when reading from the head. Stops after
    the first window shorter than ``batch_size``. Each window is only
    requested once the previous one has been consumed.
    """
    window = 0
    while True:
        offset = -(window + 1) * batch_size if from_tail else window * batch_size
        batch = client.read_batch(stream, batch_size, offset)
        logger.debug(
            "batch_read",
            extra={"stream": stream, "offset": offset, "count": batch_size, "received": len(batch)},
        )
        yield batch
        if len(batch) < batch_size:
            return
        window += 1


class Materializer:
    """
    Folds batches of raw entries into a point-in-time keyed view.

    A Materializer is single-use state for one traversal: create one, feed it
    every batch in read order, then read the view. Nothing is cached between
    traversals.
    """

    def __init__(self) -> None:
        # key -> live attributes, or None once the key is tombstoned.
        self._view: dict[str, dict[str, Any] | None] = {}
        self.entries_seen = 0

    def fold(self, batch: Sequence[LogEntry]) -> list[str]:
        """
        Fold one batch (as returned by the client, oldest-first) into the view.

        Returns the keys that became live in this batch, in traversal order.
        """
        became_live: list[str] = []

        for entry in reversed(batch):
            self.entries_seen += 1
            key = entry.key
            if key is None:
                logger.warning("entry_without_key", extra={"txid": entry.txid})
                continue

            if key not in self._view:
                attributes = decode(entry.data)
                if is_tombstone(attributes):
                    self._view[key] = None
                    continue
                self._view[key] = {
                    **attributes,
                    "id": key,
                    "txid": entry.txid,
                    "created_at": entry.blocktime,
                    "updated_at": entry.blocktime,
                }
                became_live.append(key)
                continue

            current = self._view[key]
            if current is None or entry.blocktime is None:
                continue
            if current["created_at"] is None or entry.blocktime < current["created_at"]:
                current["created_at"] = entry.blocktime

        return became_live

    def is_live(self, key: str) -> bool:
        return self._view.get(key) is not None

    def record(self, key: str) -> Record | None:
        """The live record for ``key``, or ``None`` if tombstoned or unseen."""
        attributes = self._view.get(key)
        return Record(attributes) if attributes is not None else None

    def records(self) -> list[Record]:
        """Every live record, in traversal order."""
        return [Record(attributes) for attributes in self._view.values() if attributes is not None]

    @property
    def live_count(self) -> int:
        return sum(1 for attributes in self._view.values() if attributes is not None)

    @property
    def tombstoned_count(self) -> int:
        return sum(1 for attributes in self._view.values() if attributes is None)


def materialize(
    client: LogClient,
    stream: str,
    batch_size: int,
    *,
    from_tail: bool = True,
) -> Materializer:
    """Read ``stream`` end to end in ``batch_size`` windows and fold every window."""
    materializer = Materializer()
    for batch in iter_batches(client, stream, batch_size, from_tail=from_tail):
        materializer.fold(batch)

    logger.debug(
        "materialized",
        extra={
            "stream": stream,
            "entries": materializer.entries_seen,
            "live": materializer.live_count,
            "tombstoned": materializer.tombstoned_count,
        },
    )
    return materializer
