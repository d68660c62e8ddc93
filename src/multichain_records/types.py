# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Shared type definitions for the multichain-records package.

Log entries and history entries are frozen Pydantic v2 models; pages are
frozen dataclasses. A ``Record`` is an immutable ordered mapping: a
published version can never be edited in place, so neither can its in-memory
view. Changing a record means building a new one and appending it as a new
version.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict

from multichain_records.codec import is_tombstone

logger = logging.getLogger("multichain.records.types")

# Attributes reconstructed during materialisation. They are never part of a
# published payload.
DERIVED_FIELDS: tuple[str, ...] = ("txid", "created_at", "updated_at")


def _to_datetime(value: Any) -> datetime | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


class LogEntry(BaseModel):
    """
    One immutable item of a stream, as returned by the node.

    ``keys`` keeps the node's order; only the first key is ever used to file
    the entry. ``data`` is the hex-encoded payload, or ``None`` when the node
    returned no inline data. ``blocktime`` is ``None`` for unconfirmed items.
    """

    model_config = ConfigDict(frozen=True)

    keys: tuple[str, ...] = ()
    data: str | None = None
    txid: str | None = None
    blocktime: int | None = None

    @property
    def key(self) -> str | None:
        """The key the entry is filed under, or ``None`` for a keyless entry."""
        return self.keys[0] if self.keys else None

    @classmethod
    def from_rpc(cls, item: Mapping[str, Any]) -> LogEntry:
        """
        Normalise one raw ``liststreamitems`` / ``liststreamkeyitems`` item.

        Older nodes report a single ``key`` instead of ``keys``. Inline data
        arrives either as a bare hex string or wrapped as ``{"hex": ...}`` or
        ``{"json": ...}``; anything else (for example an off-chain item
        reference) is treated as missing data.

        A field of the wrong type is dropped rather than failing the read: an
        item with unusable keys becomes keyless, and a non-string ``txid`` or
        non-integer ``blocktime`` becomes ``None``. The entry itself is kept
        so that a window keeps the length the node reported.
        """
        keys = item.get("keys")
        if keys is None:
            key = item.get("key")
            keys = [key] if key is not None else []

        dropped: list[str] = []
        if not isinstance(keys, (list, tuple)) or not all(isinstance(k, str) for k in keys):
            dropped.append("keys")
            keys = []
        txid = item.get("txid")
        if txid is not None and not isinstance(txid, str):
            dropped.append("txid")
            txid = None
        blocktime = item.get("blocktime")
        if blocktime is not None and (isinstance(blocktime, bool) or not isinstance(blocktime, int)):
            dropped.append("blocktime")
            blocktime = None
        if dropped:
            logger.warning("entry_malformed", extra={"txid": txid, "dropped": dropped})

        data = item.get("data")
        if isinstance(data, Mapping):
            if isinstance(data.get("hex"), str):
                data = data["hex"]
            elif "json" in data:
                data = json.dumps(data["json"]).encode("utf-8").hex()
            else:
                data = None
        elif not isinstance(data, str):
            data = None

        return cls(
            keys=tuple(keys),
            data=data,
            txid=txid,
            blocktime=blocktime,
        )


class Record(Mapping[str, Any]):
    """
    Immutable view of one logical record.

    Behaves as a read-only ``Mapping`` of attribute name to JSON-compatible
    value. ``set`` and ``merge`` return new records; the original is left
    untouched. Equality compares attributes with any other mapping, so
    ``record == {"id": "...", "name": "a"}`` works as expected.
    """

    __slots__ = ("_attributes",)

    def __init__(self, attributes: Mapping[str, Any] | None = None, **extra: Any) -> None:
        merged: dict[str, Any] = dict(attributes or {})
        merged.update(extra)
        self._attributes: Mapping[str, Any] = MappingProxyType(merged)

    def __getitem__(self, key: str) -> Any:
        return self._attributes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __repr__(self) -> str:
        return f"Record({dict(self._attributes)!r})"

    @property
    def id(self) -> str | None:
        return self._attributes.get("id")

    @property
    def txid(self) -> str | None:
        return self._attributes.get("txid")

    @property
    def deleted(self) -> bool:
        return is_tombstone(self._attributes)

    @property
    def created_at(self) -> datetime | None:
        """Blocktime of the oldest version seen during materialisation."""
        return _to_datetime(self._attributes.get("created_at"))

    @property
    def updated_at(self) -> datetime | None:
        """Blocktime of the version this view was built from."""
        return _to_datetime(self._attributes.get("updated_at"))

    def set(self, key: str, value: Any) -> Record:
        """Return a copy of this record with one attribute replaced."""
        return Record(self._attributes, **{key: value})

    def merge(self, attributes: Mapping[str, Any]) -> Record:
        """Return a copy with ``attributes`` layered over the current ones."""
        return Record({**self._attributes, **attributes})

    def payload(self) -> dict[str, Any]:
        """The attributes that get published: everything except derived fields."""
        return {k: v for k, v in self._attributes.items() if k not in DERIVED_FIELDS}

    def to_dict(self) -> dict[str, Any]:
        return dict(self._attributes)


class HistoryEntry(BaseModel):
    """
    One published version of a record, decoded on its own.

    No conflict resolution is applied: tombstones and superseded versions
    appear exactly as they were appended.
    """

    model_config = ConfigDict(frozen=True)

    attributes: dict[str, Any]
    txid: str | None = None
    blocktime: int | None = None

    @property
    def deleted(self) -> bool:
        return is_tombstone(self.attributes)

    @property
    def recorded_at(self) -> datetime | None:
        return _to_datetime(self.blocktime)


@dataclass(frozen=True)
class Page:
    """
    One page of live records.

    Attributes:
        items: Live records in traversal order. Shorter than ``per_page`` on
            the last page, empty past the end.
        page: The 1-indexed page number that was requested.
        per_page: The requested page size.
        exhausted: True when the whole stream was read to build this page,
            meaning no further page can hold records.
    """

    items: list[Record]
    page: int
    per_page: int
    exhausted: bool
