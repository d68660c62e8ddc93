# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
RecordRepository — model-style create / find / update / delete / history
over one MultiChain stream.

RecordRepository coordinates three concerns:

1. Encoding — turning attribute mappings into hex payloads via the codec.
2. Publishing — appending every version through a pluggable log client.
3. Reading — point lookups by key, and whole-stream views built by the
   materializer and paginator.

Every write appends; nothing is ever edited or removed on the stream. A
delete is a new version carrying the tombstone flag, so deleted records stay
fully recoverable through ``history``.

Usage::

    from multichain_records import MemoryLogClient, RecordRepository

    products = RecordRepository(MemoryLogClient(), stream="products")
    product = products.create({"name": "lamp"})
    product = products.update(product, {"price": 12})
    products.delete(product)
    assert products.find(product.id) is None
    assert len(products.history(product.id)) == 3
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from multichain_records.client.interface import LogClient
from multichain_records.client.rpc import MultichainClient
from multichain_records.codec import decode, encode, is_tombstone, mark_deleted
from multichain_records.config import MultichainConfig
from multichain_records.errors import InvalidArgument, RecordNotFound
from multichain_records.materializer import Materializer, materialize
from multichain_records.paginator import Paginator
from multichain_records.types import DERIVED_FIELDS, HistoryEntry, Page, Record

logger = logging.getLogger("multichain.records.repository")

DEFAULT_BATCH_SIZE: int = 100


class RecordRepository:
    """
    Record façade bound to a single stream.

    Parameters
    ----------
    client:
        Log client used for every remote call.
    stream:
        Name of the stream holding this collection. Bound here rather than
        on a class so that one record type can live in several streams.
    batch_size:
        Window size for ``all``, ``count`` and ``paginate`` traversals.
    from_tail:
        Traverse newest-first from the tail of the stream (the default).
        ``False`` walks forward from the head and only approximates recency
        across window boundaries.
    """

    def __init__(
        self,
        client: LogClient,
        stream: str,
        batch_size: int = DEFAULT_BATCH_SIZE,
        *,
        from_tail: bool = True,
    ) -> None:
        if not stream:
            raise InvalidArgument("stream must be a non-empty string.")
        if batch_size < 1:
            raise InvalidArgument(f"batch_size must be at least 1, got {batch_size}.")
        self._client = client
        self._stream = stream
        self._batch_size = batch_size
        self._from_tail = from_tail
        self._owns_client = False

    @classmethod
    def from_config(cls, stream: str, config: MultichainConfig | None = None) -> RecordRepository:
        """Repository over a JSON-RPC client built from ``config`` (or the environment)."""
        config = config or MultichainConfig()
        repository = cls(MultichainClient(config), stream, batch_size=config.batch_size)
        repository._owns_client = True
        return repository

    def close(self) -> None:
        """Close the log client when this repository built it."""
        if self._owns_client and isinstance(self._client, MultichainClient):
            self._client.close()

    def __enter__(self) -> RecordRepository:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    @property
    def client(self) -> LogClient:
        return self._client

    @property
    def stream(self) -> str:
        return self._stream

    @property
    def batch_size(self) -> int:
        return self._batch_size

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, attributes: Mapping[str, Any]) -> Record:
        """
        Publish the first version of a new record under a fresh id.

        The caller's attributes are published as-is; the returned record
        additionally carries the generated ``id``. ``id`` and the derived
        fields are owned by the repository and may not be supplied.

        Raises:
            InvalidArgument: If ``attributes`` is empty or names ``id`` or a
                derived field.
            EncodingError: If ``attributes`` is not JSON-serialisable.
        """
        if not attributes:
            raise InvalidArgument("Cannot create a record from an empty attribute mapping.")
        self._reject_reserved(attributes, ("id", *DERIVED_FIELDS))

        key = self._generate_id()
        payload = encode(attributes)
        txid = self._client.append(self._stream, key, payload)
        self._log_publish("created", key, txid)
        return Record(attributes, id=key)

    def update(self, record: Record | str, attributes: Mapping[str, Any]) -> Record:
        """
        Merge ``attributes`` into a record and publish the full result as a
        new version.

        ``record`` may be an in-memory record or an id; an id is resolved with
        ``find`` first. There is no concurrency check: two callers updating
        the same key concurrently can lose one of the updates.

        Raises:
            InvalidArgument: If ``attributes`` is empty, names a derived field,
                or would change the id.
            RecordNotFound: If ``record`` is an id with no current version.
            EncodingError: If the merged attributes are not JSON-serialisable.
        """
        if not attributes:
            raise InvalidArgument("Cannot update a record with an empty attribute mapping.")
        self._reject_reserved(attributes, DERIVED_FIELDS)

        current = self._resolve(record)
        updated = current.merge(attributes)
        if current.id is not None and updated.id != current.id:
            raise InvalidArgument(f"Record id '{current.id}' cannot be reassigned.")
        self._publish_version(updated.payload(), "updated")
        return updated

    def delete(self, record: Record | str) -> Record:
        """
        Publish a tombstone version carrying every current attribute.

        Deleting twice appends two tombstones; the record stays absent.

        Raises:
            RecordNotFound: If ``record`` is an id with no current version.
        """
        current = self._resolve(record)
        deleted = Record(mark_deleted(current))
        self._publish_version(deleted.payload(), "deleted")
        return deleted

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find(self, record_id: str) -> Record | None:
        """
        Return the current version of ``record_id``, or ``None``.

        Only the last entry for the key is decoded. The record is absent when
        the key has no entries, when that last payload is unreadable, or when
        it is a tombstone.
        """
        entries = self._client.read_by_key(self._stream, record_id)
        if not entries:
            return None

        attributes = decode(entries[-1].data)
        if not attributes or is_tombstone(attributes):
            return None
        return Record(attributes, id=record_id)

    def all(self) -> list[Record]:
        """
        Materialise the whole stream and return every live record.

        Records carry derived ``txid``, ``created_at`` and ``updated_at``
        attributes from the traversal.
        """
        return self._materialize().records()

    def paginate(self, per_page: int, page: int = 1) -> Page:
        """Return one page of live records; see ``Paginator.paginate``."""
        return Paginator(
            self._client, self._stream, self._batch_size, from_tail=self._from_tail
        ).paginate(per_page, page)

    def count(self) -> int:
        """Number of live records in the stream."""
        return self._materialize().live_count

    def history(self, record_id: str) -> list[HistoryEntry]:
        """
        Every version ever published under ``record_id``, oldest-first.

        Each entry is decoded independently, tombstones included; an
        unreadable payload shows up as an empty attribute mapping.
        """
        return [
            HistoryEntry(attributes=decode(entry.data), txid=entry.txid, blocktime=entry.blocktime)
            for entry in self._client.read_by_key(self._stream, record_id)
        ]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _materialize(self) -> Materializer:
        return materialize(self._client, self._stream, self._batch_size, from_tail=self._from_tail)

    @staticmethod
    def _reject_reserved(attributes: Mapping[str, Any], reserved: tuple[str, ...]) -> None:
        clashes = sorted(name for name in reserved if name in attributes)
        if clashes:
            raise InvalidArgument(f"Attributes {clashes} are managed by the repository.")

    def _generate_id(self) -> str:
        return f"{self._stream}:{uuid.uuid4().hex}"

    def _resolve(self, record: Record | str) -> Record:
        if isinstance(record, Record):
            return record
        current = self.find(record)
        if current is None:
            raise RecordNotFound(self._stream, record)
        return current

    def _publish_version(self, payload: dict[str, Any], action: str) -> str:
        key = payload.get("id")
        if not key:
            raise InvalidArgument("Record has no id; it must come from create, find or all.")
        txid = self._client.append(self._stream, key, encode(payload))
        self._log_publish(action, key, txid)
        return txid

    def _log_publish(self, action: str, key: str, txid: str) -> None:
        logger.info(
            "record_published",
            extra={"stream": self._stream, "key": key, "txid": txid, "action": action},
        )
