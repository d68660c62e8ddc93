# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Early-stopping pagination over the materialised, live-only key space.

Pages are counted in live records, not raw entries: page ``n`` of size ``k``
holds live records ``(n-1)*k`` to ``n*k - 1`` in traversal order. Windows are
read only until that many live records have been seen, so early pages of a
long stream cost a bounded number of remote calls.

Because reading stops early, a record's ``created_at`` only reflects the
windows actually read; older versions further down the stream do not lower
it. Use ``RecordRepository.all`` when exact creation times matter.
"""

from __future__ import annotations

from multichain_records.client.interface import LogClient
from multichain_records.errors import InvalidArgument
from multichain_records.materializer import Materializer, iter_batches
from multichain_records.types import Page


class Paginator:
    """
    Paginates one stream.

    Parameters
    ----------
    client:
        Log client to read windows from.
    stream:
        Stream to paginate.
    batch_size:
        Entries requested per window.
    from_tail:
        Walk the stream newest-first from the tail (the default) or forward
        from the head; see ``multichain_records.materializer``.
    """

    def __init__(
        self,
        client: LogClient,
        stream: str,
        batch_size: int,
        *,
        from_tail: bool = True,
    ) -> None:
        if batch_size < 1:
            raise InvalidArgument(f"batch_size must be at least 1, got {batch_size}.")
        self._client = client
        self._stream = stream
        self._batch_size = batch_size
        self._from_tail = from_tail

    def paginate(self, per_page: int, page: int = 1) -> Page:
        """
        Return the 1-indexed ``page`` of ``per_page`` live records.

        An out-of-range page (past the end, or below 1) is an empty page,
        not an error.

        Raises:
            InvalidArgument: If ``per_page`` is less than 1.
        """
        if per_page < 1:
            raise InvalidArgument(f"per_page must be at least 1, got {per_page}.")
        if page < 1:
            return Page(items=[], page=page, per_page=per_page, exhausted=False)

        offset = (page - 1) * per_page
        wanted = offset + per_page

        materializer = Materializer()
        live_keys: list[str] = []
        exhausted = False

        for batch in iter_batches(
            self._client, self._stream, self._batch_size, from_tail=self._from_tail
        ):
            live_keys.extend(materializer.fold(batch))
            exhausted = len(batch) < self._batch_size
            if len(live_keys) >= wanted:
                break

        items = []
        for key in live_keys[offset:wanted]:
            record = materializer.record(key)
            if record is not None:
                items.append(record)

        return Page(items=items, page=page, per_page=per_page, exhausted=exhausted)


def paginate(
    client: LogClient,
    stream: str,
    per_page: int,
    page: int = 1,
    batch_size: int = 100,
    *,
    from_tail: bool = True,
) -> Page:
    """One-shot helper around ``Paginator.paginate``."""
    return Paginator(client, stream, batch_size, from_tail=from_tail).paginate(per_page, page)
