# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Audit trail sink for entities that live outside the chain.

Lifecycle events of an ordinary (for example relational) entity are mirrored
into a parallel stream named ``{collection}_history``, keyed by the entity's
own identifier. The sink is one-way: it appends and can list an entity's
audit history, but it never takes part in record materialisation.

Payload published per event::

    {
        "action": "created" | "updated" | "deleted",
        "user_responsible": <resolver result or null>,
        "model_attributes": {...},
        "history_recorded_at": "<ISO 8601 UTC>"
    }

``model_attributes`` holds the full attribute set for creations and
deletions, and only the changed attributes for updates. Sensitive keys are
removed before publishing.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict

from multichain_records.client.interface import LogClient
from multichain_records.codec import decode, encode

logger = logging.getLogger("multichain.records.audit")

DEFAULT_HIDDEN: tuple[str, ...] = ("password", "remember_token")


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def changed_attributes(
    original: Mapping[str, Any],
    attributes: Mapping[str, Any],
) -> dict[str, Any]:
    """Attributes of ``attributes`` that are new or differ from ``original``."""
    return {
        key: value
        for key, value in attributes.items()
        if key not in original or original[key] != value
    }


class AuditEntry(BaseModel):
    """One decoded audit event, with the entry's txid and confirmation time."""

    model_config = ConfigDict(frozen=True)

    action: str | None = None
    user_responsible: Any = None
    model_attributes: dict[str, Any] = {}
    history_recorded_at: str | None = None
    txid: str | None = None
    recorded_at: datetime | None = None


class AuditTrail:
    """
    Publishes entity lifecycle events to ``{collection}_history`` streams.

    Parameters
    ----------
    client:
        Log client used to publish and read audit events.
    user_resolver:
        Returns the identifier of the user responsible for the current
        change (for example the authenticated user id), or ``None``.
    hidden:
        Attribute names never written to the audit stream.
    clock:
        Source of ``history_recorded_at``; defaults to the current UTC time.
    """

    def __init__(
        self,
        client: LogClient,
        *,
        user_resolver: Callable[[], Any] | None = None,
        hidden: tuple[str, ...] = DEFAULT_HIDDEN,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._user_resolver = user_resolver
        self._hidden = frozenset(hidden)
        self._clock = clock or _utc_now

    @staticmethod
    def stream_for(collection: str) -> str:
        """Name of the history stream for ``collection``."""
        return f"{collection}_history"

    def created(self, collection: str, entity_id: Any, attributes: Mapping[str, Any]) -> str:
        return self.record("created", collection, entity_id, attributes)

    def updated(
        self,
        collection: str,
        entity_id: Any,
        attributes: Mapping[str, Any],
        *,
        original: Mapping[str, Any],
    ) -> str:
        return self.record(
            "updated", collection, entity_id, changed_attributes(original, attributes)
        )

    def deleted(self, collection: str, entity_id: Any, attributes: Mapping[str, Any]) -> str:
        return self.record("deleted", collection, entity_id, attributes)

    def record(
        self,
        action: str,
        collection: str,
        entity_id: Any,
        model_attributes: Mapping[str, Any],
    ) -> str:
        """
        Publish one audit event and return its txid.

        Raises:
            EncodingError: If the attributes are not JSON-serialisable.
        """
        payload = {
            "action": action,
            "user_responsible": self._user_resolver() if self._user_resolver else None,
            "model_attributes": {
                key: value for key, value in model_attributes.items() if key not in self._hidden
            },
            "history_recorded_at": self._clock().isoformat(),
        }
        stream = self.stream_for(collection)
        txid = self._client.append(stream, str(entity_id), encode(payload))
        logger.info(
            "audit_recorded",
            extra={"stream": stream, "key": str(entity_id), "txid": txid, "action": action},
        )
        return txid

    def fetch_history(self, collection: str, entity_id: Any) -> list[AuditEntry]:
        """Every audit event for one entity, oldest-first."""
        entries = self._client.read_by_key(self.stream_for(collection), str(entity_id))
        history: list[AuditEntry] = []
        for entry in entries:
            data = decode(entry.data)
            attributes = data.get("model_attributes")
            history.append(
                AuditEntry(
                    action=data.get("action"),
                    user_responsible=data.get("user_responsible"),
                    model_attributes=attributes if isinstance(attributes, dict) else {},
                    history_recorded_at=data.get("history_recorded_at"),
                    txid=entry.txid,
                    recorded_at=(
                        datetime.fromtimestamp(entry.blocktime, tz=timezone.utc)
                        if entry.blocktime is not None
                        else None
                    ),
                )
            )
        return history
