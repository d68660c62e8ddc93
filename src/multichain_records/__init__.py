# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
multichain-records — model-style records on top of MultiChain streams.

Every version of a record is appended to a stream under the record's id;
current views are rebuilt from the raw entries on every read.

Public API surface:

    Classes:
        RecordRepository — create(), find(), update(), delete(), all(),
                           paginate(), count(), history()
        Materializer     — folds stream windows into a keyed view
        Paginator        — early-stopping pages of live records
        AuditTrail       — one-way audit sink for off-chain entities
        MultichainClient — JSON-RPC log client (httpx)
        MemoryLogClient  — volatile in-memory log client
        LogClient        — log client contract

    Functions:
        encode, decode   — hex/JSON wire codec
        materialize      — read a stream to its end into a Materializer
        paginate         — one-shot Paginator helper

    Types:
        Record, LogEntry, HistoryEntry, Page, AuditEntry, MultichainConfig

    Errors:
        MultichainError, TransportError, RemoteError, InvalidArgument,
        EncodingError, RecordNotFound
"""

from multichain_records.audit import AuditEntry, AuditTrail
from multichain_records.client import LogClient, MemoryLogClient, MultichainClient
from multichain_records.codec import TOMBSTONE_FIELD, decode, encode, is_tombstone
from multichain_records.config import MultichainConfig
from multichain_records.errors import (
    EncodingError,
    InvalidArgument,
    MultichainError,
    RecordNotFound,
    RemoteError,
    TransportError,
)
from multichain_records.materializer import Materializer, materialize
from multichain_records.paginator import Paginator, paginate
from multichain_records.repository import RecordRepository
from multichain_records.types import HistoryEntry, LogEntry, Page, Record

__all__ = [
    # Core classes
    "RecordRepository",
    "Materializer",
    "Paginator",
    "AuditTrail",
    # Clients
    "LogClient",
    "MemoryLogClient",
    "MultichainClient",
    "MultichainConfig",
    # Codec
    "encode",
    "decode",
    "is_tombstone",
    "TOMBSTONE_FIELD",
    # Helpers
    "materialize",
    "paginate",
    # Types
    "Record",
    "LogEntry",
    "HistoryEntry",
    "Page",
    "AuditEntry",
    # Errors
    "MultichainError",
    "TransportError",
    "RemoteError",
    "InvalidArgument",
    "EncodingError",
    "RecordNotFound",
]
