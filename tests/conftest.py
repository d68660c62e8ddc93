# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation
"""Shared fixtures for multichain-records tests."""

from __future__ import annotations

import pytest
from helpers import STREAM, FakeClock

from multichain_records.client.memory import MemoryLogClient
from multichain_records.repository import RecordRepository


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client(clock: FakeClock) -> MemoryLogClient:
    """A fresh in-memory log client with a deterministic clock."""
    return MemoryLogClient(clock=clock)


@pytest.fixture
def repository(client: MemoryLogClient) -> RecordRepository:
    """A repository over the 'products' stream with a small window size."""
    return RecordRepository(client, stream=STREAM, batch_size=3)
