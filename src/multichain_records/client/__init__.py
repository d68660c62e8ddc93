# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

from .interface import LogClient
from .memory import MemoryLogClient
from .rpc import MultichainClient

__all__ = ["LogClient", "MemoryLogClient", "MultichainClient"]
