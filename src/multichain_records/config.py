# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from typing import Annotated

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class MultichainConfig(BaseSettings):
    """
    Connection settings for a MultiChain node.

    Every field can be passed as a keyword or picked up from a
    ``MULTICHAIN_``-prefixed environment variable (``MULTICHAIN_HOST``,
    ``MULTICHAIN_PORT`` and so on). Keywords win over the environment.

    Attributes:
        enable: Host applications use this to switch chain writes on or off.
            The library itself never reads it.
        host: Node RPC host.
        port: Node RPC port.
        user: RPC basic-auth user.
        password: RPC basic-auth password.
        chain: Chain name sent with every request as ``chain_name``.
        timeout_seconds: Per-request timeout handed to the HTTP transport.
        batch_size: Number of entries requested per ``liststreamitems``
            window when materialising a stream.

    Example::

        config = MultichainConfig(host="10.0.0.5", chain="inventory")
        client = MultichainClient(config)
    """

    model_config = SettingsConfigDict(env_prefix="MULTICHAIN_", frozen=True)

    enable: bool = False
    host: str = "127.0.0.1"
    port: Annotated[int, Field(gt=0, le=65535)] = 9538
    user: str = "multichainrpc"
    password: SecretStr = SecretStr("password")
    chain: str = "multichain"
    timeout_seconds: Annotated[float, Field(gt=0)] = 10.0
    batch_size: Annotated[int, Field(gt=0)] = 100

    @property
    def url(self) -> str:
        """Base URL of the node's JSON-RPC endpoint."""
        return f"http://{self.host}:{self.port}"
