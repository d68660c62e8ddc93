# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
JSON-RPC log client for a MultiChain node.

Every call is one blocking ``POST`` of ``{method, params, id, chain_name}``
with HTTP basic auth. Failures are mapped onto two error types:

- ``TransportError`` — the node could not be reached, or the body was not a
  JSON-RPC response object.
- ``RemoteError`` — the node answered with a non-empty ``error`` field. The
  node reports RPC errors with HTTP 500, so the body is inspected before the
  status code.

Timeouts come from the configuration and are enforced by httpx; there is no
retry at this layer.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

import httpx

from multichain_records.client.interface import LogClient
from multichain_records.config import MultichainConfig
from multichain_records.errors import InvalidArgument, RemoteError, TransportError
from multichain_records.types import LogEntry

logger = logging.getLogger("multichain.records.client")

# liststream*items count meaning "everything"; the node has no unbounded form.
_ALL_ITEMS: int = 2**31 - 1


class MultichainClient(LogClient):
    """
    Thin synchronous JSON-RPC wrapper over ``httpx.Client``.

    Parameters
    ----------
    config:
        Connection settings. Defaults to ``MultichainConfig()``, which reads
        ``MULTICHAIN_*`` environment variables.
    transport:
        Optional httpx transport, mainly for ``httpx.MockTransport`` in tests.
    client:
        A pre-built ``httpx.Client`` to use instead of creating one. A client
        passed in is not closed by ``close()``.
    """

    def __init__(
        self,
        config: MultichainConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._config = config or MultichainConfig()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=self._config.url,
            auth=(self._config.user, self._config.password.get_secret_value()),
            timeout=self._config.timeout_seconds,
            transport=transport,
        )

    @property
    def config(self) -> MultichainConfig:
        return self._config

    def close(self) -> None:
        """Close underlying transport resources when owned."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> MultichainClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # JSON-RPC
    # ------------------------------------------------------------------

    def call(self, method: str, params: list[Any] | None = None) -> Any:
        """
        Issue one JSON-RPC call and return its ``result``.

        Raises:
            TransportError: On connection failure, timeout, or a body that is
                not a JSON object.
            RemoteError: When the response carries a non-empty ``error``.
        """
        body = {
            "method": method,
            "params": params or [],
            "id": uuid.uuid4().hex,
            "chain_name": self._config.chain,
        }
        logger.debug("rpc_call", extra={"method": method, "chain": self._config.chain})

        try:
            response = self._client.post("/", json=body)
        except httpx.RequestError as exc:
            raise TransportError(
                f"Failed to connect to MultiChain at {self._config.url}: {exc}",
                method=method,
                cause=exc,
            ) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError(
                f"MultiChain returned a non-JSON body for '{method}' "
                f"(HTTP {response.status_code}).",
                method=method,
                cause=exc,
            ) from exc

        if not isinstance(data, dict):
            raise TransportError(
                f"MultiChain returned a malformed response for '{method}'.",
                method=method,
            )

        error = data.get("error")
        if error:
            raise RemoteError(method, error)

        if response.is_error:
            raise TransportError(
                f"MultiChain answered '{method}' with HTTP {response.status_code}.",
                method=method,
            )

        return data.get("result")

    # ------------------------------------------------------------------
    # LogClient
    # ------------------------------------------------------------------

    def append(self, stream: str, key: str, payload: str) -> str:
        return self.call("publish", [stream, key, payload])

    def read_all(self, stream: str) -> list[LogEntry]:
        method = "liststreamitems"
        return self._entries(method, self.call(method, [stream, False, _ALL_ITEMS, 0, False]))

    def read_batch(self, stream: str, count: int, offset: int) -> list[LogEntry]:
        if count < 1:
            raise InvalidArgument(f"count must be at least 1, got {count}.")
        method = "liststreamitems"
        return self._entries(method, self.call(method, [stream, False, count, offset, False]))

    def read_by_key(self, stream: str, key: str) -> list[LogEntry]:
        method = "liststreamkeyitems"
        return self._entries(method, self.call(method, [stream, key, False, _ALL_ITEMS, 0, False]))

    @staticmethod
    def _entries(method: str, result: Any) -> list[LogEntry]:
        if not result:
            return []
        if not isinstance(result, list):
            raise TransportError(f"MultiChain returned a non-list result for '{method}'.", method=method)
        # A non-object item stays in the window as a keyless entry.
        return [LogEntry.from_rpc(item) if isinstance(item, dict) else LogEntry() for item in result]
