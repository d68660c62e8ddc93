# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from typing import Any


class MultichainError(Exception):
    """Base class for all multichain-records errors."""

    def __init__(self, message: str, code: str = "MULTICHAIN_ERROR") -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class TransportError(MultichainError):
    """
    Raised when the remote node cannot be reached or answers with something
    that is not a JSON-RPC response.

    Never retried internally — callers own retry policy.

    Attributes:
        method: The RPC method being called.
        cause: The underlying exception, when there is one.
    """

    def __init__(
        self,
        message: str,
        method: str,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, code="TRANSPORT_ERROR")
        self.method = method
        self.cause = cause


class RemoteError(MultichainError):
    """
    Raised when the node returns a structured error response.

    Attributes:
        method: The RPC method being called.
        error: The raw ``error`` payload from the response, unchanged.
        error_code: The node's numeric error code, when the payload has one.
    """

    def __init__(self, method: str, error: Any) -> None:
        error_code = error.get("code") if isinstance(error, dict) else None
        detail = error.get("message", error) if isinstance(error, dict) else error
        super().__init__(
            f"MultiChain RPC error from '{method}': {detail}",
            code="REMOTE_ERROR",
        )
        self.method = method
        self.error = error
        self.error_code = error_code


class InvalidArgument(MultichainError, ValueError):
    """Raised synchronously, before any remote call, for unusable arguments."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_ARGUMENT")


class EncodingError(MultichainError, ValueError):
    """Raised when a record payload cannot be serialised to JSON."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message, code="ENCODING_ERROR")
        self.cause = cause


class RecordNotFound(MultichainError):
    """Raised when an update or delete targets a key with no current version."""

    def __init__(self, stream: str, record_id: str) -> None:
        super().__init__(
            f"No current record '{record_id}' in stream '{stream}'.",
            code="RECORD_NOT_FOUND",
        )
        self.stream = stream
        self.record_id = record_id
