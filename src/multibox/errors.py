"""
Exception hierarchy for the Multibox client.

All client-specific exceptions inherit from MultiboxError for easy catching.
Nothing here is retried: errors surface to the caller of the awaited call.
"""

from __future__ import annotations

from typing import Any, Optional


class MultiboxError(Exception):
    """
    Base exception for all Multibox client errors.

    Example:
        >>> try:
        ...     await client.new_request(...)
        ... except MultiboxError as e:
        ...     print(f"Multibox error: {e}")
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(MultiboxError):
    """Configuration is missing or invalid."""

    pass


class ArtifactError(MultiboxError):
    """
    Contract artifact problem.

    Raised when:
    - The ABI or artifact file cannot be found or parsed
    - A function is not present in the ABI
    - Deployment is requested but the artifact carries no bytecode
    """

    pass


class RpcError(MultiboxError):
    """
    The node answered with a JSON-RPC error object.

    Contract reverts land here too; the node's payload is kept as-is in
    ``code`` and ``data``.
    """

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        data: Any = None,
        method: Optional[str] = None,
    ) -> None:
        details: dict[str, Any] = {}
        if method:
            details["method"] = method
        if code is not None:
            details["code"] = code
        if data is not None:
            details["data"] = data
        super().__init__(message, details)
        self.code = code
        self.data = data
        self.method = method


class RpcTransportError(MultiboxError):
    """The node could not be reached, timed out, or returned a bad HTTP status."""

    pass


class SigningError(MultiboxError):
    """A transaction could not be signed (e.g. malformed private key)."""

    pass


class ConfirmationTimeout(MultiboxError, TimeoutError):
    """No receipt appeared for a transaction within the polling window."""

    def __init__(self, tx_hash: str, timeout: float) -> None:
        super().__init__(
            f"Transaction {tx_hash} not confirmed within {timeout}s",
            {"tx_hash": tx_hash, "timeout": timeout},
        )
        self.tx_hash = tx_hash
        self.timeout = timeout


class FeedLocationHashError(MultiboxError, ValueError):
    """An address, name-hash or feed-location hash has the wrong shape."""

    pass


class InvalidAddressError(MultiboxError, ValueError):
    """A contract or account address is not a valid 20-byte hex address."""

    pass
