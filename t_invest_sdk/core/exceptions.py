"""
SDK exceptions.

Only failures that happen inside the SDK get their own types. RPC status
errors returned by the API reach callers unchanged as
``grpc.aio.AioRpcError``; the helpers below read the diagnostic trailing
metadata the API attaches to them.
"""
from __future__ import annotations

from typing import Optional

import grpc


TRACKING_ID_META_KEY = "x-tracking-id"
ERROR_MESSAGE_META_KEY = "message"


class TInvestError(Exception):
    """Base class for errors raised by the SDK itself."""

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | {self.details}"
        return self.message


class TInvestConfigError(TInvestError):
    """Invalid SDK configuration (token, compression, TLS files)."""
    pass


class TInvestConnectionError(TInvestError):
    """Channel did not become ready within the connect timeout."""

    def __init__(self, target: str, timeout: float) -> None:
        super().__init__(
            f"Could not connect to {target} within {timeout}s",
            details={"target": target, "timeout": timeout},
        )
        self.target = target
        self.timeout = timeout


class ConversionError(TInvestError, ValueError):
    """Value cannot be converted between protobuf and Python types."""
    pass


def _metadata_value(metadata, key: str) -> Optional[str]:
    for k, v in metadata or ():
        if k == key:
            return v
    return None


def tracking_id_of(exc: grpc.aio.AioRpcError) -> Optional[str]:
    """Server-side tracking id of a failed call, if the API sent one."""
    return _metadata_value(exc.trailing_metadata(), TRACKING_ID_META_KEY)


def error_message_of(exc: grpc.aio.AioRpcError) -> Optional[str]:
    """Human-readable error description from the trailing metadata."""
    return _metadata_value(exc.trailing_metadata(), ERROR_MESSAGE_META_KEY)
