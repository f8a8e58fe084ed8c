from __future__ import annotations

import time
from typing import Any, AsyncIterable, Awaitable, Callable, Optional

import grpc

from t_invest_sdk.core.exceptions import (
    TRACKING_ID_META_KEY,
    error_message_of,
    tracking_id_of,
)
from t_invest_sdk.core.logging_config import get_logger


logger = get_logger(__name__)


def _method_name(client_call_details: grpc.aio.ClientCallDetails) -> str:
    method = client_call_details.method
    if isinstance(method, bytes):
        return method.decode("utf-8")
    return method


def _tracking_id(client_call_details: grpc.aio.ClientCallDetails) -> Optional[str]:
    for key, value in client_call_details.metadata or ():
        if key == TRACKING_ID_META_KEY:
            return value
    return None


class LoggingInterceptor(
    grpc.aio.UnaryUnaryClientInterceptor,
    grpc.aio.UnaryStreamClientInterceptor,
    grpc.aio.StreamUnaryClientInterceptor,
    grpc.aio.StreamStreamClientInterceptor,
):
    """Structured logs for outgoing calls.

    Unary calls are awaited here so their outcome and latency can be logged,
    then the call object itself is returned; failures are logged and
    re-raised unchanged. Streaming calls are handed back untouched (the
    caller needs ``read``/``write`` on the call object), only their open and
    close are logged.
    """

    async def intercept_unary_unary(
        self,
        continuation: Callable[[grpc.aio.ClientCallDetails, Any], Awaitable[grpc.aio.UnaryUnaryCall]],
        client_call_details: grpc.aio.ClientCallDetails,
        request: Any,
    ):
        method = _method_name(client_call_details)
        tracking_id = _tracking_id(client_call_details)
        start = time.perf_counter()
        logger.debug("grpc_call", method=method, tracking_id=tracking_id)
        call = await continuation(client_call_details, request)
        try:
            await call
        except grpc.aio.AioRpcError as exc:
            logger.warning(
                "grpc_call_failed",
                method=method,
                code=exc.code().name,
                details=exc.details(),
                message=error_message_of(exc),
                tracking_id=tracking_id,
                server_tracking_id=tracking_id_of(exc),
            )
            raise
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.debug("grpc_call_done", method=method, elapsed_ms=round(elapsed_ms, 2), tracking_id=tracking_id)
        # callers read initial/trailing metadata from the call
        return call

    def _watch_stream(self, call, client_call_details: grpc.aio.ClientCallDetails):
        method = _method_name(client_call_details)
        tracking_id = _tracking_id(client_call_details)
        start = time.perf_counter()
        logger.info("grpc_stream_opened", method=method, tracking_id=tracking_id)

        def _on_done(done_call) -> None:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "grpc_stream_closed",
                method=method,
                cancelled=done_call.cancelled(),
                elapsed_ms=round(elapsed_ms, 2),
                tracking_id=tracking_id,
            )

        call.add_done_callback(_on_done)
        return call

    async def intercept_unary_stream(
        self,
        continuation: Callable[[grpc.aio.ClientCallDetails, Any], Awaitable[grpc.aio.UnaryStreamCall]],
        client_call_details: grpc.aio.ClientCallDetails,
        request: Any,
    ):
        call = await continuation(client_call_details, request)
        return self._watch_stream(call, client_call_details)

    async def intercept_stream_unary(
        self,
        continuation: Callable[[grpc.aio.ClientCallDetails, AsyncIterable[Any]], Awaitable[grpc.aio.StreamUnaryCall]],
        client_call_details: grpc.aio.ClientCallDetails,
        request_iterator: AsyncIterable[Any],
    ):
        call = await continuation(client_call_details, request_iterator)
        return self._watch_stream(call, client_call_details)

    async def intercept_stream_stream(
        self,
        continuation: Callable[[grpc.aio.ClientCallDetails, AsyncIterable[Any]], Awaitable[grpc.aio.StreamStreamCall]],
        client_call_details: grpc.aio.ClientCallDetails,
        request_iterator: AsyncIterable[Any],
    ):
        call = await continuation(client_call_details, request_iterator)
        return self._watch_stream(call, client_call_details)
