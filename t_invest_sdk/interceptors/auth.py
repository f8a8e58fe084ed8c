from __future__ import annotations

import uuid
from typing import Any, AsyncIterable, Awaitable, Callable, List, Tuple

import grpc

from t_invest_sdk.core.exceptions import TRACKING_ID_META_KEY


AUTHORIZATION_META_KEY = "authorization"
APP_NAME_META_KEY = "x-app-name"


class MetadataInterceptor(
    grpc.aio.UnaryUnaryClientInterceptor,
    grpc.aio.UnaryStreamClientInterceptor,
    grpc.aio.StreamUnaryClientInterceptor,
    grpc.aio.StreamStreamClientInterceptor,
):
    """Appends per-call metadata to every RPC kind.

    Subclasses implement ``extra_metadata``; metadata set by the caller is
    kept as is.
    """

    def extra_metadata(self) -> List[Tuple[str, str]]:
        raise NotImplementedError

    def _with_metadata(self, client_call_details: grpc.aio.ClientCallDetails) -> grpc.aio.ClientCallDetails:
        metadata = grpc.aio.Metadata(*tuple(client_call_details.metadata or ()))
        for key, value in self.extra_metadata():
            metadata.add(key, value)
        return grpc.aio.ClientCallDetails(
            method=client_call_details.method,
            timeout=client_call_details.timeout,
            metadata=metadata,
            credentials=client_call_details.credentials,
            wait_for_ready=client_call_details.wait_for_ready,
        )

    async def intercept_unary_unary(
        self,
        continuation: Callable[[grpc.aio.ClientCallDetails, Any], Awaitable[grpc.aio.UnaryUnaryCall]],
        client_call_details: grpc.aio.ClientCallDetails,
        request: Any,
    ):
        return await continuation(self._with_metadata(client_call_details), request)

    async def intercept_unary_stream(
        self,
        continuation: Callable[[grpc.aio.ClientCallDetails, Any], Awaitable[grpc.aio.UnaryStreamCall]],
        client_call_details: grpc.aio.ClientCallDetails,
        request: Any,
    ):
        return await continuation(self._with_metadata(client_call_details), request)

    async def intercept_stream_unary(
        self,
        continuation: Callable[[grpc.aio.ClientCallDetails, AsyncIterable[Any]], Awaitable[grpc.aio.StreamUnaryCall]],
        client_call_details: grpc.aio.ClientCallDetails,
        request_iterator: AsyncIterable[Any],
    ):
        return await continuation(self._with_metadata(client_call_details), request_iterator)

    async def intercept_stream_stream(
        self,
        continuation: Callable[[grpc.aio.ClientCallDetails, AsyncIterable[Any]], Awaitable[grpc.aio.StreamStreamCall]],
        client_call_details: grpc.aio.ClientCallDetails,
        request_iterator: AsyncIterable[Any],
    ):
        return await continuation(self._with_metadata(client_call_details), request_iterator)


class AuthInterceptor(MetadataInterceptor):
    """Bearer token authentication plus the headers the API expects.

    - ``authorization: Bearer <token>``
    - ``x-tracking-id``: fresh UUID per call, quoted in API support requests
    - ``x-app-name``: identifies the calling application
    """

    def __init__(self, token: str, app_name: str) -> None:
        self._authorization = f"Bearer {token}"
        self._app_name = app_name

    def extra_metadata(self) -> List[Tuple[str, str]]:
        return [
            (AUTHORIZATION_META_KEY, self._authorization),
            (TRACKING_ID_META_KEY, str(uuid.uuid4())),
            (APP_NAME_META_KEY, self._app_name),
        ]

    def __repr__(self) -> str:
        # never expose the token
        return f"AuthInterceptor(app_name={self._app_name!r})"
