from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence, Tuple

import grpc

from t_invest_sdk.core.config import Compression, Environment, SdkSettings
from t_invest_sdk.core.exceptions import TInvestConfigError, TInvestConnectionError
from t_invest_sdk.core.logging_config import get_logger
from t_invest_sdk.interceptors import AuthInterceptor, LoggingInterceptor


logger = get_logger(__name__)

_COMPRESSION = {
    Compression.GZIP: grpc.Compression.Gzip,
    Compression.NONE: grpc.Compression.NoCompression,
}


def channel_options(settings: SdkSettings) -> List[Tuple[str, object]]:
    return [
        ("grpc.max_receive_message_length", settings.max_receive_message_length),
        ("grpc.keepalive_time_ms", settings.keepalive_time_ms),
        ("grpc.primary_user_agent", settings.app_name),
    ]


def channel_credentials(settings: SdkSettings) -> grpc.ChannelCredentials:
    root_certificates: Optional[bytes] = None
    if settings.tls.ca:
        try:
            with open(settings.tls.ca, "rb") as f:
                root_certificates = f.read()
        except OSError as exc:
            raise TInvestConfigError(
                "Cannot read TLS root certificates",
                details={"ca": settings.tls.ca, "error": str(exc)},
            ) from exc
    return grpc.ssl_channel_credentials(root_certificates=root_certificates)


def create_channel(token: Optional[str], environment: Environment, settings: SdkSettings) -> grpc.aio.Channel:
    """Build a channel that authenticates every call with ``token``.

    The channel connects lazily; see ``wait_until_ready``.
    """
    if not token or not token.strip():
        raise TInvestConfigError("API token is not set. Pass it explicitly or set TINVEST_TOKEN")

    interceptors: Sequence[grpc.aio.ClientInterceptor] = (
        AuthInterceptor(token.strip(), settings.app_name),  # must precede logging
        LoggingInterceptor(),
    )
    target = settings.resolve_target(environment)
    options = channel_options(settings)
    compression = _COMPRESSION[settings.compression]

    if settings.tls.enabled:
        channel = grpc.aio.secure_channel(
            target,
            channel_credentials(settings),
            options=options,
            compression=compression,
            interceptors=interceptors,
        )
    else:
        logger.warning("grpc_insecure_channel", target=target)
        channel = grpc.aio.insecure_channel(
            target,
            options=options,
            compression=compression,
            interceptors=interceptors,
        )

    logger.info(
        "grpc_channel_created",
        target=target,
        environment=environment.value,
        tls=settings.tls.enabled,
        compression=settings.compression.value,
    )
    return channel


async def wait_until_ready(channel: grpc.aio.Channel, target: str, timeout: float) -> None:
    """Wait for the channel to connect.

    The channel is closed if it does not get ready: ``TInvestConnectionError``
    on timeout, the original ``CancelledError`` on cancellation.
    """
    try:
        await asyncio.wait_for(channel.channel_ready(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        logger.error("grpc_connect_timeout", target=target, timeout=timeout)
        await channel.close()
        raise TInvestConnectionError(target, timeout) from exc
    except asyncio.CancelledError:
        logger.warning("grpc_connect_cancelled", target=target)
        await channel.close()
        raise
    logger.info("grpc_channel_ready", target=target)
