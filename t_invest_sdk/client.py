"""
T-Invest API client.

``TInvestSdk`` owns one authenticated channel and hands out generated service
stubs bound to it. Stubs are cheap; every accessor builds a fresh one.
"""
from __future__ import annotations

from typing import Optional

import grpc

from t_invest_sdk.channel import create_channel, wait_until_ready
from t_invest_sdk.core.config import Environment, SdkSettings, settings as default_settings
from t_invest_sdk.core.logging_config import get_logger
from t_invest_sdk.protos import (
    instruments_pb2_grpc,
    marketdata_pb2_grpc,
    operations_pb2_grpc,
    orders_pb2_grpc,
    sandbox_pb2_grpc,
    signals_pb2_grpc,
    stoporders_pb2_grpc,
    users_pb2_grpc,
)


logger = get_logger(__name__)


class TInvestSdk:
    """Entry point to the T-Invest API.

    Usage::

        async with await TInvestSdk.sandbox("t.xxx") as sdk:
            accounts = await sdk.sandbox_service().GetSandboxAccounts(users_pb2.GetAccountsRequest())

    Status errors from calls are raised as ``grpc.aio.AioRpcError``.
    """

    def __init__(self, channel: grpc.aio.Channel, environment: Environment, target: str) -> None:
        self._channel = channel
        self._environment = environment
        self._target = target

    @classmethod
    async def connect(
        cls,
        token: Optional[str] = None,
        environment: Optional[Environment] = None,
        *,
        settings: Optional[SdkSettings] = None,
    ) -> "TInvestSdk":
        """Create a channel and wait until it is connected.

        ``token`` and ``environment`` fall back to the settings
        (``TINVEST_TOKEN``, ``TINVEST_ENVIRONMENT``).

        Raises:
            TInvestConfigError: no token or unreadable TLS roots
            TInvestConnectionError: channel not ready within ``connect_timeout``
        """
        cfg = settings or default_settings
        env = environment or cfg.environment
        target = cfg.resolve_target(env)
        channel = create_channel(token if token is not None else cfg.token, env, cfg)
        await wait_until_ready(channel, target, cfg.connect_timeout)
        return cls(channel, env, target)

    @classmethod
    async def production(cls, token: Optional[str] = None, **kwargs) -> "TInvestSdk":
        """Connect to the live environment with real accounts."""
        return await cls.connect(token, Environment.PRODUCTION, **kwargs)

    @classmethod
    async def sandbox(cls, token: Optional[str] = None, **kwargs) -> "TInvestSdk":
        """Connect to the sandbox environment."""
        return await cls.connect(token, Environment.SANDBOX, **kwargs)

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def target(self) -> str:
        return self._target

    @property
    def channel(self) -> grpc.aio.Channel:
        return self._channel

    def instruments(self) -> instruments_pb2_grpc.InstrumentsServiceStub:
        """Shares, bonds, ETFs, currencies, futures, schedules, favorites."""
        return instruments_pb2_grpc.InstrumentsServiceStub(self._channel)

    def market_data(self) -> marketdata_pb2_grpc.MarketDataServiceStub:
        """Candles, order books, last prices and trading statuses."""
        return marketdata_pb2_grpc.MarketDataServiceStub(self._channel)

    def market_data_stream(self) -> marketdata_pb2_grpc.MarketDataStreamServiceStub:
        """Real-time candles, order books, trades and last prices."""
        return marketdata_pb2_grpc.MarketDataStreamServiceStub(self._channel)

    def operations(self) -> operations_pb2_grpc.OperationsServiceStub:
        """Operation history, portfolio, positions and withdraw limits."""
        return operations_pb2_grpc.OperationsServiceStub(self._channel)

    def operations_stream(self) -> operations_pb2_grpc.OperationsStreamServiceStub:
        return operations_pb2_grpc.OperationsStreamServiceStub(self._channel)

    def orders(self) -> orders_pb2_grpc.OrdersServiceStub:
        """Place, replace, cancel and inspect orders."""
        return orders_pb2_grpc.OrdersServiceStub(self._channel)

    def orders_stream(self) -> orders_pb2_grpc.OrdersStreamServiceStub:
        return orders_pb2_grpc.OrdersStreamServiceStub(self._channel)

    def sandbox_service(self) -> sandbox_pb2_grpc.SandboxServiceStub:
        """Sandbox accounts, pay-ins and simulated orders."""
        return sandbox_pb2_grpc.SandboxServiceStub(self._channel)

    def signals(self) -> signals_pb2_grpc.SignalServiceStub:
        return signals_pb2_grpc.SignalServiceStub(self._channel)

    def stop_orders(self) -> stoporders_pb2_grpc.StopOrdersServiceStub:
        return stoporders_pb2_grpc.StopOrdersServiceStub(self._channel)

    def users(self) -> users_pb2_grpc.UsersServiceStub:
        """Accounts, margin attributes, tariff limits."""
        return users_pb2_grpc.UsersServiceStub(self._channel)

    async def close(self, grace: Optional[float] = None) -> None:
        await self._channel.close(grace)
        logger.info("grpc_channel_closed", target=self._target)

    async def __aenter__(self) -> "TInvestSdk":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"TInvestSdk(environment={self._environment.value!r}, target={self._target!r})"
