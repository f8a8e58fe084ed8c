"""In-process fake T-Invest API for client tests.

The fakes implement just enough of the generated servicers; every handler
records the metadata it received so tests can assert on headers.
"""
from typing import Dict, List

import grpc
import pytest

from t_invest_sdk.core.config import SdkSettings
from t_invest_sdk.protos import (
    common_pb2,
    marketdata_pb2,
    marketdata_pb2_grpc,
    sandbox_pb2,
    sandbox_pb2_grpc,
    users_pb2,
    users_pb2_grpc,
)


VALID_TOKEN = "t.test-token"


def _check_auth(metadata: Dict[str, str]) -> bool:
    return metadata.get("authorization") == f"Bearer {VALID_TOKEN}"


class FakeUsersService(users_pb2_grpc.UsersServiceServicer):
    def __init__(self, seen: List[Dict[str, str]]):
        self._seen = seen

    async def GetAccounts(self, request, context):  # type: ignore[override]
        md = dict(context.invocation_metadata())
        self._seen.append(md)
        if not _check_auth(md):
            await context.abort(grpc.StatusCode.UNAUTHENTICATED, "40003")
        await context.send_initial_metadata((("x-ratelimit-remaining", "199"),))
        context.set_trailing_metadata((("x-tracking-id", "server-tracking-accounts"),))
        return users_pb2.GetAccountsResponse(accounts=[
            users_pb2.Account(
                id="2000000001",
                name="Broker account",
                type=users_pb2.ACCOUNT_TYPE_TINKOFF,
                status=users_pb2.ACCOUNT_STATUS_OPEN,
                access_level=users_pb2.ACCOUNT_ACCESS_LEVEL_FULL_ACCESS,
            ),
        ])

    async def GetInfo(self, request, context):  # type: ignore[override]
        await context.abort(
            grpc.StatusCode.NOT_FOUND,
            "50002",
            trailing_metadata=(
                ("message", "instrument not found"),
                ("x-tracking-id", "server-tracking-1"),
            ),
        )


class FakeSandboxService(sandbox_pb2_grpc.SandboxServiceServicer):
    def __init__(self, seen: List[Dict[str, str]]):
        self._seen = seen
        self._balances: Dict[str, common_pb2.MoneyValue] = {}

    async def OpenSandboxAccount(self, request, context):  # type: ignore[override]
        self._seen.append(dict(context.invocation_metadata()))
        account_id = f"sandbox-{len(self._balances) + 1}"
        self._balances[account_id] = common_pb2.MoneyValue(currency="rub")
        return sandbox_pb2.OpenSandboxAccountResponse(account_id=account_id)

    async def SandboxPayIn(self, request, context):  # type: ignore[override]
        balance = self._balances.get(request.account_id)
        if balance is None:
            await context.abort(grpc.StatusCode.NOT_FOUND, "account not found")
        total_nano = balance.units * 10**9 + balance.nano + request.amount.units * 10**9 + request.amount.nano
        units, nano = divmod(total_nano, 10**9)
        balance = common_pb2.MoneyValue(currency=request.amount.currency, units=units, nano=nano)
        self._balances[request.account_id] = balance
        return sandbox_pb2.SandboxPayInResponse(balance=balance)


class FakeMarketDataService(marketdata_pb2_grpc.MarketDataServiceServicer):
    def __init__(self):
        self.last_request = None

    async def GetCandles(self, request, context):  # type: ignore[override]
        self.last_request = request
        return marketdata_pb2.GetCandlesResponse(candles=[
            marketdata_pb2.HistoricCandle(
                open=common_pb2.Quotation(units=114, nano=250000000),
                high=common_pb2.Quotation(units=115, nano=0),
                low=common_pb2.Quotation(units=113, nano=990000000),
                close=common_pb2.Quotation(units=114, nano=500000000),
                volume=1200,
                time=getattr(request, "from"),
                is_complete=True,
            ),
        ])


class FakeMarketDataStreamService(marketdata_pb2_grpc.MarketDataStreamServiceServicer):
    def __init__(self, seen: List[Dict[str, str]]):
        self._seen = seen

    async def MarketDataStream(self, request_iterator, context):  # type: ignore[override]
        self._seen.append(dict(context.invocation_metadata()))
        async for request in request_iterator:
            if request.HasField("subscribe_candles_request"):
                sub = request.subscribe_candles_request
                yield marketdata_pb2.MarketDataResponse(
                    subscribe_candles_response=marketdata_pb2.SubscribeCandlesResponse(
                        tracking_id="stream-tracking",
                        candles_subscriptions=[
                            marketdata_pb2.CandleSubscription(
                                instrument_uid=i.instrument_id,
                                interval=i.interval,
                                subscription_status=marketdata_pb2.SUBSCRIPTION_STATUS_SUCCESS,
                            )
                            for i in sub.instruments
                        ],
                    )
                )
                for i in sub.instruments:
                    yield marketdata_pb2.MarketDataResponse(
                        candle=marketdata_pb2.Candle(
                            instrument_uid=i.instrument_id,
                            interval=i.interval,
                            close=common_pb2.Quotation(units=250, nano=10000000),
                            volume=7,
                        )
                    )
            elif request.HasField("ping"):
                yield marketdata_pb2.MarketDataResponse(ping=common_pb2.Ping(stream_id="s-1"))

    async def MarketDataServerSideStream(self, request, context):  # type: ignore[override]
        self._seen.append(dict(context.invocation_metadata()))
        for i in request.subscribe_last_price_request.instruments:
            yield marketdata_pb2.MarketDataResponse(
                last_price=marketdata_pb2.LastPrice(
                    instrument_uid=i.instrument_id,
                    price=common_pb2.Quotation(units=99, nano=900000000),
                )
            )


class FakeApi:
    def __init__(self, target: str, server: grpc.aio.Server, seen: List[Dict[str, str]], market_data: FakeMarketDataService):
        self.target = target
        self.server = server
        self.seen = seen
        self.market_data = market_data

    def settings(self, **overrides) -> SdkSettings:
        values = dict(
            target=self.target,
            app_name="test-app",
            tls={"enabled": False},
            connect_timeout=5.0,
        )
        values.update(overrides)
        return SdkSettings(**values)


@pytest.fixture
async def fake_api() -> FakeApi:
    """Start the fake API on an ephemeral port (port 0), insecure."""
    seen: List[Dict[str, str]] = []
    market_data = FakeMarketDataService()

    server = grpc.aio.server()
    users_pb2_grpc.add_UsersServiceServicer_to_server(FakeUsersService(seen), server)
    sandbox_pb2_grpc.add_SandboxServiceServicer_to_server(FakeSandboxService(seen), server)
    marketdata_pb2_grpc.add_MarketDataServiceServicer_to_server(market_data, server)
    marketdata_pb2_grpc.add_MarketDataStreamServiceServicer_to_server(FakeMarketDataStreamService(seen), server)
    port = server.add_insecure_port("127.0.0.1:0")
    await server.start()

    try:
        yield FakeApi(f"127.0.0.1:{port}", server, seen, market_data)
    finally:
        await server.stop(grace=None)
