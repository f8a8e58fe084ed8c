import pytest

from t_invest_sdk.protos import (
    PROTO_PACKAGE,
    common_pb2,
    full_method_name,
    instruments_pb2,
    marketdata_pb2,
    operations_pb2,
    orders_pb2,
    sandbox_pb2,
    signals_pb2,
    stoporders_pb2,
    users_pb2,
)


@pytest.mark.parametrize(
    "module,service,methods",
    [
        (users_pb2, "UsersService", {"GetAccounts", "GetMarginAttributes", "GetUserTariff", "GetInfo"}),
        (instruments_pb2, "InstrumentsService", {"Shares", "ShareBy", "Bonds", "GetInstrumentBy", "FindInstrument"}),
        (marketdata_pb2, "MarketDataService", {"GetCandles", "GetLastPrices", "GetOrderBook", "GetTradingStatus"}),
        (marketdata_pb2, "MarketDataStreamService", {"MarketDataStream", "MarketDataServerSideStream"}),
        (operations_pb2, "OperationsService", {"GetOperations", "GetPortfolio", "GetPositions", "GetWithdrawLimits"}),
        (operations_pb2, "OperationsStreamService", {"PortfolioStream", "PositionsStream"}),
        (orders_pb2, "OrdersService", {"PostOrder", "CancelOrder", "GetOrderState", "GetOrders", "ReplaceOrder"}),
        (orders_pb2, "OrdersStreamService", {"TradesStream", "OrderStateStream"}),
        (sandbox_pb2, "SandboxService", {"OpenSandboxAccount", "CloseSandboxAccount", "SandboxPayIn", "PostSandboxOrder"}),
        (signals_pb2, "SignalService", {"GetStrategies", "GetSignals"}),
        (stoporders_pb2, "StopOrdersService", {"PostStopOrder", "GetStopOrders", "CancelStopOrder"}),
    ],
)
def test_service_contracts(module, service, methods):
    descriptor = module.DESCRIPTOR.services_by_name[service]
    assert descriptor.full_name == f"{PROTO_PACKAGE}.{service}"
    assert methods <= set(descriptor.methods_by_name)


def test_stream_kinds():
    stream = marketdata_pb2.DESCRIPTOR.services_by_name["MarketDataStreamService"]
    bidi = stream.methods_by_name["MarketDataStream"]
    server_side = stream.methods_by_name["MarketDataServerSideStream"]
    assert bidi.client_streaming and bidi.server_streaming
    assert not server_side.client_streaming and server_side.server_streaming


def test_full_method_name():
    assert PROTO_PACKAGE == "tinkoff.public.invest.api.contract.v1"
    assert full_method_name("UsersService", "GetAccounts") == (
        "/tinkoff.public.invest.api.contract.v1.UsersService/GetAccounts"
    )


def test_shared_types_come_from_one_module():
    q = common_pb2.Quotation(units=1, nano=5)
    order = orders_pb2.PostOrderRequest(price=q, quantity=3)
    assert order.price.units == 1
    assert order.price.DESCRIPTOR.full_name == f"{PROTO_PACKAGE}.Quotation"
