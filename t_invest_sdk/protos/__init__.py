"""Wire contracts of the T-Invest API and their Python stubs.

The ``.proto`` files next to this module describe package
``tinkoff.public.invest.api.contract.v1``. They are compiled on first import
with ``grpc.protos_and_services`` (grpcio-tools), which yields the usual
``<name>_pb2`` message modules and ``<name>_pb2_grpc`` stub modules.
"""
from __future__ import annotations

import os
import sys

import grpc


# protoc resolves proto imports against sys.path entries
_SOURCE_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
if _SOURCE_ROOT not in sys.path:
    sys.path.append(_SOURCE_ROOT)

PROTO_PACKAGE = "tinkoff.public.invest.api.contract.v1"


def _proto_path(name: str) -> str:
    return f"t_invest_sdk/protos/{name}.proto"


common_pb2 = grpc.protos(_proto_path("common"))
instruments_pb2, instruments_pb2_grpc = grpc.protos_and_services(_proto_path("instruments"))
marketdata_pb2, marketdata_pb2_grpc = grpc.protos_and_services(_proto_path("marketdata"))
operations_pb2, operations_pb2_grpc = grpc.protos_and_services(_proto_path("operations"))
orders_pb2, orders_pb2_grpc = grpc.protos_and_services(_proto_path("orders"))
sandbox_pb2, sandbox_pb2_grpc = grpc.protos_and_services(_proto_path("sandbox"))
signals_pb2, signals_pb2_grpc = grpc.protos_and_services(_proto_path("signals"))
stoporders_pb2, stoporders_pb2_grpc = grpc.protos_and_services(_proto_path("stoporders"))
users_pb2, users_pb2_grpc = grpc.protos_and_services(_proto_path("users"))


def full_method_name(service: str, method: str) -> str:
    """``/tinkoff.public.invest.api.contract.v1.UsersService/GetAccounts``"""
    return f"/{PROTO_PACKAGE}.{service}/{method}"


__all__ = [
    "PROTO_PACKAGE",
    "full_method_name",
    "common_pb2",
    "instruments_pb2",
    "instruments_pb2_grpc",
    "marketdata_pb2",
    "marketdata_pb2_grpc",
    "operations_pb2",
    "operations_pb2_grpc",
    "orders_pb2",
    "orders_pb2_grpc",
    "sandbox_pb2",
    "sandbox_pb2_grpc",
    "signals_pb2",
    "signals_pb2_grpc",
    "stoporders_pb2",
    "stoporders_pb2_grpc",
    "users_pb2",
    "users_pb2_grpc",
]
