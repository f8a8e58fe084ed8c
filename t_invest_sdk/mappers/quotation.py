from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Union

from t_invest_sdk.core.exceptions import ConversionError
from t_invest_sdk.protos import common_pb2


NANO = Decimal(1_000_000_000)
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1

DecimalLike = Union[Decimal, int, float, str]


def _to_decimal(value: DecimalLike) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        # str() keeps 0.1 as 0.1 instead of its binary expansion
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ConversionError(f"Can't convert {value!r} to decimal") from exc


def _units_nano_to_decimal(units: int, nano: int) -> Decimal:
    return Decimal(units) + Decimal(nano).scaleb(-9).normalize()


def _split(value: DecimalLike) -> tuple[int, int]:
    d = _to_decimal(value)
    if not d.is_finite():
        raise ConversionError(f"Can't convert decimal {d} to quotation")
    units = d.to_integral_value(rounding=ROUND_DOWN)
    nano = ((d - units) * NANO).to_integral_value(rounding=ROUND_DOWN)
    if not _INT64_MIN <= units <= _INT64_MAX:
        raise ConversionError(f"Can't convert decimal {d} to quotation")
    return int(units), int(nano)


def quotation_to_decimal(quotation: common_pb2.Quotation) -> Decimal:
    """``Quotation(units=114, nano=250000000)`` -> ``Decimal("114.25")``"""
    return _units_nano_to_decimal(quotation.units, quotation.nano)


def money_value_to_decimal(money: common_pb2.MoneyValue) -> Decimal:
    """Amount of a ``MoneyValue``; the currency is dropped."""
    return _units_nano_to_decimal(money.units, money.nano)


def decimal_to_quotation(value: DecimalLike) -> common_pb2.Quotation:
    """Split into integer units and nanos, both truncated toward zero.

    Digits beyond 10^-9 are dropped. Raises ``ConversionError`` for NaN,
    infinities and values outside the int64 range.
    """
    units, nano = _split(value)
    return common_pb2.Quotation(units=units, nano=nano)


def decimal_to_money_value(value: DecimalLike, currency: str) -> common_pb2.MoneyValue:
    units, nano = _split(value)
    return common_pb2.MoneyValue(currency=currency, units=units, nano=nano)
