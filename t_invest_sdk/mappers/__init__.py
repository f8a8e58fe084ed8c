"""Conversions between API wire types and Python values."""
from .quotation import (
    decimal_to_money_value,
    decimal_to_quotation,
    money_value_to_decimal,
    quotation_to_decimal,
)
from .timestamps import (
    date_to_timestamp,
    datetime_to_timestamp,
    timestamp_to_date,
    timestamp_to_datetime,
)

__all__ = [
    "decimal_to_money_value",
    "decimal_to_quotation",
    "money_value_to_decimal",
    "quotation_to_decimal",
    "date_to_timestamp",
    "datetime_to_timestamp",
    "timestamp_to_date",
    "timestamp_to_datetime",
]
