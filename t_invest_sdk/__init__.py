"""T-Invest API SDK: gRPC client for the T-Bank (Tinkoff) Invest API."""
from t_invest_sdk.client import TInvestSdk
from t_invest_sdk.core.config import Compression, Environment, SdkSettings, TlsSettings
from t_invest_sdk.core.exceptions import (
    ConversionError,
    TInvestConfigError,
    TInvestConnectionError,
    TInvestError,
    error_message_of,
    tracking_id_of,
)
from t_invest_sdk.mappers import (
    date_to_timestamp,
    datetime_to_timestamp,
    decimal_to_money_value,
    decimal_to_quotation,
    money_value_to_decimal,
    quotation_to_decimal,
    timestamp_to_date,
    timestamp_to_datetime,
)

__version__ = "0.6.1"

__all__ = [
    "TInvestSdk",
    "Environment",
    "Compression",
    "SdkSettings",
    "TlsSettings",
    "TInvestError",
    "TInvestConfigError",
    "TInvestConnectionError",
    "ConversionError",
    "tracking_id_of",
    "error_message_of",
    "quotation_to_decimal",
    "money_value_to_decimal",
    "decimal_to_quotation",
    "decimal_to_money_value",
    "date_to_timestamp",
    "timestamp_to_date",
    "datetime_to_timestamp",
    "timestamp_to_datetime",
]
