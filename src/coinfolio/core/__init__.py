"""Core utilities and shared functionality."""

from coinfolio.core.timezone import (
    now_utc,
    to_utc,
    parse_datetime_utc,
    UTC,
)
from coinfolio.core.exceptions import (
    AppError,
    DataSourceUnavailable,
    UnknownAsset,
    InvalidPurchase,
    PersistenceFailure,
)
from coinfolio.core.numbers import (
    to_decimal,
    round2,
    format_price,
    format_price_change,
    format_large_number,
)

__all__ = [
    "now_utc",
    "to_utc",
    "parse_datetime_utc",
    "UTC",
    "AppError",
    "DataSourceUnavailable",
    "UnknownAsset",
    "InvalidPurchase",
    "PersistenceFailure",
    "to_decimal",
    "round2",
    "format_price",
    "format_price_change",
    "format_large_number",
]
