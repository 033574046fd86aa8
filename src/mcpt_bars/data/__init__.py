"""Market data loading."""

from mcpt_bars.data.loader import (
    PriceHistoryError,
    InvalidDateError,
    InvalidPriceError,
    OHLCConsistencyError,
    load_price_history,
    parse_price_frame,
)

__all__ = [
    "PriceHistoryError",
    "InvalidDateError",
    "InvalidPriceError",
    "OHLCConsistencyError",
    "load_price_history",
    "parse_price_frame",
]
