"""
Flat-file price history loader.

Reads one bar per line in the form

    YYYYMMDD  open  high  low  close

with fields separated by any run of spaces, tabs or commas. Extra trailing
fields (volume, open interest) are ignored and blank lines are skipped.
Prices are stored as natural logarithms.

Every problem is fatal: the first offending line in file order is reported
with its 1-based line number.
"""

import logging
import re
from pathlib import Path
from typing import List, Union

import numpy as np
import pandas as pd

from mcpt_bars.core.types import PriceSeries

logger = logging.getLogger(__name__)

PRICE_COLUMNS = ["open", "high", "low", "close"]

_DELIMITERS = re.compile(r"[ \t,]+")
_DATE_PATTERN = r"[0-9]{8}"


class PriceHistoryError(Exception):
    """Base exception for price history loading errors."""

    def __init__(self, message: str, line: int = 0):
        super().__init__(message)
        self.line = line


class InvalidDateError(PriceHistoryError):
    """Raised when a line does not start with an 8-digit date."""

    pass


class InvalidPriceError(PriceHistoryError):
    """Raised when a price is missing, unparseable, infinite or not positive."""

    pass


class OHLCConsistencyError(PriceHistoryError):
    """Raised when low exceeds open/close or high is below open/close."""

    pass


def _read_records(path: Path) -> pd.DataFrame:
    """Split the file into raw string fields, one row per non-blank line."""
    rows: List[list] = []
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                text = line.strip(" \t,\r\n")
                if not text:
                    continue
                fields = _DELIMITERS.split(text)[:5]
                fields += [None] * (5 - len(fields))
                rows.append([line_no] + fields)
    except (OSError, UnicodeDecodeError) as e:
        raise PriceHistoryError(f"Cannot open market history file {path}: {e}") from e

    return pd.DataFrame(rows, columns=["line", "date"] + PRICE_COLUMNS)


def parse_price_frame(records: pd.DataFrame, source: str = "<memory>") -> pd.DataFrame:
    """
    Validate raw string records and convert prices to logs.

    Args:
        records: DataFrame with columns line, date, open, high, low, close
            (all price columns still as strings)
        source: Name used in error messages

    Returns:
        DataFrame with the same columns, prices as float64 log prices

    Raises:
        InvalidDateError: Date token is not exactly 8 digits
        InvalidPriceError: A price is missing, unparseable, infinite or <= 0
        OHLCConsistencyError: Bar violates low <= open, close <= high
    """
    frame = records.copy()

    bad_date = ~frame["date"].fillna("").astype(str).str.fullmatch(_DATE_PATTERN)

    prices = frame[PRICE_COLUMNS].apply(pd.to_numeric, errors="coerce")
    bad_price = ~np.isfinite(prices).all(axis=1) | (prices <= 0).any(axis=1)

    log_prices = np.log(prices.where(prices > 0))

    bad_ohlc = ~bad_price & (
        (log_prices["low"] > log_prices["open"])
        | (log_prices["low"] > log_prices["close"])
        | (log_prices["high"] < log_prices["open"])
        | (log_prices["high"] < log_prices["close"])
    )

    failed = bad_date | bad_price | bad_ohlc
    if failed.any():
        pos = int(np.argmax(failed.to_numpy()))
        line = int(frame["line"].iloc[pos])
        if bad_date.iloc[pos]:
            raise InvalidDateError(f"Invalid date reading line {line} of file {source}", line)
        if bad_price.iloc[pos]:
            raise InvalidPriceError(f"Invalid price reading line {line} of file {source}", line)
        raise OHLCConsistencyError(
            f"Invalid open/high/low/close reading line {line} of file {source}", line
        )

    frame[PRICE_COLUMNS] = log_prices.astype(np.float64)
    frame["date"] = frame["date"].astype(str)
    return frame


def load_price_history(path: Union[str, Path]) -> PriceSeries:
    """
    Load a market history file into a log-price PriceSeries.

    Args:
        path: Path to the market file

    Returns:
        PriceSeries with one entry per valid line, in file order

    Raises:
        PriceHistoryError: File cannot be read or holds no bars
        InvalidDateError, InvalidPriceError, OHLCConsistencyError: see
            parse_price_frame
    """
    path = Path(path)
    logger.info(f"Reading market file {path}")

    records = _read_records(path)
    if records.empty:
        raise PriceHistoryError(f"No price records found in {path}")

    frame = parse_price_frame(records, source=str(path))

    series = PriceSeries(
        dates=frame["date"].tolist(),
        open=frame["open"].to_numpy(dtype=np.float64, copy=True),
        high=frame["high"].to_numpy(dtype=np.float64, copy=True),
        low=frame["low"].to_numpy(dtype=np.float64, copy=True),
        close=frame["close"].to_numpy(dtype=np.float64, copy=True),
    )

    logger.info(f"Market price history read: {len(series)} bars")
    return series
