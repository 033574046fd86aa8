"""
Core data types for the bar permutation test.

Result records use Pydantic and are immutable. Price data lives in numpy
arrays because the permutation engine overwrites it in place every
replication.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class Bar(BaseModel):
    """
    Single OHLC bar in natural-log price space.

    Snapshot of one row of a PriceSeries; the series itself stores
    columns, not Bar objects.
    """

    model_config = ConfigDict(frozen=True)

    date: str = Field(..., description="8-digit date token (ordering key)")
    log_open: float
    log_high: float
    log_low: float
    log_close: float


@dataclass
class PriceSeries:
    """
    Chronological bar history as four parallel log-price arrays.

    The series is owned by the caller for the whole run and is mutated in
    place by permutation. Windows returned by window() are numpy views, so
    rebuilding a window rewrites the parent series.

    Attributes:
        dates: Date tokens, one per bar
        open: Log open prices
        high: Log high prices
        low: Log low prices
        close: Log close prices
    """
    dates: List[str]
    open: np.ndarray
    high: np.ndarray
    low: np.ndarray
    close: np.ndarray

    def __post_init__(self) -> None:
        n = len(self.dates)
        for name in ("open", "high", "low", "close"):
            arr = getattr(self, name)
            if arr.ndim != 1 or len(arr) != n:
                raise ValueError(
                    f"Column '{name}' has length {len(arr)}, expected {n}"
                )

    def __len__(self) -> int:
        return len(self.dates)

    @classmethod
    def from_prices(
        cls,
        dates: List[str],
        open: List[float],
        high: List[float],
        low: List[float],
        close: List[float],
    ) -> "PriceSeries":
        """Build a series from raw (positive, non-log) prices."""
        return cls(
            dates=list(dates),
            open=np.log(np.asarray(open, dtype=np.float64)),
            high=np.log(np.asarray(high, dtype=np.float64)),
            low=np.log(np.asarray(low, dtype=np.float64)),
            close=np.log(np.asarray(close, dtype=np.float64)),
        )

    def window(self, start: int, stop: Optional[int] = None) -> "PriceSeries":
        """
        Return bars [start, stop) as a view sharing memory with this series.

        Args:
            start: First bar of the window (its basis bar)
            stop: One past the last bar (default: end of series)

        Returns:
            PriceSeries whose arrays alias this series' arrays
        """
        if stop is None:
            stop = len(self)
        return PriceSeries(
            dates=self.dates[start:stop],
            open=self.open[start:stop],
            high=self.high[start:stop],
            low=self.low[start:stop],
            close=self.close[start:stop],
        )

    def copy(self) -> "PriceSeries":
        """Independent deep copy."""
        return PriceSeries(
            dates=list(self.dates),
            open=self.open.copy(),
            high=self.high.copy(),
            low=self.low.copy(),
            close=self.close.copy(),
        )

    def bar(self, index: int) -> Bar:
        """Snapshot of a single bar."""
        return Bar(
            date=self.dates[index],
            log_open=float(self.open[index]),
            log_high=float(self.high[index]),
            log_low=float(self.low[index]),
            log_close=float(self.close[index]),
        )


@dataclass
class RelativeMoveSet:
    """
    Open-anchored relative moves of a window, the unit of permutation.

    All four arrays have length window - 1. Entry i describes bar i + 1:
    open_gap is its close-to-open jump from bar i, the rel_* arrays are its
    high/low/close minus its own open.
    """
    open_gap: np.ndarray
    rel_high: np.ndarray
    rel_low: np.ndarray
    rel_close: np.ndarray

    def __len__(self) -> int:
        return len(self.open_gap)

    def copy(self) -> "RelativeMoveSet":
        return RelativeMoveSet(
            open_gap=self.open_gap.copy(),
            rel_high=self.rel_high.copy(),
            rel_low=self.rel_low.copy(),
            rel_close=self.rel_close.copy(),
        )


class ThresholdPair(BaseModel):
    """Parameters of the mean-reversion rule."""

    model_config = ConfigDict(frozen=True)

    rise_threshold: float = Field(..., description="Minimum long-term rise", gt=0)
    drop_threshold: float = Field(..., description="Minimum short-term drop", gt=0)


class ReplicationResult(BaseModel):
    """Best in-sample outcome of one grid search."""

    model_config = ConfigDict(frozen=True)

    cumulative_return: float = Field(..., description="Sum of log returns of the best pair")
    thresholds: ThresholdPair
    long_count: int = Field(..., description="Number of long signals fired", ge=0)


class ReplicationRecord(BaseModel):
    """
    Report row for one MCPT replication.

    Index 0 is the unpermuted baseline; later indices are permuted trials.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0)
    result: ReplicationResult
    trend_component: float
    training_bias: float

    @property
    def is_baseline(self) -> bool:
        return self.index == 0
