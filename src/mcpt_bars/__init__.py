"""
Bar Permutation Test

Monte Carlo permutation testing of a mean-reversion trading rule on OHLC
bars: significance of its optimized performance and an estimate of its
skill net of optimization bias and trend.
"""

__version__ = "0.1.0"

from mcpt_bars.core.types import (
    PriceSeries,
    RelativeMoveSet,
    ThresholdPair,
    ReplicationResult,
)
from mcpt_bars.testing.mcpt import RandomStream, run_insample_mcpt, RunSummary

__all__ = [
    "PriceSeries",
    "RelativeMoveSet",
    "ThresholdPair",
    "ReplicationResult",
    "RandomStream",
    "run_insample_mcpt",
    "RunSummary",
]
