"""Core types and configuration for the bar permutation test."""

from mcpt_bars.core.types import (
    Bar,
    PriceSeries,
    RelativeMoveSet,
    ThresholdPair,
    ReplicationResult,
    ReplicationRecord,
)
from mcpt_bars.core.config import Config, DataConfig, LoggingConfig, load_config

__all__ = [
    "Bar",
    "PriceSeries",
    "RelativeMoveSet",
    "ThresholdPair",
    "ReplicationResult",
    "ReplicationRecord",
    "Config",
    "DataConfig",
    "LoggingConfig",
    "load_config",
]
