"""
Monte Carlo Permutation Testing (MCPT) for a bar-based mean-reversion rule.

Tests whether the rule's optimized in-sample performance reflects genuine
skill or the optimism of fitting thresholds to noise, and estimates the
skill that remains after removing optimization bias and trend.

Based on methodology from Timothy Masters' "Permutation and Randomization
Tests for Trading System Development".

Key components:
- RandomStream: Seeded multiply-with-carry generator owned by one run
- decompose() / shuffle() / rebuild(): Permute bars via relative moves
- search(): Exhaustive threshold grid search
- run_insample_mcpt(): Baseline plus permuted trials, p-value and skill
"""

from mcpt_bars.testing.mcpt.config import MCPTConfig, ConfigurationError
from mcpt_bars.testing.mcpt.random_stream import RandomStream
from mcpt_bars.testing.mcpt.permutation import (
    decompose,
    shuffle,
    rebuild,
    permute_window,
    validate_permutation,
)
from mcpt_bars.testing.mcpt.optimizer import search, evaluate, RISE_GRID, DROP_GRID
from mcpt_bars.testing.mcpt.insample_test import (
    run_insample_mcpt,
    run_from_config,
    check_window,
    RunSummary,
    InsufficientDataError,
    MIN_EVALUATION_BARS,
)

__all__ = [
    "MCPTConfig",
    "ConfigurationError",
    "RandomStream",
    "decompose",
    "shuffle",
    "rebuild",
    "permute_window",
    "validate_permutation",
    "search",
    "evaluate",
    "RISE_GRID",
    "DROP_GRID",
    "run_insample_mcpt",
    "run_from_config",
    "check_window",
    "RunSummary",
    "InsufficientDataError",
    "MIN_EVALUATION_BARS",
]
