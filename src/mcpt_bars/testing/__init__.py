"""
Statistical validation of trading rules.

Main components:
- mcpt: Monte Carlo Permutation Testing with bias-corrected skill estimate
"""

from mcpt_bars.testing.mcpt import (
    RandomStream,
    run_insample_mcpt,
    MCPTConfig,
    RunSummary,
)

__all__ = [
    "RandomStream",
    "run_insample_mcpt",
    "MCPTConfig",
    "RunSummary",
]
