"""
Utility functions for MCPT.

Includes p-value computation, console report formatting and plotting.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Any, List, Optional

import numpy as np

from mcpt_bars.core.types import ReplicationRecord

if TYPE_CHECKING:
    from mcpt_bars.testing.mcpt.insample_test import RunSummary


def compute_pvalue(
    real_metric: float,
    permuted_metrics: List[float],
) -> float:
    """
    Compute p-value from real metric and permuted distribution.

    p = (count(permuted >= real) + 1) / (n_permutations + 1)

    The "+1" counts the unpermuted baseline toward itself, so this matches
    the p-value of a run with n_permutations + 1 replications.

    Args:
        real_metric: The metric from the real (non-permuted) data
        permuted_metrics: List of metrics from permuted data runs

    Returns:
        P-value in range [1/(n+1), 1.0]
    """
    n = len(permuted_metrics)
    if n == 0:
        return 1.0

    count_extreme = int(np.sum(np.asarray(permuted_metrics) >= real_metric))
    return (count_extreme + 1) / (n + 1)


def format_replication_line(record: ReplicationRecord) -> str:
    """One report line per replication."""
    result = record.result
    return (
        f"{record.index:5d}: Ret = {result.cumulative_return:.3f}  "
        f"Rise, drop= {result.thresholds.rise_threshold:.4f} "
        f"{result.thresholds.drop_threshold:.4f}  "
        f"NL={result.long_count}  "
        f"TrndComp={record.trend_component:.4f}  "
        f"TrnBias={record.training_bias:.4f}"
    )


def format_summary(summary: "RunSummary") -> str:
    """
    Terminal summary of a run.

    Args:
        summary: Completed RunSummary

    Returns:
        Multi-line report string
    """
    lines = [
        f"{summary.n_bars} prices were read, {summary.n_replications} MCP replications "
        f"with lookback = {summary.lookback}",
        "",
        f"p-value for null hypothesis that system is worthless = {summary.p_value:.4f}",
        f"Total trend = {summary.total_trend:.4f}",
        f"Original nlong = {summary.original_long_count}",
        f"Original return = {summary.original_return:.4f}",
        f"Trend component = {summary.original_trend_component:.4f}",
        f"Training bias = {summary.mean_training_bias:.4f}",
        f"Skill = {summary.skill:.4f}",
        f"Unbiased return = {summary.unbiased_return:.4f}",
        "",
        f"Status: {summary.status}",
    ]

    if not summary.has_bias_estimate:
        lines.append("(single replication: no permuted trials to estimate training bias)")
    elif summary.is_significant:
        lines.append(
            f"INTERPRETATION: Original result is extreme relative to chance "
            f"(p < {summary.significance_level})"
        )
    elif summary.is_marginal:
        lines.append(
            f"INTERPRETATION: Moderate evidence (p < {summary.marginal_significance})"
        )
    else:
        lines.append("INTERPRETATION: No evidence the rule beats permuted data")

    return "\n".join(lines)


def generate_mcpt_report(
    summary: "RunSummary",
    records: Optional[List[ReplicationRecord]] = None,
    output_path: Optional[Path] = None,
) -> str:
    """
    Full text report: optional per-replication lines, then the summary.

    Args:
        summary: Completed RunSummary
        records: Replication records collected through on_replication
        output_path: Path to save report (optional)

    Returns:
        Report string
    """
    lines = ["=" * 80, "MCPT VALIDATION REPORT", "=" * 80]
    if records:
        lines.extend(format_replication_line(r) for r in records)
        lines.append("-" * 80)
    lines.append(format_summary(summary))
    report = "\n".join(lines)

    if output_path:
        with open(output_path, 'w') as f:
            f.write(report + "\n")

    return report


def plot_mcpt_distribution(
    summary: "RunSummary",
    save_path: Optional[Path] = None,
    title: Optional[str] = None,
) -> Any:
    """
    Histogram of permuted optimized returns with the original marked.

    Args:
        summary: Completed RunSummary with at least one permuted trial
        save_path: Path to save figure (optional)
        title: Custom title (optional)

    Returns:
        matplotlib Figure object
    """
    import matplotlib.pyplot as plt

    if not summary.permuted_returns:
        raise ValueError("No permuted trials to plot")

    fig, ax = plt.subplots(figsize=(10, 6))

    permuted_array = np.asarray(summary.permuted_returns)
    mean_permuted = float(np.mean(permuted_array))

    ax.hist(
        permuted_array,
        bins=min(50, max(10, len(permuted_array) // 5)),
        alpha=0.7,
        color='steelblue',
        edgecolor='white',
        label=f'Permuted returns (n={len(permuted_array)})'
    )
    ax.axvline(
        summary.original_return,
        color='red',
        linestyle='--',
        linewidth=2,
        label=f'Original return: {summary.original_return:.3f}'
    )
    ax.axvline(
        mean_permuted,
        color='gray',
        linestyle=':',
        linewidth=1.5,
        label=f'Permuted mean: {mean_permuted:.3f}'
    )

    if title is None:
        title = f"MCPT Distribution (lookback={summary.lookback})"
    ax.set_title(f"{title}\np-value: {summary.p_value:.4f}  skill: {summary.skill:.4f}", fontsize=12)
    ax.set_xlabel('Optimized cumulative log return', fontsize=10)
    ax.set_ylabel('Frequency', fontsize=10)
    ax.legend(loc='upper right', fontsize=9)

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig
