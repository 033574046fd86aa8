"""
Command line entry point.

Usage:
    mcpt-bars LOOKBACK NREPS FILENAME [--seed N] [--config YAML] [--plot PNG]

Example:
    mcpt-bars 300 1000 data/OEX.TXT --seed 42 --plot reports/oex_mcpt.png

Exit status is 0 on completion and 1 on any fatal error (unreadable or
malformed market file, too few bars for the lookback, bad configuration).
Usage errors exit with argparse's status 2.
"""

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from mcpt_bars.core.config import DEFAULT_CONFIG_PATH, LoggingConfig, load_config
from mcpt_bars.data.loader import PriceHistoryError, load_price_history
from mcpt_bars.testing.mcpt.config import ConfigurationError, MCPTConfig
from mcpt_bars.testing.mcpt.insample_test import run_from_config
from mcpt_bars.testing.mcpt.optimizer import evaluate
from mcpt_bars.testing.mcpt.permutation import validate_permutation
from mcpt_bars.testing.mcpt.utils import (
    format_replication_line,
    format_summary,
    generate_mcpt_report,
    plot_mcpt_distribution,
)
from mcpt_bars.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{value}'")
    if parsed < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {parsed}")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="mcpt-bars",
        description=(
            "Monte Carlo permutation test of a mean-reversion rule on bar data: "
            "p-value for outstanding performance and bias-corrected skill"
        ),
    )
    parser.add_argument("lookback", type=_positive_int, help="Long-term rise lookback")
    parser.add_argument(
        "nreps",
        type=_positive_int,
        help="Number of MCPT replications (hundreds or thousands)",
    )
    parser.add_argument(
        "filename",
        type=Path,
        help="Market file (YYYYMMDD Open High Low Close)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed (overrides config)")
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (overrides config)",
    )
    parser.add_argument("--plot", type=Path, default=None, help="Save distribution plot to PNG")
    parser.add_argument("--report", type=Path, default=None, help="Save text report to file")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Verify permutation invariants and re-score the baseline after the run",
    )
    parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    parser.add_argument(
        "--quiet", action="store_true", help="Suppress per-replication lines"
    )
    return parser


def _load_configs(args: argparse.Namespace) -> tuple:
    """
    Merge YAML configuration with command line overrides.

    Without --config, config/default.yaml is read when it exists.
    """
    config_path = args.config if args.config is not None else DEFAULT_CONFIG_PATH
    if args.config is not None and not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    app_config = load_config(config_path)
    if config_path.exists():
        mcpt_config = MCPTConfig.from_yaml(config_path)
    else:
        mcpt_config = MCPTConfig()

    mcpt_config.lookback = args.lookback
    mcpt_config.n_replications = args.nreps
    if args.seed is not None:
        mcpt_config.random_seed = args.seed
    if args.progress:
        mcpt_config.show_progress = True

    log_settings = app_config.logging.model_dump()
    if args.log_level is not None:
        log_settings["level"] = args.log_level

    return app_config, mcpt_config, LoggingConfig(**log_settings)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the permutation test from the command line.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)
    setup_logging(LoggingConfig(level=args.log_level or "INFO"))

    try:
        app_config, mcpt_config, logging_config = _load_configs(args)
        setup_logging(logging_config)

        series = load_price_history(args.filename)
        original = series.copy() if args.check else None

        records = []

        def on_replication(record):
            records.append(record)
            if not args.quiet:
                print(format_replication_line(record))

        summary = run_from_config(
            series,
            mcpt_config,
            on_replication=on_replication,
            min_evaluation_bars=app_config.data.min_evaluation_bars,
        )
    except (PriceHistoryError, ConfigurationError, OSError, ValueError, yaml.YAMLError) as e:
        logger.error(str(e))
        return 1

    print()
    print(format_summary(summary))

    if original is not None:
        checks = validate_permutation(
            original.window(mcpt_config.lookback),
            series.window(mcpt_config.lookback),
        )
        # Re-score the baseline's thresholds on the unpermuted bars
        rescored = evaluate(original, mcpt_config.lookback, summary.original_thresholds)
        checks['baseline_reproduced'] = (
            rescored.long_count == summary.original_long_count
            and math.isclose(rescored.cumulative_return, summary.original_return, abs_tol=1e-9)
        )
        failed = [name for name, passed in checks.items() if not passed]
        if failed:
            logger.error(f"Post-run checks failed: {', '.join(failed)}")
            return 1
        logger.info("Post-run checks passed")

    try:
        if args.report is not None:
            generate_mcpt_report(summary, records, output_path=args.report)
            logger.info(f"Report saved to {args.report}")
        if args.plot is not None and not summary.permuted_returns:
            logger.warning("No permuted trials ran; skipping distribution plot")
        elif args.plot is not None:
            plot_mcpt_distribution(summary, save_path=args.plot)
            logger.info(f"Saved plot to {args.plot}")
    except (OSError, ValueError) as e:
        logger.error(str(e))
        return 1

    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
