#!/usr/bin/env python3
"""
PRW command line.

Solves a ground planning problem with the pure random walk strategy.

Usage:
    prw solve domain.yaml problem.yaml
    prw solve domain.yaml problem.yaml -e SUM --seed 7 --max-restarts 50

Exit codes:
    0  plan found (plan printed to stdout, one action per line)
    1  invalid configuration, unreadable or unsupported problem
    2  command line usage error (argparse)
    3  search budget exhausted or search cancelled
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from common.constants import EXIT_FAILURE, EXIT_OK, EXIT_SEARCH_EXHAUSTED
from component_15_logging_config import get_logger, setup_logging
from component_4_heuristics import HeuristicName
from component_6_problem_loader import load_problem
from prw_config import PlannerConfig, apply_env_overrides, get_config, load_config
from prw_exceptions import (
    ConfigurationException,
    PlanningException,
    SearchExhaustedError,
    get_user_friendly_message,
)

__version__ = "1.0.0"

logger = get_logger("prw.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prw",
        description="Solves a specified planning problem using Pure Random Walk search.",
    )
    parser.add_argument("--version", action="version", version=f"PRW {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    solve = subparsers.add_parser(
        "solve",
        help="Search a plan for a ground problem",
        description="Search a plan for a ground problem given as YAML domain and problem files.",
    )
    solve.add_argument("domain", type=Path, help="Domain file (ground actions)")
    solve.add_argument("problem", type=Path, help="Problem file (init, goal)")
    solve.add_argument(
        "-e",
        "--heuristic",
        type=str,
        default=None,
        help="Heuristic: "
        + ", ".join(h.value for h in HeuristicName)
        + " (preset: FAST_FORWARD)",
    )
    solve.add_argument(
        "-w",
        "--weight",
        dest="heuristic_weight",
        type=float,
        default=None,
        help="Heuristic weight (preset: 1.0)",
    )
    solve.add_argument("--seed", type=int, default=None, help="Random seed")
    solve.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Steps without heuristic progress before restarting (preset: 1000)",
    )
    solve.add_argument(
        "--max-iterations", type=int, default=None, help="Give up after N iterations"
    )
    solve.add_argument(
        "--max-restarts", type=int, default=None, help="Give up after N restarts"
    )
    solve.add_argument(
        "--time-limit", type=float, default=None, help="Give up after N seconds"
    )
    solve.add_argument("--config", type=Path, default=None, help="YAML config file")
    solve.add_argument("--log-level", type=str, default=None, help="Console log level")
    solve.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs (and performance logs) next to this file",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> PlannerConfig:
    """Defaults < config file < PRW_* environment < command line flags."""
    if args.config is not None:
        config = apply_env_overrides(load_config(args.config))
    else:
        config = get_config()

    return config.with_overrides(
        heuristic=args.heuristic,
        heuristic_weight=args.heuristic_weight,
        seed=args.seed,
        max_steps=args.max_steps,
        max_iterations=args.max_iterations,
        max_restarts=args.max_restarts,
        time_limit=args.time_limit,
        log_level=args.log_level,
    )


def run_solve(args: argparse.Namespace) -> int:
    try:
        config = resolve_config(args)
    except ConfigurationException as e:
        setup_logging(enable_file_logging=False, enable_performance_logging=False)
        logger.critical(get_user_friendly_message(e, include_details=True))
        return EXIT_FAILURE

    setup_logging(
        console_level=logging.getLevelName(config.log_level),
        log_file=args.log_file,
        enable_file_logging=args.log_file is not None,
        enable_performance_logging=args.log_file is not None,
    )
    logger.debug("Effective configuration", extra=config.to_dict())

    try:
        problem = load_problem(args.domain, args.problem)
        planner = config.build_planner()
        plan = planner.solve(problem)
    except SearchExhaustedError as e:
        logger.critical(get_user_friendly_message(e))
        return EXIT_SEARCH_EXHAUSTED
    except (PlanningException, ConfigurationException) as e:
        logger.critical(get_user_friendly_message(e, include_details=True))
        return EXIT_FAILURE

    logger.info(
        f"Plan length: {plan.size()}",
        extra={"restarts": planner.stats["restarts"], "steps": planner.stats["steps"]},
    )
    for action in plan:
        print(action.name)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "solve":
        return run_solve(args)

    parser.error(f"Unknown command {args.command!r}")
    return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
