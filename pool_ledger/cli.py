"""Command-line interface for the pool ledger.

Usage:
    # Replay a scenario file and print a step-by-step report
    pool-ledger replay tests/fixtures/scenarios/privileged_drain.json

    # Same, as JSON
    pool-ledger replay scenario.json --json

    # Price an exact-input swap against explicit reserves
    pool-ledger quote --reserve-in 100 --reserve-out 400 --amount-in 10
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from pool_ledger.config import PoolConfig
from pool_ledger.errors import LedgerError
from pool_ledger.math.constant_product import quote_exact_in
from pool_ledger.models.scenario import load_scenario
from pool_ledger.replay import ReplayReport, replay_scenario
from pool_ledger.safe_int import SafeIntError

logger = structlog.get_logger()


def configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def print_report(report: ReplayReport) -> None:
    print("=" * 60)
    print(f"Scenario: {report.scenario}")
    print("=" * 60)
    for outcome in report.outcomes:
        marker = "!!" if outcome.unexpected else "ok"
        title = outcome.label or outcome.op
        if outcome.error:
            detail = f"{outcome.error}: {outcome.error_detail}"
        else:
            detail = f"-> {outcome.result}"
        print(f"[{marker}] {outcome.index:>3} {title:<28} {detail}")
        if outcome.expected_error and outcome.unexpected:
            print(f"       expected {outcome.expected_error}")
        for violation in outcome.violations:
            print(f"       invariant {violation.name}: {violation.detail}")

    state = report.pool.state()
    print()
    print(
        f"reserve_a={state.reserve_a} reserve_b={state.reserve_b} "
        f"total_shares={state.total_shares}"
    )
    print(f"Unexpected steps: {len(report.unexpected_steps)}")


def cmd_replay(args: argparse.Namespace) -> int:
    if not args.scenario.exists():
        logger.error("scenario_not_found", path=str(args.scenario))
        print(f"Error: Scenario file not found: {args.scenario}")
        return 2

    try:
        scenario = load_scenario(args.scenario)
    except ValidationError as err:
        logger.error("invalid_scenario", path=str(args.scenario), errors=err.error_count())
        print(f"Error: Invalid scenario {args.scenario}:\n{err}")
        return 2

    try:
        report = replay_scenario(scenario)
    except (LedgerError, ValueError) as err:
        # The file validated but describes a pool that cannot be built
        logger.error("scenario_setup_failed", path=str(args.scenario), error=str(err))
        print(f"Error: Cannot build pool for {args.scenario}: {err}")
        return 2

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_report(report)
    return 0 if report.ok else 1


def cmd_quote(args: argparse.Namespace) -> int:
    try:
        config = PoolConfig.from_env()
        quote = quote_exact_in(args.amount_in, args.reserve_in, args.reserve_out, config)
    except (ValueError, SafeIntError) as err:
        print(f"Error: {err}")
        return 2

    print(f"k_before     {quote.k_before}")
    print(f"raw_out      {quote.raw_out}")
    print(f"amount_out   {quote.amount_out}")
    print(f"fee_retained {quote.fee_retained}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="pool-ledger",
        description="Constant-product pool ledger tools",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay = subparsers.add_parser("replay", help="Replay a scenario JSON file")
    replay.add_argument("scenario", type=Path, help="Path to the scenario file")
    replay.add_argument("--json", action="store_true", help="Print the report as JSON")
    replay.set_defaults(func=cmd_replay)

    quote = subparsers.add_parser("quote", help="Price an exact-input swap")
    quote.add_argument("--reserve-in", type=int, required=True)
    quote.add_argument("--reserve-out", type=int, required=True)
    quote.add_argument("--amount-in", type=int, required=True)
    quote.set_defaults(func=cmd_quote)

    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
