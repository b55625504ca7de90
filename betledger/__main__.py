"""betledger CLI entry point."""

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from betledger import __version__
from betledger.clock import SystemClock
from betledger.config import Settings, get_settings
from betledger.events import JsonlEventSink, LoggingEventSink
from betledger.exceptions import BetLedgerError, BetNotFoundError
from betledger.ledger import BetLedger
from betledger.models import Bet, BetStatus
from betledger.storage import YamlBetStore
from betledger.utils import format_base_units, generate_deposit_path, ns_from_hours, to_base_units

logger = logging.getLogger(__name__)

CONFIG_TEMPLATE = """# betledger configuration

ledger:
  state_file: ledger.yaml
  events_file: events.jsonl
  record_events: true

monitor:
  stale_unfunded_hours: 24
  stale_live_hours: 72

amounts:
  decimals: 6
"""


def _init_logfire(settings: Settings) -> None:
    """Initialize Logfire if configured, without failing commands."""
    try:
        from betledger.observability import initialize_logfire

        initialize_logfire(settings)
    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")


def _open_ledger(settings: Settings) -> BetLedger:
    if not settings.data_dir.exists():
        raise FileNotFoundError(
            f"Data directory not found: {settings.data_dir}. "
            "Run 'python -m betledger init' to create it."
        )

    sink = JsonlEventSink(settings.events_path) if settings.ledger.record_events else LoggingEventSink()
    return BetLedger(YamlBetStore(settings.state_path), clock=SystemClock(), sink=sink)


def _format_ns(ns: int) -> str:
    return datetime.fromtimestamp(ns / 1e9, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _format_age(ns: int) -> str:
    seconds = ns // 1_000_000_000
    hours, remainder = divmod(seconds, 3600)
    minutes = remainder // 60
    return f"{hours}h{minutes:02d}m"


def _print_bet_line(bet: Bet, decimals: int, now: int | None = None) -> None:
    line = f"  #{bet.id:<5} {bet.status.value:<13} {format_base_units(bet.amount, decimals):>18}"
    if now is not None:
        line += f"  in status {_format_age(bet.dwell_time_ns(now))}"
    print(f"{line}  {bet.resolution_criteria[:50]}")


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize data directory and configuration file."""
    settings = get_settings()
    data_dir = settings.data_dir

    try:
        data_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created data directory: {data_dir}")

        config_path = data_dir / "config.yaml"
        if not config_path.exists():
            config_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
            logger.info(f"Created config template: {config_path}")
        else:
            logger.info(f"Config file already exists: {config_path}")

        print(f"\n✓ Data directory initialized at {data_dir}\n")
        return 0

    except OSError as e:
        logger.error(f"Failed to initialize: {e}")
        print(f"\n❌ Initialization failed: {e}\n")
        return 1


def cmd_config(args: argparse.Namespace) -> int:
    """Display merged configuration."""
    try:
        settings = get_settings()
    except ValidationError as e:
        print("\n❌ Configuration Error:\n")
        for error in e.errors():
            print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
        print()
        return 1

    print("\n=== betledger Configuration ===\n")
    print(f"Data Directory: {settings.data_dir}\n")

    print("Ledger:")
    print(f"  State File: {settings.state_path}")
    print(f"  Events File: {settings.events_path}")
    print(f"  Record Events: {settings.ledger.record_events}\n")

    print("Monitor (hours):")
    print(f"  Stale Unfunded: {settings.monitor.stale_unfunded_hours}")
    print(f"  Stale Live: {settings.monitor.stale_live_hours}\n")

    print("Amounts:")
    print(f"  Decimals: {settings.amounts.decimals}\n")

    print(f"Logfire: {'✓ Set' if settings.logfire_token else '✗ Not set'}\n")
    return 0


def cmd_create(args: argparse.Namespace) -> int:
    """Create a new unfunded bet."""
    settings = get_settings()
    decimals = settings.amounts.decimals

    try:
        amount = int(args.amount) if args.raw else to_base_units(args.amount, decimals)
        p1_path = args.p1 if args.p1 is not None else generate_deposit_path()
        p2_path = args.p2 if args.p2 is not None else generate_deposit_path()

        ledger = _open_ledger(settings)
        bet_id = ledger.create(p1_path, p2_path, amount, args.criteria)
    except (ValueError, FileNotFoundError, BetLedgerError) as e:
        logger.error(f"Failed to create bet: {e}")
        print(f"\n❌ Failed to create bet: {e}\n")
        return 1

    print(f"\n✓ Bet created (ID: {bet_id})\n")
    print(f"Participant 1 deposit path: {p1_path}")
    print(f"Participant 2 deposit path: {p2_path}")
    print(f"Amount: {format_base_units(amount, decimals)} ({amount} base units)\n")
    return 0


def cmd_transition(args: argparse.Namespace) -> int:
    """Change the status of a bet."""
    try:
        status = BetStatus.parse(args.status)
        ledger = _open_ledger(get_settings())
        before = ledger.get(args.bet_id)
        ledger.transition(args.bet_id, status)
    except BetNotFoundError as e:
        print(f"\n❌ {e}\n")
        return 1
    except (ValueError, FileNotFoundError, BetLedgerError) as e:
        logger.error(f"Failed to update bet {args.bet_id}: {e}")
        print(f"\n❌ Failed to update bet {args.bet_id}: {e}\n")
        return 1

    if before is not None and before.status == status:
        print(f"\nBet #{args.bet_id} is already {status.value}; nothing recorded.\n")
    else:
        print(f"\n✓ Bet #{args.bet_id} updated to status {status.value}\n")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Display one bet and its status history."""
    settings = get_settings()
    decimals = settings.amounts.decimals

    try:
        ledger = _open_ledger(settings)
    except (FileNotFoundError, BetLedgerError) as e:
        print(f"\n❌ {e}\n")
        return 1

    bet = ledger.get(args.bet_id)
    if bet is None:
        print(f"\n❌ Bet not found: {args.bet_id}\n")
        return 1

    print(f"\n=== Bet #{bet.id} ===\n")
    print(f"Status: {bet.status.value}")
    print(f"Amount: {format_base_units(bet.amount, decimals)} ({bet.amount} base units)")
    print(f"Participant 1 deposit path: {bet.participant1_deposit_path}")
    print(f"Participant 2 deposit path: {bet.participant2_deposit_path}")
    print(f"Created: {_format_ns(bet.created_at)}")
    print(f"In status since: {_format_ns(bet.last_status_change)}")
    print(f"Resolution criteria: {bet.resolution_criteria}\n")

    print("History:")
    for i, change in enumerate(ledger.history(bet.id) or [], 1):
        print(f"  {i}. {change.status.value:<13} {_format_ns(change.timestamp)}")
    print()
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List bets, optionally filtered by status."""
    settings = get_settings()

    try:
        ledger = _open_ledger(settings)
        bets = ledger.list_by_status(args.status) if args.status else ledger.list_bets()
    except (ValueError, FileNotFoundError, BetLedgerError) as e:
        print(f"\n❌ {e}\n")
        return 1

    print(f"\nBets: {len(bets)}")
    if not bets:
        print("  (None)")
    for bet in bets:
        _print_bet_line(bet, settings.amounts.decimals)
    print()
    return 0


def cmd_stale(args: argparse.Namespace) -> int:
    """List bets that have stayed in a status for at least a minimum age."""
    settings = get_settings()

    try:
        status = BetStatus.parse(args.status)

        if args.min_age_ns is not None:
            min_age_ns = args.min_age_ns
        elif args.min_age_hours is not None:
            min_age_ns = ns_from_hours(args.min_age_hours)
        elif status == BetStatus.UNFUNDED:
            min_age_ns = ns_from_hours(settings.monitor.stale_unfunded_hours)
        elif status == BetStatus.LIVE:
            min_age_ns = ns_from_hours(settings.monitor.stale_live_hours)
        else:
            raise ValueError(f"No default age for {status.value}; pass --min-age-ns or --min-age-hours")

        ledger = _open_ledger(settings)
        bets = ledger.list_by_status_age(status, min_age_ns)
        now = ledger.clock.now()
    except (ValueError, FileNotFoundError, BetLedgerError) as e:
        print(f"\n❌ {e}\n")
        return 1

    print(f"\n{status.value} for at least {_format_age(min_age_ns)}: {len(bets)}")
    if not bets:
        print("  (None)")
    for bet in bets:
        _print_bet_line(bet, settings.amounts.decimals, now=now)
    print()
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Display bet counts per status."""
    try:
        ledger = _open_ledger(get_settings())
    except (FileNotFoundError, BetLedgerError) as e:
        print(f"\n❌ {e}\n")
        return 1

    counts = ledger.count_by_status()
    print("\n=== Ledger Status ===\n")
    print(f"Total Bets: {sum(counts.values())}")
    for status, count in counts.items():
        print(f"  {status.value}: {count}")
    print()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    load_dotenv(Path.cwd() / ".env")

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    parser = argparse.ArgumentParser(
        description="betledger: wager records with an auditable status history",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"betledger {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_init = subparsers.add_parser("init", help="Initialize data directory and config file")
    parser_init.set_defaults(func=cmd_init)

    parser_config = subparsers.add_parser("config", help="Display merged configuration")
    parser_config.set_defaults(func=cmd_config)

    parser_create = subparsers.add_parser("create", help="Create a new bet")
    parser_create.add_argument(
        "--amount",
        required=True,
        help="Amount in whole units (e.g. 12.5), or base units with --raw",
    )
    parser_create.add_argument(
        "--raw",
        action="store_true",
        help="Treat --amount as integer base units",
    )
    parser_create.add_argument("--p1", help="Participant 1 deposit path (generated if omitted)")
    parser_create.add_argument("--p2", help="Participant 2 deposit path (generated if omitted)")
    parser_create.add_argument("--criteria", required=True, help="Resolution criteria")
    parser_create.set_defaults(func=cmd_create)

    parser_transition = subparsers.add_parser("transition", help="Change a bet's status")
    parser_transition.add_argument("bet_id", type=int)
    parser_transition.add_argument("status", help="Unfunded, Live, Resolved or Inconclusive")
    parser_transition.set_defaults(func=cmd_transition)

    parser_show = subparsers.add_parser("show", help="Display a bet and its status history")
    parser_show.add_argument("bet_id", type=int)
    parser_show.set_defaults(func=cmd_show)

    parser_list = subparsers.add_parser("list", help="List bets")
    parser_list.add_argument("--status", help="Only bets in this status")
    parser_list.set_defaults(func=cmd_list)

    parser_stale = subparsers.add_parser("stale", help="List bets stuck in a status")
    parser_stale.add_argument("--status", default=BetStatus.UNFUNDED.value)
    age_group = parser_stale.add_mutually_exclusive_group()
    age_group.add_argument("--min-age-ns", type=int, help="Minimum time in status (nanoseconds)")
    age_group.add_argument("--min-age-hours", type=float, help="Minimum time in status (hours)")
    parser_stale.set_defaults(func=cmd_stale)

    parser_status = subparsers.add_parser("status", help="Display bet counts per status")
    parser_status.set_defaults(func=cmd_status)

    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.command not in ("init", "config"):
        _init_logfire(get_settings())

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
