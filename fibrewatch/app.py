import argparse
from pathlib import Path

from . import __version__
from .config import LOG_LEVELS, Settings, log_level_from_env
from .diffing import render_diff
from .env import load_env
from .errors import ConfigError, FibreWatchError, PersistenceError
from .fetch import fetch_payload
from .logger import get_logger
from .notify import send_notification
from .pipeline import current_summary, run_once
from .storage import DEFAULT_SNAPSHOT
from .summary import parse_summary


def _print_diff(settings: Settings, markup: str) -> None:
    print(markup)


def cmd_run(args: argparse.Namespace) -> None:
    settings = Settings.from_env()
    snapshot = Path(args.snapshot)
    if args.dry_run:
        outcome = run_once(settings, snapshot, fetch=fetch_payload, notify=_print_diff, persist=False)
    else:
        outcome = run_once(settings, snapshot, fetch=fetch_payload, notify=send_notification)

    if outcome.first_run:
        print(f"First run for {settings.address!r}, nothing to compare")
    elif outcome.notified:
        print("Change detected" + (" (dry run, not mailed)" if args.dry_run else ", diff mailed"))
    else:
        print("No change")
    get_logger().log_metrics_summary()


def cmd_summary(args: argparse.Namespace) -> None:
    settings = Settings.from_env(require_mail=False)
    print(current_summary(settings, fetch=fetch_payload))


def _read_summary_file(path: Path) -> str:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"Cannot read summary file {path}: {e}") from e
    try:
        parse_summary(text.rstrip("\n"))
    except ValueError as e:
        raise PersistenceError(f"{path} is not a summary file: {e}") from e
    return text


def cmd_diff(args: argparse.Namespace) -> None:
    old = _read_summary_file(Path(args.old))
    new = _read_summary_file(Path(args.new))
    markup = render_diff(old, new)
    print(markup if markup else "No change")


def main(argv=None):
    # Load .env if present (URL, ADDRESS, GMAIL_*, ...)
    load_env()
    parser = argparse.ArgumentParser(
        prog="fibrewatch",
        description="Watch a feature service for changes to one address and mail the diff",
    )
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--log-level", choices=sorted(LOG_LEVELS), help="Console log level (default: LOG_LEVEL or INFO)")
    parser.add_argument("--log-dir", default="logs", help="Directory for log files (default: logs)")
    parser.add_argument("--no-log-file", action="store_true", help="Log to the console only")

    subparsers = parser.add_subparsers(dest="command")
    run = subparsers.add_parser("run", help="Fetch, compare with the last snapshot, mail the diff and update the snapshot")
    run.add_argument("--snapshot", default=str(DEFAULT_SNAPSHOT), help=f"Snapshot file (default: {DEFAULT_SNAPSHOT})")
    run.add_argument("--dry-run", action="store_true", help="Print the diff instead of mailing it and leave the snapshot alone")
    run.set_defaults(func=cmd_run)

    smr = subparsers.add_parser("summary", help="Print the current summary for ADDRESS")
    smr.set_defaults(func=cmd_summary)

    dif = subparsers.add_parser("diff", help="Render the diff markup between two summary files")
    dif.add_argument("--old", required=True, help="Previous summary file")
    dif.add_argument("--new", required=True, help="Current summary file")
    dif.set_defaults(func=cmd_diff)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    try:
        level = args.log_level or log_level_from_env()
    except ConfigError as e:
        raise SystemExit(str(e))
    logger = get_logger(
        level=level,
        log_dir=Path(args.log_dir),
        enable_file=not args.no_log_file,
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return

    try:
        args.func(args)
    except FibreWatchError as e:
        logger.record_error(type(e).__name__)
        logger.error(str(e), error_type=type(e).__name__, command=args.command)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
