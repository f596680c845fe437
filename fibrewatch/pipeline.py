"""
One watch run: fetch, decode, summarize, compare with the snapshot, notify,
persist.

The network and mail collaborators are parameters so the run can be driven
without I/O. The snapshot is read once and written once, and only after every
earlier step succeeded: a failure anywhere leaves the previous snapshot as the
baseline for the next run.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .config import Settings
from .diffing import render_diff
from .extract import extract_fields
from .fetch import fetch_payload
from .logger import get_logger
from .notify import send_notification
from .pbf import decode_collection
from .storage import load_snapshot, save_snapshot
from .summary import build_summary

Fetcher = Callable[[str, float], bytes]
Notifier = Callable[[Settings, str], None]


@dataclass
class RunOutcome:
    summary: str
    diff: str = ""
    first_run: bool = False
    notified: bool = False


def generate_summary(payload: bytes, address: str) -> str:
    """Decode ``payload`` and summarize the feature at ``address``."""
    collection = decode_collection(payload)
    pairs = extract_fields(collection, address)
    return build_summary(pairs)


def compare(old_summary: str, new_summary: str) -> str:
    return render_diff(old_summary, new_summary).strip()


def current_summary(settings: Settings, fetch: Fetcher = fetch_payload) -> str:
    payload = fetch(settings.url, settings.fetch_timeout)
    return generate_summary(payload, settings.address)


def run_once(
    settings: Settings,
    snapshot_path: Path,
    fetch: Fetcher = fetch_payload,
    notify: Notifier = send_notification,
    persist: bool = True,
) -> RunOutcome:
    """
    Execute one watch run.

    Args:
        settings: Run settings
        snapshot_path: Text file holding the previous summary
        fetch: Callable(url, timeout) returning the raw payload
        notify: Callable(settings, markup) delivering a non-empty diff
        persist: Write the new summary to ``snapshot_path`` (off for dry runs)

    Returns:
        RunOutcome describing what happened

    Raises:
        FibreWatchError: any failing step; the snapshot is then left untouched
    """
    logger = get_logger()
    logger.record_run()

    new_summary = current_summary(settings, fetch)
    logger.info("Summary built", address=settings.address, lines=len(new_summary.splitlines()))

    outcome = RunOutcome(summary=new_summary)
    old_summary = load_snapshot(snapshot_path)
    if old_summary is None:
        outcome.first_run = True
        logger.info("No previous snapshot, skipping comparison", path=str(snapshot_path))
    else:
        outcome.diff = compare(old_summary, new_summary)
        if outcome.diff:
            logger.record_change()
            logger.info("Change detected", address=settings.address)
            notify(settings, outcome.diff)
            outcome.notified = True
        else:
            logger.info("No change detected")

    if persist:
        save_snapshot(snapshot_path, new_summary)
        logger.debug("Snapshot written", path=str(snapshot_path))
    return outcome
