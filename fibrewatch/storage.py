from pathlib import Path
from typing import Optional

from .errors import PersistenceError
from .logger import get_logger

DEFAULT_SNAPSHOT = Path("last_summary.txt")


def load_snapshot(path: Path) -> Optional[str]:
    """Previous run's summary, or None when there is nothing to compare with.

    A missing file is the first run. An unreadable one is logged and treated
    the same way, so the run still completes and rewrites it.
    """
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        get_logger().warning("Snapshot unreadable, skipping comparison", path=str(path), error=str(e))
        return None


def save_snapshot(path: Path, summary: str) -> None:
    """Overwrite the snapshot with ``summary``.

    Raises:
        PersistenceError: if the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(summary)
    except OSError as e:
        raise PersistenceError(f"Cannot write snapshot {path}: {e}") from e
