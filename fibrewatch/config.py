"""
Run settings read from the environment.

Required: URL, ADDRESS, GMAIL_ADDRESS, GMAIL_USER, GMAIL_PASSWORD.
Optional: FETCH_TIMEOUT (seconds, default 30), LOG_LEVEL (default INFO).
"""

import os
from dataclasses import dataclass
from email.utils import parseaddr
from typing import List, Mapping, Optional
from urllib.parse import urlparse

from .errors import ConfigError

SOURCE_KEYS = ["URL", "ADDRESS"]
MAIL_KEYS = ["GMAIL_ADDRESS", "GMAIL_USER", "GMAIL_PASSWORD"]
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
DEFAULT_TIMEOUT = 30.0


def _valid_url(v: str) -> bool:
    p = urlparse(v)
    return bool(p.scheme in ("http", "https") and p.netloc)


def _valid_mailbox(v: str) -> bool:
    _, addr = parseaddr(v)
    local, at, domain = addr.partition("@")
    return bool(local and at and domain)


def log_level_from_env(environ: Optional[Mapping[str, str]] = None) -> str:
    """LOG_LEVEL, upper-cased, defaulting to INFO.

    Raises:
        ConfigError: if the value is not a logging level name
    """
    env = os.environ if environ is None else environ
    level = env.get("LOG_LEVEL", "").strip().upper() or "INFO"
    if level not in LOG_LEVELS:
        raise ConfigError(f"LOG_LEVEL must be one of {', '.join(sorted(LOG_LEVELS))}, got {level!r}")
    return level


@dataclass(frozen=True)
class Settings:
    url: str
    address: str
    gmail_address: Optional[str] = None
    gmail_user: Optional[str] = None
    gmail_password: Optional[str] = None
    fetch_timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, require_mail: bool = True) -> "Settings":
        """
        Build settings from ``environ`` (default: os.environ).

        Args:
            environ: Mapping to read instead of the process environment
            require_mail: Also require the GMAIL_* keys

        Raises:
            ConfigError: naming every missing key, or the first invalid one
        """
        env = os.environ if environ is None else environ
        required = SOURCE_KEYS + (MAIL_KEYS if require_mail else [])
        missing: List[str] = [k for k in required if not env.get(k, "").strip()]
        if missing:
            raise ConfigError(f"Missing environment variables: {', '.join(missing)}")

        url = env["URL"].strip()
        if not _valid_url(url):
            raise ConfigError(f"URL must be an absolute http(s) URL, got {url!r}")

        gmail_address = env.get("GMAIL_ADDRESS", "").strip() or None
        if gmail_address is not None and not _valid_mailbox(gmail_address):
            raise ConfigError(f"GMAIL_ADDRESS is not a mailbox: {gmail_address!r}")

        raw_timeout = env.get("FETCH_TIMEOUT", "").strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigError(f"FETCH_TIMEOUT must be a number of seconds, got {raw_timeout!r}")
        if not timeout > 0:
            raise ConfigError(f"FETCH_TIMEOUT must be positive, got {raw_timeout!r}")

        return cls(
            url=url,
            # matched exactly against the CodeAdress cells, so not stripped
            address=env["ADDRESS"],
            gmail_address=gmail_address,
            gmail_user=env.get("GMAIL_USER") or None,
            gmail_password=env.get("GMAIL_PASSWORD") or None,
            fetch_timeout=timeout,
        )
