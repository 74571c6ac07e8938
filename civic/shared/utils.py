"""
Shared utilities for the civic status tools.
============================================
Provides:
  - setup_logging  — named logger writing to console and, optionally, a rotating file
  - http_get_json  — GET a JSON document through a retrying session
  - load_json      — read a JSON file, {} when missing or corrupt
  - save_json      — write JSON via a temp file and rename
  - ensure_dir     — mkdir -p

Only the command-line layer does I/O; the status engine never imports this.
"""

from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


LOG_FORMAT = "%(asctime)s | %(name)-20s | %(levelname)-8s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_MAX_BYTES = 10_000_000
LOG_BACKUPS = 5

# Congress.gov answers 429 when the hourly key quota is spent.
RETRY_STATUSES = (429, 500, 502, 503, 504)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def setup_logging(
    name: str,
    level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Return the named logger, attaching handlers on first use only.

    Args:
        name:     Logger name. "civic" also collects the library modules' records.
        level:    "DEBUG" | "INFO" | "WARNING" | "ERROR"
        log_file: Optional path for a rotating log file.
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    if logger.handlers:
        return logger

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        ensure_dir(Path(log_file).parent)
        handlers.append(
            RotatingFileHandler(
                log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
            )
        )

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

def _build_session(max_retries: int, backoff: float) -> requests.Session:
    """Session that retries connection errors and RETRY_STATUSES with backoff.

    Exhausted status retries raise instead of handing back the last response.
    """
    retry = Retry(
        total=max_retries,
        backoff_factor=backoff,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=["GET"],
        raise_on_status=True,
    )
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def http_get_json(
    url: str,
    params: Optional[dict] = None,
    timeout: int = 30,
    max_retries: int = 3,
    retry_delay: float = 2.0,
    logger: Optional[logging.Logger] = None,
) -> dict:
    """
    GET url and return its parsed JSON body.

    Retrying happens inside the session adapter (max_retries retries,
    backoff factor retry_delay), so this issues a single session.get.
    The URL is logged without params so API keys stay out of the logs.

    Raises:
        requests.RequestException: retries exhausted, non-retryable HTTP
            error, or a body that is not JSON.
    """
    log = logger or logging.getLogger(__name__)
    with _build_session(max_retries, retry_delay) as session:
        try:
            resp = session.get(url, params=params, timeout=timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as exc:
            log.error(f"GET failed ({type(exc).__name__}): {url}")
            raise


# ---------------------------------------------------------------------------
# JSON files
# ---------------------------------------------------------------------------

def load_json(path: Path, logger: Optional[logging.Logger] = None) -> Any:
    """Parsed contents of path, or {} when it is missing or not valid JSON."""
    log = logger or logging.getLogger(__name__)
    path = Path(path)
    if not path.exists():
        log.warning(f"JSON file not found: {path}")
        return {}
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        log.warning(f"Ignoring unparseable JSON in {path}: {exc}")
        return {}


def save_json(data: Any, path: Path, logger: Optional[logging.Logger] = None) -> None:
    """
    Write data to path as indented JSON.

    The text goes to a sibling .tmp file that is renamed over path, so a
    reader never sees a half-written results file. Enums and datetimes
    serialize through str().
    """
    log = logger or logging.getLogger(__name__)
    path = Path(path)
    ensure_dir(path.parent)
    tmp_path = path.with_suffix(".tmp")
    try:
        tmp_path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False, default=str), encoding="utf-8"
        )
        tmp_path.replace(path)
    except OSError as exc:
        log.error(f"Could not write {path}: {exc}")
        tmp_path.unlink(missing_ok=True)
        raise


def ensure_dir(path: Path) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)
