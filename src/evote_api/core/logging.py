"""Loguru logging configuration and the administrative audit trail.

Operational logs go to stderr, as text or JSON lines. When a ``log_dir``
is configured they are also written to a rotating file, and every record
bound with an ``audit`` event name (logins, vote invalidations, integrity
repairs) is appended to ``audit.jsonl`` so administrative actions can be
reviewed after the election.
"""

import sys
from pathlib import Path
from typing import Any

from loguru import logger

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"

LOG_FILE = "evote-api.log"
AUDIT_LOG_FILE = "audit.jsonl"


def audit_logger(event: str, **fields: Any) -> Any:
    """Return a logger whose records are copied to the audit trail.

    Args:
        event: Dotted event name, e.g. ``"votes.invalidate"``.
        **fields: Structured context stored with the record. Never pass
            credentials or tokens.
    """
    return logger.bind(audit=event, **fields)


def _is_audit_record(record: Any) -> bool:
    return "audit" in record["extra"]


def setup_logging(log_level: str = "INFO", log_dir: str | None = None, *, json_logs: bool = False) -> None:
    """Configure Loguru sinks for the API and CLI.

    Args:
        log_level: Minimum log level to emit.
        log_dir: Optional directory for log files. When set, a rotating
            text log (24 hours, retained 7 days) and the JSON-lines audit
            trail (retained 90 days) are written there.
        json_logs: Serialize stderr records as JSON lines for log shippers.
    """
    level = log_level.upper()
    logger.remove()
    if json_logs:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=_LOG_FORMAT)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / LOG_FILE,
            level=level,
            format=_LOG_FORMAT,
            rotation="24h",
            retention="7 days",
        )
        logger.add(
            log_path / AUDIT_LOG_FILE,
            level="INFO",
            serialize=True,
            filter=_is_audit_record,
            rotation="24h",
            retention="90 days",
        )
