"""Unit tests for logging configuration and the audit trail."""

import json
from pathlib import Path

from loguru import logger

from evote_api.core.logging import AUDIT_LOG_FILE, LOG_FILE, audit_logger, setup_logging


class TestLogging:
    """Tests for Loguru logging setup."""

    def test_setup_logging_does_not_raise(self) -> None:
        """setup_logging with valid log level does not raise."""
        setup_logging("DEBUG")
        setup_logging("INFO")
        setup_logging("WARNING")

    def test_setup_logging_case_insensitive(self) -> None:
        """setup_logging accepts case-insensitive log levels."""
        setup_logging("info")
        setup_logging("debug")

    def test_json_stderr(self, capsys) -> None:
        setup_logging("INFO", json_logs=True)
        logger.info("structured line")
        logger.complete()
        line = capsys.readouterr().err.strip().splitlines()[-1]
        assert json.loads(line)["record"]["message"] == "structured line"
        setup_logging("INFO")

    def test_file_sink_created(self, tmp_path: Path) -> None:
        """A log file is written when log_dir is set."""
        setup_logging("INFO", log_dir=str(tmp_path / "logs"))
        logger.info("hello from test")
        logger.complete()
        assert (tmp_path / "logs" / LOG_FILE).exists()
        setup_logging("INFO")


class TestAuditTrail:
    """Tests for the JSON-lines audit trail."""

    def test_only_audit_records_written(self, tmp_path: Path) -> None:
        setup_logging("INFO", log_dir=str(tmp_path))
        logger.info("routine request")
        audit_logger("votes.invalidate", voter_dni="12345678", invalidated=2).info("Invalidated 2 vote(s)")
        logger.complete()
        setup_logging("INFO")

        lines = (tmp_path / AUDIT_LOG_FILE).read_text().strip().splitlines()
        assert len(lines) == 1
        record = json.loads(lines[0])["record"]
        assert record["message"] == "Invalidated 2 vote(s)"
        assert record["extra"] == {"audit": "votes.invalidate", "voter_dni": "12345678", "invalidated": 2}

    def test_audit_records_respect_stderr_level(self, tmp_path: Path, capsys) -> None:
        setup_logging("ERROR", log_dir=str(tmp_path))
        audit_logger("auth.login", tier="admin").info("Issued admin session token")
        logger.complete()
        setup_logging("INFO")

        assert "Issued admin session token" not in capsys.readouterr().err
        assert "auth.login" in (tmp_path / AUDIT_LOG_FILE).read_text()
