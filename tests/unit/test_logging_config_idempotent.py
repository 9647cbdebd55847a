import argparse
import io
import logging
import sys
from pathlib import Path

import blockmix.logging_utils as logging_utils


def _reset_logging():
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if getattr(handler, logging_utils._HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()
    logging_utils._logging_configured = False  # type: ignore[attr-defined]
    logging_utils.set_run_id(None)


def test_configure_logging_idempotent():
    _reset_logging()
    logging_utils.configure_logging(level="INFO", force=True)
    root = logging.getLogger()
    count = len(root.handlers)

    logging_utils.configure_logging(level="INFO")
    assert len(root.handlers) == count

    logging_utils.configure_logging(level="INFO", force=True)
    assert len(root.handlers) == count
    _reset_logging()


def test_run_id_in_output(monkeypatch, tmp_path):
    _reset_logging()
    buf = io.StringIO()
    monkeypatch.setattr(sys, "stderr", buf)
    logging_utils.configure_logging(level="INFO", force=True, run_id="test-run")
    logging.getLogger(__name__).info("hello")
    assert "hello" in buf.getvalue()
    assert "run_id=test-run" not in buf.getvalue()  # console default omits

    _reset_logging()
    buf = io.StringIO()
    monkeypatch.setattr(sys, "stderr", buf)
    logging_utils.configure_logging(level="INFO", force=True, run_id="test-run", show_run_id=True)
    logging.getLogger(__name__).info("hello")
    assert "run_id=test-run" in buf.getvalue()

    _reset_logging()
    log_file = tmp_path / "logs" / "run.log"
    logging_utils.configure_logging(level="INFO", force=True, run_id="test-run", log_file=str(log_file))
    logging.getLogger(__name__).info("hello-file")
    assert "run_id=test-run" in log_file.read_text(encoding="utf-8")
    _reset_logging()


def test_quiet_suppresses_info(monkeypatch):
    _reset_logging()
    buf = io.StringIO()
    monkeypatch.setattr(sys, "stderr", buf)
    logging_utils.configure_logging(level="WARNING", force=True)

    logger = logging.getLogger("quiet_test")
    logger.info("info hidden")
    logger.warning("warn shown")

    assert "info hidden" not in buf.getvalue()
    assert "warn shown" in buf.getvalue()
    _reset_logging()


def test_resolve_log_level_priority():
    parser = argparse.ArgumentParser()
    logging_utils.add_logging_args(parser)

    assert logging_utils.resolve_log_level(parser.parse_args([])) == "INFO"
    assert logging_utils.resolve_log_level(parser.parse_args([]), default="ERROR") == "ERROR"
    assert logging_utils.resolve_log_level(parser.parse_args(["--log-level", "WARNING"])) == "WARNING"
    assert logging_utils.resolve_log_level(parser.parse_args(["--quiet", "--log-level", "ERROR"])) == "WARNING"
    assert logging_utils.resolve_log_level(parser.parse_args(["--debug", "--quiet"])) == "DEBUG"


def test_format_helpers():
    assert logging_utils.format_count(1, "track") == "1 track"
    assert logging_utils.format_count(1200, "track") == "1,200 tracks"
    assert logging_utils.truncate_list([]) == "(none)"
    assert logging_utils.truncate_list(["a", "b", "c", "d", "e"]) == "a, b, c (+2 more)"


def test_no_basicconfig_in_package():
    root = Path(__file__).resolve().parents[2]
    offending = [
        path for path in (root / "blockmix").rglob("*.py")
        if "basicConfig(" in path.read_text(encoding="utf-8")
    ]
    assert offending == []


def test_run_summary_logs_metrics(caplog):
    logger = logging.getLogger("summary_test")
    summary = logging_utils.RunSummary("Playlist generation", logger)
    summary.add("tracks", 42)
    summary.add("ratio", 0.5)
    with caplog.at_level(logging.INFO, logger="summary_test"):
        summary.log()

    assert "PLAYLIST GENERATION SUMMARY" in caplog.text
    assert "  Tracks: 42" in caplog.text
    assert "  Ratio: 0.50" in caplog.text
    assert "Total Time:" in caplog.text
    assert not hasattr(summary, "increment")
