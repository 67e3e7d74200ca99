"""Unit coverage for structured logging utilities and helpers."""

from __future__ import annotations

import io
import json
import logging
import sys

import pytest

from gemini_stream.base.log_support import JsonFormatter
from gemini_stream.base.logging import (
    REQUIRED_NORMALIZED_KEYS,
    LogContext,
    configure_logger,
    get_logger,
    normalized_log_event,
)


@pytest.fixture()
def swapped_handler():
    """Replace the base logger's handlers with a plain in-memory one."""
    base_logger = get_logger()
    saved = list(base_logger.handlers)
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    base_logger.handlers[:] = [handler]
    yield stream
    base_logger.handlers[:] = saved


def test_get_logger_env_overrides_level(monkeypatch, capsys):
    monkeypatch.setenv("GEMINI_STREAM_LOG_LEVEL", "ERROR")
    logger = get_logger(name="gemini_stream.test", json_mode=True, level=logging.DEBUG)
    logger.info("hello")
    assert capsys.readouterr().err == ""  # nosec B101 - pytest assert in tests
    logger.error("fail")
    data = json.loads(capsys.readouterr().err.strip())
    assert data["level"] == "ERROR" and data["msg"] == "fail"  # nosec B101 - pytest assert in tests
    assert data["logger"] == "gemini_stream.test"  # nosec B101 - pytest assert in tests


def test_foreign_names_are_nested_under_the_package_logger():
    assert get_logger("cli").name == "gemini_stream.cli"  # nosec B101 - pytest assert in tests
    assert get_logger().propagate is False  # nosec B101 - pytest assert in tests


def test_logs_never_reach_stdout(monkeypatch, capsys):
    monkeypatch.setenv("GEMINI_STREAM_LOG_LEVEL", "DEBUG")
    get_logger("gemini_stream.test").warning("to stderr")
    captured = capsys.readouterr()
    assert captured.out == "" and "to stderr" in captured.err  # nosec B101 - pytest assert in tests


def test_normalized_log_event_includes_required_keys(monkeypatch, capsys):
    monkeypatch.setenv("GEMINI_STREAM_LOG_LEVEL", "INFO")
    logger = get_logger(name="gemini_stream.test2", json_mode=True)
    normalized_log_event(
        logger,
        "stream.end",
        LogContext(model="gemini-pro", request_id="r1"),
        phase="finalize",
        emitted=True,
        tokens={"prompt": 1, "completion": 2, "total": 3},
        extra_field=123,
        dropped=None,
    )
    payload = json.loads(capsys.readouterr().err.strip())
    for key in REQUIRED_NORMALIZED_KEYS:
        if key != "error_code":
            assert key in payload  # nosec B101 - pytest assert in tests
    assert "error_code" not in payload and "dropped" not in payload  # nosec B101 - pytest assert in tests
    assert payload["attempt"] is None  # nosec B101 - pytest assert in tests
    assert (payload["event"], payload["model"], payload["request_id"]) == ("stream.end", "gemini-pro", "r1")  # nosec B101 - pytest assert in tests
    assert payload["tokens"]["total"] == 3 and payload["extra_field"] == 123  # nosec B101 - pytest assert in tests


def test_normalized_log_event_extras_do_not_overwrite(monkeypatch, capsys):
    monkeypatch.setenv("GEMINI_STREAM_LOG_LEVEL", "INFO")
    logger = get_logger(name="gemini_stream.test3")
    normalized_log_event(logger, "stream.error", None, phase="finalize", error_code="decode", emitted=False)
    payload = json.loads(capsys.readouterr().err.strip())
    assert payload["error_code"] == "decode" and payload["emitted"] is False  # nosec B101 - pytest assert in tests


def test_json_formatter_hoists_json_message() -> None:
    """The formatter hoists JSON message keys without double escaping."""
    record = logging.LogRecord(
        name="gemini_stream.test.json",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg=json.dumps({"model": "gemini-pro", "event": "cli.run"}),
        args=(),
        exc_info=None,
    )
    payload = json.loads(JsonFormatter().format(record))
    assert payload["model"] == "gemini-pro" and payload["event"] == "cli.run"  # nosec B101 - pytest assert in tests
    assert "msg" not in payload  # nosec B101 - pytest assert in tests


def test_json_formatter_keeps_record_extras() -> None:
    record = logging.LogRecord("gemini_stream.x", logging.WARNING, __file__, 0, "plain %s", ("text",), None)
    record.request_id = "abc"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["msg"] == "plain text" and payload["request_id"] == "abc"  # nosec B101 - pytest assert in tests


def test_log_context_prunes_none_and_merges_extra():
    ctx = LogContext(model="m", extra={"attempt_id": 2, "skip": None})
    assert ctx.to_dict() == {"model": "m", "attempt_id": 2}  # nosec B101 - pytest assert in tests


def test_child_logger_uses_parent_handler_without_duplicates(swapped_handler) -> None:
    logger = get_logger(name="gemini_stream.test.child", json_mode=False)
    configure_logger(level=logging.INFO)
    logger.info("alpha")
    lines = [ln for ln in swapped_handler.getvalue().splitlines() if ln]
    assert lines == ["alpha"]  # nosec B101 - pytest assert in tests


def test_child_logger_respects_warning_level(swapped_handler) -> None:
    logger = get_logger(name="gemini_stream.test.levels", json_mode=False)
    configure_logger(level="WARNING")
    logger.info("hidden")
    assert swapped_handler.getvalue() == ""  # nosec B101 - pytest assert in tests
    logger.error("visible")
    assert swapped_handler.getvalue().splitlines() == ["visible"]  # nosec B101 - pytest assert in tests


def test_configure_logger_attaches_and_detaches_file_handler(tmp_path):
    log_path = tmp_path / "nested" / "stream.log"
    logger = configure_logger(level="INFO", file_path=str(log_path))
    try:
        get_logger("gemini_stream.file").info(json.dumps({"event": "file.check"}))
        assert json.loads(log_path.read_text(encoding="utf-8").splitlines()[-1])["event"] == "file.check"  # nosec B101 - pytest assert in tests
    finally:
        configure_logger(level="WARNING")
    assert all(getattr(h, "baseFilename", None) != str(log_path) for h in logger.handlers)  # nosec B101 - pytest assert in tests


def _console_handlers():
    return [h for h in get_logger().handlers if getattr(h, "_gemini_stream_console_handler", False)]


def test_console_handler_replaced_when_its_stream_was_closed(monkeypatch, capsys):
    monkeypatch.setenv("GEMINI_STREAM_LOG_LEVEL", "INFO")
    stale = io.StringIO()
    stale.close()
    for handler in _console_handlers():
        handler.stream = stale
    normalized_log_event(get_logger("gemini_stream.test.recover"), "stream.start", None, phase="start")
    err = capsys.readouterr().err
    assert "Logging error" not in err  # nosec B101 - pytest assert in tests
    assert json.loads(err.strip())["event"] == "stream.start"  # nosec B101 - pytest assert in tests
    assert len(_console_handlers()) == 1  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize("attempt", [1, 2, 3])
def test_consecutive_captured_tests_each_see_their_events(monkeypatch, capsys, attempt):
    monkeypatch.setenv("GEMINI_STREAM_LOG_LEVEL", "INFO")
    normalized_log_event(get_logger("gemini_stream.test.seq"), "cli.run", None, phase="finalize", attempt=attempt)
    payload = json.loads(capsys.readouterr().err.strip())
    assert payload["attempt"] == attempt  # nosec B101 - pytest assert in tests
    (handler,) = _console_handlers()
    assert handler.stream is sys.stderr  # nosec B101 - pytest assert in tests
