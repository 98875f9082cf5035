"""Tests for the print-based logger."""

import io

import pytest

from izhinet.utils import get_logger, set_log_level


@pytest.fixture(autouse=True)
def restore_log_level():
    yield
    set_log_level("INFO")


def test_header_and_message(capsys):
    log = get_logger("test")
    log.info("Simulating %d neurons", 12)
    out = capsys.readouterr().out
    assert "izhinet:test INFO" in out
    assert "Simulating 12 neurons" in out


def test_bad_format_args_print_raw_message(capsys):
    log = get_logger("test")
    log.warning("rate %d Hz", "fast")
    assert "rate %d Hz" in capsys.readouterr().out


def test_level_filter(capsys):
    log = get_logger("test")
    assert set_log_level("warning") == "INFO"
    log.info("hidden")
    log.error("shown")
    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "shown" in out


def test_unknown_level():
    with pytest.raises(ValueError):
        set_log_level("chatty")


def test_extra_stream(capsys):
    extra = io.StringIO()
    log = get_logger("test", out=extra)
    log.info("to both")
    assert "to both" in extra.getvalue()
    assert "to both" in capsys.readouterr().out
