"""Tests for the debug utility module.

The debug utility provides a single entrypoint for low-level filesystem
chatter that can be toggled via the MODKEEPER_DEBUG environment variable.
Output goes to stderr so it never mixes with --json output on stdout.
"""

import importlib
from collections.abc import Callable
from io import StringIO
from typing import Any
from unittest.mock import patch

import pytest

from modkeeper.utils import debug as debug_module


def _reload_debug(monkeypatch: pytest.MonkeyPatch, value: str | None) -> Callable[[Any], None]:
    if value is None:
        monkeypatch.delenv("MODKEEPER_DEBUG", raising=False)
    else:
        monkeypatch.setenv("MODKEEPER_DEBUG", value)
    importlib.reload(debug_module)
    return debug_module.debug


@pytest.fixture(autouse=True)
def _restore_debug_state(monkeypatch: pytest.MonkeyPatch) -> Any:
    yield
    monkeypatch.delenv("MODKEEPER_DEBUG", raising=False)
    importlib.reload(debug_module)


def test_debug_disabled_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    """No output when MODKEEPER_DEBUG is not set."""
    debug = _reload_debug(monkeypatch, None)

    with patch("sys.stderr", new=StringIO()) as fake_stderr:
        debug("This should not print")

    assert fake_stderr.getvalue() == ""


def test_debug_enabled_writes_to_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    debug = _reload_debug(monkeypatch, "1")

    with (
        patch("sys.stderr", new=StringIO()) as fake_stderr,
        patch("sys.stdout", new=StringIO()) as fake_stdout,
    ):
        debug("Allocated foo (1).jar")

    assert fake_stderr.getvalue() == "[DEBUG] Allocated foo (1).jar\n"
    assert fake_stdout.getvalue() == ""


@pytest.mark.parametrize("value", ["1", "true", "True", "TRUE", "yes", "Yes", "YES"])
def test_debug_with_various_truthy_values(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    debug = _reload_debug(monkeypatch, value)

    with patch("sys.stderr", new=StringIO()) as fake_stderr:
        debug(f"Testing {value}")

    assert f"Testing {value}" in fake_stderr.getvalue()


@pytest.mark.parametrize("value", ["0", "false", "no", "off", ""])
def test_debug_disabled_for_falsy_values(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    debug = _reload_debug(monkeypatch, value)

    with patch("sys.stderr", new=StringIO()) as fake_stderr:
        debug(f"Testing {value}")

    assert fake_stderr.getvalue() == ""


def test_debug_with_empty_message(monkeypatch: pytest.MonkeyPatch) -> None:
    """The prefix is printed even for an empty message."""
    debug = _reload_debug(monkeypatch, "1")

    with patch("sys.stderr", new=StringIO()) as fake_stderr:
        debug("")

    assert fake_stderr.getvalue().count("[DEBUG]") == 1
