from __future__ import annotations

"""
Unit tests for the Main Entry Point.

The installed console script must route through the supervisor so that
unexpected crashes are logged and mapped to exit status 1.
"""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


@pytest.fixture
def entry_module():
    """Import the entry module without leaking its excepthook into the session."""
    original = sys.excepthook
    import memoguard.main as entry
    yield entry
    sys.excepthook = original


def test_console_script_targets_supervised_main():
    setup_text = (PROJECT_ROOT / "setup.py").read_text(encoding="utf-8")
    assert "'memoguard=memoguard.main:main'" in setup_text


def test_main_returns_cli_exit_code(entry_module):
    with patch("memoguard.interface.cli.app.main", return_value=2):
        assert entry_module.main() == 2


def test_main_routes_crashes_through_supervisor(entry_module, capsys):
    with patch("memoguard.interface.cli.app.main", side_effect=RuntimeError("boom")):
        with pytest.raises(SystemExit) as exc:
            entry_module.main()

    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert "CRITICAL ERROR (MEMOGUARD)" in err
    assert "RuntimeError: boom" in err
