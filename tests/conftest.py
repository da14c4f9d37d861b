from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for configuration dictionaries and the source analyzer.
"""

import os
import sys
import textwrap
from typing import Any, Callable, Dict, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from memoguard.core.analysis.checker import analyze_source  # noqa: E402
from memoguard.domain.diagnostics import Diagnostic  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Reflects the structure defined in 'memoguard.domain.config'.
    """
    return {
        "input_path": "/tmp/test_input",

        # Rules
        "policy": "strict",
        "unresolved": "warning",

        # Discovery
        "extensions": [".py"],
        "include_patterns": [".*"],
        "exclude_patterns": [r"^\."],
        "respect_gitignore": True,

        # Framework vocabulary
        "component_decorators": ["component"],
        "element_modules": ["html", "svg"],
        "element_types": ["Element", "VdomDict"],
        "element_factories": ["create_element", "h", "vdom"],

        # Execution & Reporting
        "max_workers": 2,
        "report_path": "",
        "report_format": "text",
    }


@pytest.fixture
def analyze(mock_config_dict: Dict[str, Any]) -> Callable[..., List[Diagnostic]]:
    """
    Analyze a dedented source snippet.

    Keyword arguments override configuration keys, e.g.
    `analyze(src, policy="element-permissive")`.
    """
    def _run(source: str, **overrides: Any) -> List[Diagnostic]:
        cfg = dict(mock_config_dict)
        cfg.update(overrides)
        return analyze_source(textwrap.dedent(source), "snippet.py", cfg)

    return _run
