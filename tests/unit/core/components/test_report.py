from __future__ import annotations

"""
Unit tests for Report Rendering.

Verifies the text layout, JSON payload and failure handling of report
persistence.
"""

import json
from unittest.mock import patch

from memoguard.core.pipeline.components.report import (
    render_json,
    render_text,
    summary_line,
    write_report,
)
from memoguard.domain.analysis_models import create_success_result
from memoguard.domain.diagnostics import SEVERITY_WARNING, Diagnostic
from memoguard.domain.errors import FileError


def _result(mock_config_dict):
    diag = Diagnostic(
        path="views.py",
        line=7,
        column=36,
        code="unresolved",
        severity=SEVERITY_WARNING,
        site="props",
        field="on_click",
        expected="Stabilized[Callable[[], None]]",
        actual="unknown",
        message="Property 'on_click': cannot infer the type of the supplied value",
    )
    return create_success_result(
        mock_config_dict, "/src/app", 3, [diag], [FileError("broken.py", "Invalid syntax")]
    )


def test_render_text_layout(mock_config_dict):
    text = render_text(_result(mock_config_dict))
    lines = text.splitlines()

    assert lines[0] == "MEMOGUARD STABILITY REPORT:"
    assert "INPUT: /src/app" in lines
    assert "POLICY: strict" in lines
    assert "views.py:7:36: warning[unresolved] Property 'on_click'" in text
    assert "  expected: Stabilized[Callable[[], None]]" in lines
    assert "FILE: broken.py" in lines
    assert lines[-1] == "3 file(s) analyzed: 0 error(s), 1 warning(s), 1 file error(s)"
    assert text.endswith("\n")


def test_render_json_payload(mock_config_dict):
    data = json.loads(render_json(_result(mock_config_dict)))
    assert data["warnings"] == 1
    assert data["file_errors"][0]["rel_path"] == "broken.py"


def test_summary_line_counts(mock_config_dict):
    assert summary_line(_result(mock_config_dict)).startswith("3 file(s) analyzed")


def test_write_report_creates_parents(tmp_path, mock_config_dict):
    target = tmp_path / "deep" / "report.json"
    written = write_report(_result(mock_config_dict), str(target), "json")

    assert written == str(target)
    assert json.loads(target.read_text(encoding="utf-8"))["files_analyzed"] == 3


def test_write_report_failure_returns_empty(tmp_path, mock_config_dict):
    with patch("builtins.open", side_effect=PermissionError("denied")):
        assert write_report(_result(mock_config_dict), str(tmp_path / "r.txt")) == ""
