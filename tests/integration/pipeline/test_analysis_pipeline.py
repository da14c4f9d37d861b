from __future__ import annotations

"""
Integration tests for the Analysis Pipeline.

Validates the multi-threaded discovery and analysis run end to end:
filtering (including .gitignore), aggregation of findings and unreadable
files, and report persistence with overwrite protection.
"""

import json
import os
from pathlib import Path

import pytest

from memoguard.core.pipeline.engine import run_analysis

UNSTABLE = """
from typing import Callable
from reactpy import component, html, memo

@memo
@component
def Row(label: str, on_click: Callable[[], None]):
    return html.li(label)

@component
def App():
    return Row(label="a", on_click=lambda: None)
"""

STABLE = """
from typing import Callable
from reactpy import component, html, memo, use_callback

@memo
@component
def Row(label: str, on_click: Callable[[], None]):
    return html.li(label)

@component
def App():
    handle = use_callback(lambda: None, [])
    return Row(label="a", on_click=handle)
"""


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """A small project with a finding, a clean module, a broken one and ignored code."""
    root = tmp_path / "project"
    root.mkdir()

    (root / "views.py").write_text(UNSTABLE, encoding="utf-8")
    (root / "clean.py").write_text(STABLE, encoding="utf-8")
    (root / "broken.py").write_text("def broken(:\n", encoding="utf-8")
    (root / "README.md").write_text("# docs", encoding="utf-8")

    generated = root / "generated"
    generated.mkdir()
    (generated / "bundle.py").write_text(UNSTABLE, encoding="utf-8")
    (root / ".gitignore").write_text("generated/\n", encoding="utf-8")

    return root


def _config(base: dict, **overrides) -> dict:
    cfg = dict(base)
    cfg.update(overrides)
    return cfg


def test_run_analysis_aggregates_findings(sample_project: Path, mock_config_dict) -> None:
    result = run_analysis(_config(mock_config_dict, input_path=str(sample_project)))

    assert result.ok is True
    assert result.passed is False
    assert result.summary["discovered"] == 3
    assert result.files_analyzed == 2

    assert [(d.path, d.field) for d in result.diagnostics] == [("views.py", "on_click")]
    assert [e.rel_path for e in result.file_errors] == ["broken.py"]
    assert "Invalid syntax" in result.file_errors[0].error


def test_run_analysis_without_gitignore(sample_project: Path, mock_config_dict) -> None:
    cfg = _config(mock_config_dict, input_path=str(sample_project), respect_gitignore=False)
    result = run_analysis(cfg)

    paths = sorted({d.path for d in result.diagnostics})
    assert paths == [os.path.join("generated", "bundle.py"), "views.py"]


def test_run_analysis_single_file(sample_project: Path, mock_config_dict) -> None:
    result = run_analysis(_config(mock_config_dict, input_path=str(sample_project / "clean.py")))

    assert result.passed is True
    assert result.files_analyzed == 1
    assert result.diagnostics == []


def test_run_analysis_invalid_input(tmp_path: Path, mock_config_dict) -> None:
    result = run_analysis(_config(mock_config_dict, input_path=str(tmp_path / "nope")))

    assert result.ok is False
    assert "Invalid input path" in result.error


def test_run_analysis_writes_text_report(sample_project: Path, tmp_path: Path, mock_config_dict) -> None:
    report = tmp_path / "reports" / "memoguard.txt"
    cfg = _config(mock_config_dict, input_path=str(sample_project), report_path=str(report))

    result = run_analysis(cfg)

    assert result.report_path == str(report)
    content = report.read_text(encoding="utf-8")
    assert content.startswith("MEMOGUARD STABILITY REPORT:")
    assert "views.py:" in content
    assert "FILE: broken.py" in content
    assert "2 file(s) analyzed: 1 error(s), 0 warning(s), 1 file error(s)" in content


def test_run_analysis_writes_json_report(sample_project: Path, tmp_path: Path, mock_config_dict) -> None:
    report = tmp_path / "report.json"
    cfg = _config(
        mock_config_dict,
        input_path=str(sample_project),
        report_path=str(report),
        report_format="json",
    )

    run_analysis(cfg)

    data = json.loads(report.read_text(encoding="utf-8"))
    assert data["errors"] == 1
    assert data["diagnostics"][0]["site"] == "props"


def test_run_analysis_refuses_overwrite(sample_project: Path, tmp_path: Path, mock_config_dict) -> None:
    report = tmp_path / "report.txt"
    report.write_text("previous", encoding="utf-8")
    cfg = _config(mock_config_dict, input_path=str(sample_project), report_path=str(report))

    refused = run_analysis(cfg)
    assert refused.ok is False
    assert refused.summary["existing_files"] == [str(report)]
    assert report.read_text(encoding="utf-8") == "previous"

    replaced = run_analysis(cfg, overwrite=True)
    assert replaced.ok is True
    assert report.read_text(encoding="utf-8").startswith("MEMOGUARD")


def test_run_analysis_survives_deeply_nested_file(tmp_path: Path, mock_config_dict) -> None:
    root = tmp_path / "deep"
    root.mkdir()
    (root / "deep.py").write_text("x = " + " + ".join(["1"] * 3000) + "\n", encoding="utf-8")
    (root / "ok.py").write_text(STABLE, encoding="utf-8")

    result = run_analysis(_config(mock_config_dict, input_path=str(root)))

    assert result.ok is True
    assert result.files_analyzed == 1
    assert result.diagnostics == []
    assert [e.rel_path for e in result.file_errors] == ["deep.py"]
    assert "Could not analyze file" in result.file_errors[0].error
