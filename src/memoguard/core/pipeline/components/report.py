from __future__ import annotations

"""
Report Rendering and Persistence.

Renders a completed analysis result as plain text or JSON and writes it to
disk. The text layout is a header, one block per finding and a closing
summary line.
"""

import json
import logging
import os
from typing import List

from memoguard.domain.analysis_models import AnalysisResult

logger = logging.getLogger(__name__)

_RULE = "=" * 80
_SEPARATOR = "-" * 80


def render_text(result: AnalysisResult) -> str:
    """
    Render the findings of a run as a plain-text report.

    Args:
        result: Completed analysis result.

    Returns:
        str: Report text, newline terminated.
    """
    lines: List[str] = [
        "MEMOGUARD STABILITY REPORT:",
        _RULE,
        f"INPUT: {result.input_path}",
        f"POLICY: {result.policy}",
        _RULE,
    ]

    for diag in result.diagnostics:
        lines.append(diag.format())
        lines.append(f"  expected: {diag.expected}")
        lines.append(f"  actual:   {diag.actual}")
        lines.append(_SEPARATOR)

    for err in result.file_errors:
        lines.append(f"FILE: {err.rel_path}")
        lines.append(f"ERROR: {err.error}")
        lines.append(_SEPARATOR)

    lines.append(summary_line(result))
    return "\n".join(lines) + "\n"


def render_json(result: AnalysisResult) -> str:
    return json.dumps(result.to_dict(), ensure_ascii=False, indent=2)


def summary_line(result: AnalysisResult) -> str:
    """One-line summary: files, errors, warnings and unreadable files."""
    return (
        f"{result.files_analyzed} file(s) analyzed: "
        f"{result.error_count} error(s), {result.warning_count} warning(s), "
        f"{len(result.file_errors)} file error(s)"
    )


def write_report(result: AnalysisResult, path: str, fmt: str = "text") -> str:
    """
    Persist the rendered report.

    Args:
        result: Completed analysis result.
        path: Destination file.
        fmt: 'text' or 'json'.

    Returns:
        str: The written path, or an empty string if the write failed.
    """
    content = render_json(result) if fmt == "json" else render_text(result)
    try:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        logger.error(f"Failed to persist report to '{path}': {e}")
        return ""

    logger.debug(f"Report written to {path}")
    return path
