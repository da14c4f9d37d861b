from __future__ import annotations

"""
Analysis Run Data Models.

Defines the result object and factory functions used to communicate an
analysis run between the pipeline engine and the interface layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from memoguard.domain.diagnostics import Diagnostic
from memoguard.domain.errors import FileError

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AnalysisResult:
    """
    Unified result of an analysis run.

    Attributes:
        ok: The run completed (independent of findings).
        error: Descriptive message in case of failure.
        input_path: Normalized file or directory analyzed.
        policy: Transform policy in effect.
        files_analyzed: Number of files parsed and checked.
        diagnostics: Findings sorted by path, line and column.
        file_errors: Files that could not be read or parsed.
        report_path: Path of the persisted report, if any.
        summary: Technical counters for rendering.
    """
    ok: bool
    error: str
    input_path: str
    policy: str

    files_analyzed: int = 0
    diagnostics: List[Diagnostic] = field(default_factory=list)
    file_errors: List[FileError] = field(default_factory=list)
    report_path: str = ""

    summary: Dict[str, Any] = field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self.diagnostics if not d.is_error)

    @property
    def passed(self) -> bool:
        """True when the run completed without error-severity findings."""
        return self.ok and self.error_count == 0 and not self.file_errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "passed": self.passed,
            "error": self.error,
            "input_path": self.input_path,
            "policy": self.policy,
            "files_analyzed": self.files_analyzed,
            "errors": self.error_count,
            "warnings": self.warning_count,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "file_errors": [{"rel_path": e.rel_path, "error": e.error} for e in self.file_errors],
            "report_path": self.report_path,
            "summary": dict(self.summary),
        }

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        cfg: Dict[str, Any],
        input_path: str,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> AnalysisResult:
    """
    Create a failed analysis result instance.

    Args:
        error: Detailed error description.
        cfg: The configuration used during the failed run.
        input_path: The target input path.
        summary_extra: Additional metadata for the summary payload.

    Returns:
        AnalysisResult: An immutable error result object.
    """
    return AnalysisResult(
        ok=False,
        error=error,
        input_path=input_path,
        policy=str(cfg.get("policy", "")),
        summary=summary_extra or {},
    )


def create_success_result(
        cfg: Dict[str, Any],
        input_path: str,
        files_analyzed: int,
        diagnostics: List[Diagnostic],
        file_errors: Optional[List[FileError]] = None,
        report_path: str = "",
        summary_extra: Optional[Dict[str, Any]] = None,
) -> AnalysisResult:
    """
    Create a completed analysis result instance.

    Diagnostics are sorted so output is deterministic regardless of the
    order in which worker threads finished.
    """
    ordered = sorted(diagnostics, key=lambda d: (d.path, d.line, d.column, d.field))
    errors = sorted(file_errors or [], key=lambda e: e.rel_path)
    return AnalysisResult(
        ok=True,
        error="",
        input_path=input_path,
        policy=str(cfg.get("policy", "")),
        files_analyzed=files_analyzed,
        diagnostics=ordered,
        file_errors=errors,
        report_path=report_path,
        summary=summary_extra or {},
    )
