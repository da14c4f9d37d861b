from __future__ import annotations

"""
Diagnostic Domain Models.

Located findings emitted by the analyzer. A diagnostic always names the
offending field or position and carries the expected-vs-actual types.
"""

from dataclasses import dataclass
from typing import Any, Dict

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

SEVERITIES = (SEVERITY_ERROR, SEVERITY_WARNING)


@dataclass(frozen=True)
class Diagnostic:
    """
    A single compile-time finding.

    Attributes:
        path: File path (relative to the analysis root when known).
        line: 1-based line of the offending expression.
        column: 1-based column of the offending expression.
        code: 'schema-mismatch' or 'unresolved'.
        severity: 'error' or 'warning'.
        site: Where the value flows: 'props', 'dependency-list', 'comparator',
              'callback', 'assignment' or 'argument'.
        field: Offending field name or dependency position.
        expected: Rendered expected type.
        actual: Rendered actual type.
        message: Human readable description.
    """
    path: str
    line: int
    column: int
    code: str
    severity: str
    site: str
    field: str
    expected: str
    actual: str
    message: str

    @property
    def is_error(self) -> bool:
        return self.severity == SEVERITY_ERROR

    def format(self) -> str:
        """Render in the conventional 'path:line:col: severity[code] message' form."""
        return f"{self.path}:{self.line}:{self.column}: {self.severity}[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "code": self.code,
            "severity": self.severity,
            "site": self.site,
            "field": self.field,
            "expected": self.expected,
            "actual": self.actual,
            "message": self.message,
        }
