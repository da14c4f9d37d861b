from __future__ import annotations

"""
Domain Error Models.

Exceptions raised by the stability engine and configuration layer, plus
the DTO used to report files that could not be analyzed.
"""

from dataclasses import dataclass

# -----------------------------------------------------------------------------
# EXCEPTIONS
# -----------------------------------------------------------------------------

class MemoguardError(Exception):
    """Base class for all package errors."""


class ContractViolation(MemoguardError):
    """
    A stabilizing constructor was given an argument outside its contract.

    Attributes:
        argument: Name of the offending argument.
        expected: Rendered expected type.
        actual: Rendered actual type.
    """

    def __init__(self, argument: str, expected: str, actual: str) -> None:
        self.argument = argument
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Argument '{argument}': type '{actual}' is not assignable to type '{expected}'"
        )


class ConfigError(MemoguardError):
    """Configuration could not be loaded or validated in strict mode."""


# -----------------------------------------------------------------------------
# ERROR TRACKING MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileError:
    """
    Encapsulates a file that could not be read or parsed.

    Attributes:
        rel_path: File path identifier relative to the analysis root.
        error: Descriptive exception or error message.
    """
    rel_path: str
    error: str
