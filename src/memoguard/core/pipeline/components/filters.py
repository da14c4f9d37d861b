from __future__ import annotations

"""
File Filtering Engine.

Implements regex-based inclusion/exclusion logic for source discovery and
translates .gitignore glob rules into equivalent regexes.
"""

import fnmatch
import logging
import os
import re
from typing import List

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# CONFIGURATION DEFAULTS
# -----------------------------------------------------------------------------

def default_extensions() -> List[str]:
    """
    Get the default list of analyzed file extensions.

    Returns:
        List[str]: Python source extensions.
    """
    return [".py"]


def default_include_patterns() -> List[str]:
    return [".*"]


def default_exclude_patterns() -> List[str]:
    """
    Get the system-level exclusion patterns.

    Skips compiled artifacts, virtual environments, build output and
    hidden directories. __init__.py files are analyzed since packages often
    declare components there.

    Returns:
        List[str]: List of regex patterns for common exclusions.
    """
    return [
        r".*\.pyc$",
        r"^(__pycache__|\.git|\.idea|\.vscode|\.venv|venv|node_modules|build|dist)$",
        r"^\.",
    ]


# -----------------------------------------------------------------------------
# PATTERN COMPILATION AND MATCHING
# -----------------------------------------------------------------------------

def compile_patterns(patterns: List[str]) -> List[re.Pattern]:
    """
    Transform raw regex strings into compiled Pattern objects.

    Malformed regex strings are discarded with a warning.

    Args:
        patterns: List of raw regex strings.

    Returns:
        List[re.Pattern]: Compiled regex objects.
    """
    compiled: List[re.Pattern] = []
    for p in patterns:
        try:
            compiled.append(re.compile(p))
        except re.error as e:
            logger.warning(f"Ignoring invalid pattern '{p}': {e}")
    return compiled


def matches_any(name: str, compiled_patterns: List[re.Pattern]) -> bool:
    """True if the name matches at least one compiled pattern."""
    return any(rx.search(name) for rx in compiled_patterns)


def matches_include(name: str, include_patterns: List[re.Pattern]) -> bool:
    """
    Verify if a name satisfies the inclusion whitelist.

    Returns:
        bool: True if matched, False if the list is empty or no match occurs.
    """
    if not include_patterns:
        return False
    return any(rx.search(name) for rx in include_patterns)


def has_source_extension(file_name: str, extensions: List[str]) -> bool:
    _, ext = os.path.splitext(file_name)
    return ext in extensions or file_name in extensions


# -----------------------------------------------------------------------------
# GITIGNORE INTEGRATION
# -----------------------------------------------------------------------------

def load_gitignore_patterns(root_path: str) -> List[str]:
    """
    Parse a .gitignore file and translate its glob rules into Python regexes.

    Negations (!pattern) are not supported and are skipped.

    Args:
        root_path: Directory containing the .gitignore file.

    Returns:
        List[str]: List of equivalent regex strings.
    """
    gitignore_path = os.path.join(root_path, ".gitignore")
    if not os.path.exists(gitignore_path):
        return []

    regex_patterns: List[str] = []
    try:
        with open(gitignore_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#") or line.startswith("!"):
                    continue

                regex = _gitignore_to_regex(line)
                if regex:
                    regex_patterns.append(regex)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read {gitignore_path}: {e}")

    return regex_patterns


def _gitignore_to_regex(glob_pattern: str) -> str:
    """
    Translate a gitignore/shell glob to a regex matched against bare names.

    Args:
        glob_pattern: Raw glob pattern from .gitignore.

    Returns:
        str: Python regex string, or "" when the pattern is empty.
    """
    pattern = glob_pattern.rstrip("/").lstrip("/")
    if not pattern:
        return ""
    return fnmatch.translate(pattern)
