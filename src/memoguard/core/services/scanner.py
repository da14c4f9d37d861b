from __future__ import annotations

"""
Source Discovery Service.

Resolves the analysis target (a single file or a project directory),
applies the filtering rules (including .gitignore support) and yields the
Python sources to analyze.
"""

import logging
import os
import re
from typing import Dict, Iterable, List, Optional, Tuple

from memoguard.core.pipeline.components.filters import (
    compile_patterns,
    default_exclude_patterns,
    default_include_patterns,
    has_source_extension,
    load_gitignore_patterns,
    matches_any,
    matches_include,
)

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API (DISCOVERY SERVICES)
# ==============================================================================

def yield_source_files(
        input_path: str,
        extensions: List[str],
        include_rx: List[re.Pattern],
        exclude_rx: List[re.Pattern],
) -> Iterable[Dict[str, str]]:
    """
    Yield the source files that satisfy the filtering criteria.

    A file given directly as input is always analyzed, whatever its name.
    Directories are walked in sorted order, pruning excluded directories
    before descending into them.

    Args:
        input_path: File or directory to analyze.
        extensions: Whitelist of allowed file extensions.
        include_rx: Compiled regex patterns for inclusion.
        exclude_rx: Compiled regex patterns for exclusion.

    Yields:
        Dict[str, str]: Metadata for each file found:
                        - file_path: Absolute path.
                        - rel_path: Path relative to the input root.
                        - file_name: Base filename.
    """
    input_path_abs = os.path.abspath(input_path)

    if os.path.isfile(input_path_abs):
        file_name = os.path.basename(input_path_abs)
        yield {"file_path": input_path_abs, "rel_path": file_name, "file_name": file_name}
        return

    for root, dirs, files in os.walk(input_path_abs):
        # In-place directory pruning to optimize traversal
        dirs[:] = [d for d in dirs if not matches_any(d, exclude_rx)]
        dirs.sort()
        files.sort()

        for file_name in files:
            if matches_any(file_name, exclude_rx):
                continue
            if not matches_include(file_name, include_rx):
                continue
            if not has_source_extension(file_name, extensions):
                continue

            file_path = os.path.join(root, file_name)
            yield {
                "file_path": file_path,
                "rel_path": os.path.relpath(file_path, input_path_abs),
                "file_name": file_name,
            }


def prepare_filtering_rules(
        input_path: str,
        include_patterns: Optional[List[str]],
        exclude_patterns: Optional[List[str]],
        respect_gitignore: bool
) -> Tuple[List[re.Pattern], List[re.Pattern]]:
    """
    Compile and aggregate all patterns into actionable regex objects.

    Args:
        input_path: File or directory being analyzed.
        include_patterns: Optional list of raw inclusion regexes.
        exclude_patterns: Optional list of raw exclusion regexes.
        respect_gitignore: Whether to parse the root .gitignore file.

    Returns:
        Tuple[List[re.Pattern], List[re.Pattern]]: (Include Patterns, Exclude Patterns).
    """
    root = os.path.abspath(input_path)
    if os.path.isfile(root):
        root = os.path.dirname(root)

    final_includes = include_patterns if include_patterns is not None else default_include_patterns()
    final_exclusions = list(exclude_patterns) if exclude_patterns is not None else default_exclude_patterns()

    if respect_gitignore:
        git_patterns = load_gitignore_patterns(root)
        if git_patterns:
            logger.debug(f"Loaded {len(git_patterns)} patterns from .gitignore")
            final_exclusions.extend(git_patterns)

    return compile_patterns(final_includes), compile_patterns(final_exclusions)
