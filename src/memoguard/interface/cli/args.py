from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides understood by the validator.
"""

import argparse
from typing import Any, Dict, List, Optional

from memoguard.domain.config import POLICIES, REPORT_FORMATS, UNRESOLVED_MODES
from memoguard.infra.logging import get_default_log_path

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the memoguard CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="memoguard",
        description=(
            "Verify that values passed to render-skip (memo) components and hook "
            "dependency lists are reference-stable."
        ),
    )

    # --- Input and configuration ---
    p.add_argument(
        "-i", "--input",
        dest="input_path",
        default=None,
        help="File or directory to analyze (default: current directory).",
    )
    p.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to a memoguard.json file (default: ./memoguard.json if present).",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore any configuration file and start from built-in defaults.",
    )

    # --- Rules ---
    p.add_argument(
        "--policy",
        choices=POLICIES,
        default=None,
        help="Branding policy for stabilized props.",
    )
    p.add_argument(
        "--unresolved",
        choices=UNRESOLVED_MODES,
        default=None,
        help="How to report values whose type cannot be inferred.",
    )

    # --- Discovery filters ---
    p.add_argument("--ext", dest="extensions", default=None, help="Comma-separated extensions.")
    p.add_argument("--include", dest="include_patterns", default=None, help="Comma-separated include regexes.")
    p.add_argument("--exclude", dest="exclude_patterns", default=None, help="Comma-separated exclude regexes.")
    p.add_argument(
        "--no-gitignore",
        action="store_true",
        help="Ignore local .gitignore rules.",
    )

    # --- Reporting ---
    p.add_argument("--report", dest="report_path", default=None, help="Write a report file.")
    p.add_argument("--report-format", dest="report_format", choices=REPORT_FORMATS, default=None)
    p.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace an existing report file.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the result as JSON instead of human-readable lines.",
    )

    # --- Configuration and diagnostic tools ---
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--save-config",
        dest="save_config_path",
        default=None,
        help="Write the effective configuration to a file and exit.",
    )
    p.add_argument(
        "--log-file",
        nargs="?",
        const=get_default_log_path(),
        default=None,
        help="Also log to a rotating file (default location when no path is given).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Unset options map to None and leave the base configuration untouched.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {
        "input_path": args.input_path,
        "policy": args.policy,
        "unresolved": args.unresolved,
        "report_path": args.report_path,
        "report_format": args.report_format,
        "extensions": _split_csv(args.extensions),
        "include_patterns": _split_csv(args.include_patterns),
        "exclude_patterns": _split_csv(args.exclude_patterns),
    }

    if args.no_gitignore:
        overrides["respect_gitignore"] = False

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """Convert a comma-separated string into a list of sanitized strings."""
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
