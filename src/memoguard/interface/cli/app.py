from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, merging of configuration
sources (defaults, memoguard.json and CLI overrides), the analysis run and
result rendering. Findings go to stdout; logs go to stderr.

Exit codes:
    0   analysis passed
    1   error-severity findings, unreadable files or run failure
    2   input path does not exist
    130 interrupted
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from memoguard.core.pipeline.components.report import summary_line
from memoguard.core.pipeline.engine import run_analysis
from memoguard.core.pipeline.stages.validator import validate_config
from memoguard.domain.analysis_models import AnalysisResult
from memoguard.domain.config import get_default_config, load_config, save_config
from memoguard.domain.errors import ConfigError
from memoguard.infra.logging import LoggingConfig, configure_logging, get_logger
from memoguard.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_MISSING_INPUT = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap
    configure_logging(LoggingConfig.for_cli(debug=args.debug, log_file=args.log_file), force=True)
    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Resolve base configuration
    if args.use_defaults:
        base_conf = get_default_config()
    else:
        try:
            base_conf = load_config(args.config_path, strict=bool(args.config_path))
        except ConfigError as e:
            logger.error(str(e))
            print(f"ERROR: {e}", file=sys.stderr)
            return EXIT_FINDINGS

    # 4. Map and merge command-line overrides
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))

    # 5. Schema validation and normalization
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    if args.save_config_path:
        if not save_config(clean_conf, args.save_config_path):
            print(f"ERROR: could not write {args.save_config_path}", file=sys.stderr)
            return EXIT_FINDINGS
        print(f"Configuration saved to {args.save_config_path}")
        return EXIT_OK

    # 6. Pre-flight input verification
    input_path = clean_conf.get("input_path", "")
    if not os.path.exists(input_path):
        msg = f"Input path does not exist: {input_path}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_MISSING_INPUT

    # 7. Analysis phase
    logger.info(f"Analyzing: {input_path}")
    try:
        result = run_analysis(clean_conf, overwrite=bool(args.overwrite))
    except KeyboardInterrupt:
        logger.warning("Analysis interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED

    # 8. Output rendering phase
    if args.json_output:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return EXIT_OK if result.passed else EXIT_FINDINGS

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

_MERGEABLE_KEYS = (
    "input_path", "policy", "unresolved",
    "extensions", "include_patterns", "exclude_patterns", "respect_gitignore",
    "report_path", "report_format",
)


def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge of the known, explicitly set override keys."""
    out = dict(base)
    for k in _MERGEABLE_KEYS:
        if overrides.get(k) is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: AnalysisResult) -> None:
    """Print findings as 'path:line:col: severity[code] message' lines plus a summary."""
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    for diag in result.diagnostics:
        print(diag.format())
    for err in result.file_errors:
        print(f"{err.rel_path}: error[file] {err.error}")

    print(summary_line(result))
    if result.report_path:
        print(f"Report: {result.report_path}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
