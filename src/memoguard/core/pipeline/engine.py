from __future__ import annotations

"""
Core orchestration pipeline.

Coordinates an analysis run:
1. Validates configuration and resolves the input path.
2. Checks the report destination for overwrite conflicts.
3. Discovers Python sources with the configured filters.
4. Analyzes files in parallel worker threads.
5. Aggregates findings and persists the optional report.
"""

import dataclasses
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from memoguard.core.analysis.checker import analyze_file
from memoguard.core.pipeline.components.report import write_report
from memoguard.core.pipeline.stages.validator import validate_config
from memoguard.core.services.scanner import prepare_filtering_rules, yield_source_files
from memoguard.domain.analysis_models import (
    AnalysisResult,
    create_error_result,
    create_success_result,
)
from memoguard.domain.diagnostics import Diagnostic
from memoguard.domain.errors import FileError
from memoguard.infra.fs import normalize_path, safe_mkdir

logger = logging.getLogger(__name__)


def run_analysis(
        config: Optional[Dict[str, Any]],
        *,
        overwrite: bool = False,
) -> AnalysisResult:
    """
    Execute a full analysis run.

    Args:
        config: The configuration dictionary (raw or partial).
        overwrite: If True, replace an existing report file.

    Returns:
        AnalysisResult: Status, findings and counters of the run.
    """
    logger.info("Analysis started.")

    # -------------------------------------------------------------------------
    # 1) Config & Path Normalization
    # -------------------------------------------------------------------------
    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    base_path = normalize_path(cfg.get("input_path", ""), os.getcwd())
    if not os.path.exists(base_path):
        msg = f"Invalid input path: {base_path}"
        logger.error(msg)
        return create_error_result(msg, cfg, base_path)

    # -------------------------------------------------------------------------
    # 2) Overwrite Check
    # -------------------------------------------------------------------------
    report_path = ""
    if cfg["report_path"]:
        report_path = normalize_path(cfg["report_path"], os.getcwd())
        if os.path.exists(report_path) and not overwrite:
            msg = "Existing report detected and overwrite=False. Aborting."
            logger.warning(f"{msg} File: {report_path}")
            return create_error_result(
                msg, cfg, base_path, summary_extra={"existing_files": [report_path]}
            )

    # -------------------------------------------------------------------------
    # 3) Discovery
    # -------------------------------------------------------------------------
    include_rx, exclude_rx = prepare_filtering_rules(
        base_path,
        cfg["include_patterns"],
        cfg["exclude_patterns"],
        bool(cfg["respect_gitignore"]),
    )
    files = list(yield_source_files(base_path, cfg["extensions"], include_rx, exclude_rx))
    logger.debug(f"Discovered {len(files)} source file(s) under {base_path}")

    # -------------------------------------------------------------------------
    # 4) Parallel Analysis
    # -------------------------------------------------------------------------
    diagnostics: List[Diagnostic] = []
    file_errors: List[FileError] = []

    with ThreadPoolExecutor(max_workers=cfg["max_workers"], thread_name_prefix="AnalysisWorker") as executor:
        futures = [
            executor.submit(analyze_file, f["file_path"], f["rel_path"], cfg)
            for f in files
        ]
        for future in futures:
            found, error = future.result()
            diagnostics.extend(found)
            if error is not None:
                logger.warning(f"Skipped {error.rel_path}: {error.error}")
                file_errors.append(error)

    result = create_success_result(
        cfg,
        base_path,
        files_analyzed=len(files) - len(file_errors),
        diagnostics=diagnostics,
        file_errors=file_errors,
        summary_extra={
            "discovered": len(files),
            "unresolved_mode": cfg["unresolved"],
        },
    )

    # -------------------------------------------------------------------------
    # 5) Report Persistence
    # -------------------------------------------------------------------------
    if report_path:
        ok, err = safe_mkdir(os.path.dirname(report_path))
        if not ok:
            msg = f"Failed to create report directory for {report_path}: {err}"
            logger.critical(msg)
            return create_error_result(msg, cfg, base_path)

        written = write_report(result, report_path, cfg["report_format"])
        if not written:
            return create_error_result(f"Failed to write report: {report_path}", cfg, base_path)
        result = dataclasses.replace(result, report_path=written)

    logger.info(
        f"Analysis finished: {result.files_analyzed} file(s), "
        f"{result.error_count} error(s), {result.warning_count} warning(s)."
    )
    return result
