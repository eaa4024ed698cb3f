from __future__ import annotations

"""
Core audit pipeline.

This module coordinates a complete reachability audit:
1. Validates configuration and paths.
2. Checks for an existing output document.
3. Builds the model repository for the configured source.
4. Runs the Role Orchestrator.
5. Renders the tree and collects traversal statistics.
6. Publishes the document (never on failure or dry runs).
"""

import logging
import os
import time
from typing import Any, Dict, List, Optional

from rolereach.core.analysis.tree_renderer import render_tree
from rolereach.core.pipeline.orchestrator import RoleOrchestrator
from rolereach.core.pipeline.validator import missing_required_fields, validate_config
from rolereach.core.pipeline.writer import write_document
from rolereach.core.services.stats import TraversalStats
from rolereach.domain.config import SOURCE_SNAPSHOT
from rolereach.domain.errors import ReachabilityError
from rolereach.domain.pipeline_models import (
    AuditResult,
    create_error_result,
    create_success_result,
)
from rolereach.infra.fs import normalize_path
from rolereach.infra.repository import build_repository

logger = logging.getLogger(__name__)


def run_audit(
        config: Optional[Dict[str, Any]],
        *,
        overwrite: bool = False,
        dry_run: bool = False,
        output_path: Optional[str] = None,
) -> AuditResult:
    """
    Execute the full reachability audit.

    Args:
        config: The configuration dictionary (raw or partial).
        overwrite: If True, replace an existing output document.
        dry_run: If True, traverse but do not write to disk.
        output_path: Optional override for the document path.

    Returns:
        AuditResult: Object containing status, tree, statistics and summary.
    """
    logger.info("Audit execution started.")
    started = time.monotonic()

    # -------------------------------------------------------------------------
    # 1) Config & Path Normalization
    # -------------------------------------------------------------------------
    cfg, warnings = validate_config(config, strict=False)

    if warnings:
        for warning in warnings:
            logger.warning(f"Configuration Warning: {warning}")

    cfg["output_path"] = normalize_path(output_path or cfg.get("output_path"), cfg["output_path"])

    missing = missing_required_fields(cfg)
    if missing:
        msg = f"Missing required settings for source '{cfg['source']}': {', '.join(missing)}"
        logger.error(msg)
        return create_error_result(msg, cfg)

    if cfg["source"] == SOURCE_SNAPSHOT:
        cfg["snapshot_path"] = normalize_path(cfg["snapshot_path"], os.getcwd())
        if not os.path.isfile(cfg["snapshot_path"]):
            msg = f"Snapshot file not found: {cfg['snapshot_path']}"
            logger.error(msg)
            return create_error_result(msg, cfg)

    # -------------------------------------------------------------------------
    # 2) Overwrite Check
    # -------------------------------------------------------------------------
    existing = os.path.exists(cfg["output_path"])
    if existing and not overwrite and not dry_run:
        msg = "Output document already exists and overwrite=False. Aborting."
        logger.warning(f"{msg} File: {cfg['output_path']}")
        return create_error_result(msg, cfg, summary_extra={"existing_output": cfg["output_path"]})

    # -------------------------------------------------------------------------
    # 3) Traversal
    # -------------------------------------------------------------------------
    stats = TraversalStats()
    repository = build_repository(cfg)
    try:
        orchestrator = RoleOrchestrator(
            repository,
            fetch_workers=cfg["fetch_workers"],
            role_workers=cfg["role_workers"],
            deadline_seconds=cfg["deadline_seconds"],
            strict_workflow_screens=cfg["strict_workflow_screens"],
            stats=stats,
        )
        root = orchestrator.run()
    except ReachabilityError as e:
        msg = f"Audit failure ({type(e).__name__}): {e}"
        logger.error(msg)
        return create_error_result(msg, cfg, stats=stats.snapshot())
    finally:
        repository.close()

    # -------------------------------------------------------------------------
    # 4) Rendering & Summary
    # -------------------------------------------------------------------------
    tree_lines: List[str] = []
    if cfg["print_tree"]:
        tree_lines = render_tree(root)

    summary = {
        "roles": [child.name for child in root.children],
        "nodes": sum(1 for _ in root.walk()) - 1,
        "max_depth": root.depth(),
        "unhandled": stats.unhandled(),
        "existing_output_before_run": existing,
        "dry_run": dry_run,
    }

    # -------------------------------------------------------------------------
    # 5) Publication
    # -------------------------------------------------------------------------
    written = False
    if dry_run:
        logger.info("Dry run: Skipping document publication.")
    else:
        try:
            write_document(root, cfg["output_path"])
            written = True
        except OSError as e:
            msg = f"Failed to write reachability document {cfg['output_path']}: {e}"
            logger.critical(msg)
            return create_error_result(msg, cfg, stats=stats.snapshot())

    stats.log_summary()
    summary["elapsed_seconds"] = round(time.monotonic() - started, 3)

    logger.info("Audit completed successfully.")
    return create_success_result(
        cfg, root, written,
        tree_lines=tree_lines,
        stats=stats.snapshot(),
        summary_extra=summary,
    )
