from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: initialization of logging, loading and
merging of configuration sources (defaults, persistent storage and CLI
overrides), audit execution and result rendering.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from rolereach.core.pipeline.engine import run_audit
from rolereach.core.pipeline.validator import missing_required_fields, validate_config
from rolereach.domain.config import SOURCE_SNAPSHOT, get_default_config, load_config, save_config
from rolereach.domain.pipeline_models import AuditResult
from rolereach.infra.fs import normalize_path
from rolereach.infra.logging import LoggingConfig, configure_logging, get_logger
from rolereach.interface.cli import args as cli_args

logger = get_logger(__name__)

# Keys the command line may override
_OVERRIDABLE_KEYS = [
    "source", "snapshot_path", "api_url", "project_id", "username", "api_key",
    "revision", "branch", "output_path", "deadline_seconds", "fetch_workers",
    "role_workers", "print_tree", "strict_workflow_screens",
]

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, 1 on audit failure, 2 on invalid input,
             130 when interrupted.
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
    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Resolve base configuration
    if args.use_defaults:
        base_conf = get_default_config()
    else:
        base_conf = load_config(args.config_path)

    # 4. Map and merge command-line overrides
    overrides = cli_args.args_to_overrides(args)
    raw_conf = _merge_config(base_conf, overrides)

    # 5. Schema validation and normalization
    clean_conf, warnings = validate_config(raw_conf, strict=False)

    if warnings:
        for w in warnings:
            logger.warning(f"Configuration Constraint: {w}")

    if args.save_config:
        save_config(clean_conf, args.config_path)

    if args.dump_config:
        print(json.dumps(_redact(clean_conf), ensure_ascii=False, indent=2))
        return 0

    # 6. Pre-flight input verification
    error = _preflight(clean_conf, overwrite=bool(args.overwrite), dry_run=bool(args.dry_run))
    if error:
        logger.error(error)
        print(f"ERROR: {error}", file=sys.stderr)
        return 2

    # 7. Audit execution phase
    try:
        result = run_audit(
            clean_conf,
            overwrite=bool(args.overwrite),
            dry_run=bool(args.dry_run),
        )
    except KeyboardInterrupt:
        msg = "Audit interrupted by user."
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return 130

    # 8. Output rendering phase
    if args.json_output:
        print(json.dumps(_result_to_dict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return 0 if result.ok else 1

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow merge of override values into the base configuration.

    Only known keys with a value are merged.
    """
    out = dict(base)
    for k in _OVERRIDABLE_KEYS:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out


def _redact(cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(cfg)
    if out.get("api_key"):
        out["api_key"] = "***"
    return out


def _preflight(cfg: Dict[str, Any], *, overwrite: bool, dry_run: bool) -> Optional[str]:
    """Return a message describing invalid input, or None."""
    missing = missing_required_fields(cfg)
    if missing:
        return f"Missing required settings for source '{cfg['source']}': {', '.join(missing)}"

    if cfg["source"] == SOURCE_SNAPSHOT:
        snapshot = normalize_path(cfg["snapshot_path"], os.getcwd())
        if not os.path.isfile(snapshot):
            return f"Snapshot file does not exist: {snapshot}"

    output = normalize_path(cfg["output_path"], os.getcwd())
    if os.path.exists(output) and not overwrite and not dry_run:
        return f"Output file already exists: {output} (use --overwrite)"

    return None

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _result_to_dict(result: AuditResult) -> Dict[str, Any]:
    return {
        "ok": result.ok,
        "error": result.error,
        "source": result.source,
        "output_path": result.output_path,
        "written": result.written,
        "stats": result.stats,
        "summary": result.summary,
        "tree": result.tree.to_dict() if result.tree is not None else None,
    }


def _print_human_summary(result: AuditResult) -> None:
    """
    Format and print the audit result to the standard output.

    Args:
        result: The audit result to render.
    """
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    summary = result.summary

    if result.tree_lines:
        print("\n".join(result.tree_lines))
        print()

    print("Audit completed successfully.")
    if summary.get("dry_run"):
        print(f"Dry run: document not written (target: {result.output_path})")
    elif result.written:
        print(f"Reachability document: {result.output_path}")

    roles = summary.get("roles", [])
    print(f"User roles: {len(roles)}")
    print(f"Tree nodes: {summary.get('nodes', 0)} (max depth {summary.get('max_depth', 0)})")

    unhandled = summary.get("unhandled", {})
    if unhandled:
        print("Unhandled actions:")
        for reason, count in sorted(unhandled.items()):
            print(f"  - {reason}: {count}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
