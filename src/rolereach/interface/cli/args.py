from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
argparse namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict

from rolereach.domain.config import SOURCE_REMOTE, SOURCE_SNAPSHOT
from rolereach.domain.constants import APP_VERSION
from rolereach.infra.logging import get_default_log_path

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the rolereach CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="rolereach",
        description="Audit which screens and workflows each user role can reach.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")

    # --- Configuration Sources ---
    p.add_argument(
        "-c", "--config",
        dest="config_path",
        default=None,
        help="Read settings from this JSON file instead of the user config.",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore any saved configuration.",
    )

    # --- Model Source ---
    p.add_argument(
        "--snapshot",
        dest="snapshot_path",
        default=None,
        help="Audit an offline JSON export of the application model.",
    )
    p.add_argument(
        "--api-url",
        dest="api_url",
        default=None,
        help="Base URL of the model REST service (selects the remote source).",
    )
    p.add_argument("--project-id", dest="project_id", default=None, help="Project identifier.")
    p.add_argument("--username", dest="username", default=None, help="Model service user.")
    p.add_argument("--api-key", dest="api_key", default=None, help="Model service API key.")
    p.add_argument(
        "--revision",
        dest="revision",
        type=int,
        default=None,
        help="Model revision to audit (-1 = latest).",
    )
    p.add_argument("--branch", dest="branch", default=None, help="Branch to audit (default: mainline).")

    # --- Output ---
    p.add_argument(
        "-o", "--output",
        dest="output_path",
        default=None,
        help="Destination of the reachability JSON document.",
    )
    p.add_argument(
        "--print-tree",
        action="store_true",
        help="Print the tree to the terminal.",
    )

    # --- Traversal Tuning ---
    p.add_argument(
        "--deadline",
        dest="deadline_seconds",
        type=float,
        default=None,
        help="Abort the audit after this many seconds.",
    )
    p.add_argument(
        "--fetch-workers",
        dest="fetch_workers",
        type=int,
        default=None,
        help="Concurrent model fetches.",
    )
    p.add_argument(
        "--role-workers",
        dest="role_workers",
        type=int,
        default=None,
        help="Roles audited in parallel.",
    )
    p.add_argument(
        "--strict-workflow-screens",
        action="store_true",
        help="Apply the role check to screens shown by workflows too.",
    )

    # --- Runtime Constraints and Safety ---
    p.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace an existing output document.",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Traverse the model without writing the document.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective configuration (without the API key).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        nargs="?",
        const=get_default_log_path(),
        default=None,
        help="Also log to a rotating file (default location if no path is given).",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a domain configuration dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["snapshot_path"] = args.snapshot_path
    overrides["api_url"] = args.api_url
    overrides["project_id"] = args.project_id
    overrides["username"] = args.username
    overrides["api_key"] = args.api_key
    overrides["revision"] = args.revision
    overrides["branch"] = args.branch
    overrides["output_path"] = args.output_path
    overrides["deadline_seconds"] = args.deadline_seconds
    overrides["fetch_workers"] = args.fetch_workers
    overrides["role_workers"] = args.role_workers

    # Source selection follows the most specific flag
    if args.snapshot_path:
        overrides["source"] = SOURCE_SNAPSHOT
    elif args.api_url:
        overrides["source"] = SOURCE_REMOTE

    if args.print_tree:
        overrides["print_tree"] = True
    if args.strict_workflow_screens:
        overrides["strict_workflow_screens"] = True

    return overrides
