from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
argparse namespace into TreeOptions overrides.
"""

import argparse
from typing import Any, Dict

from lstree.domain.constants import (
    APP_NAME,
    APP_VERSION,
    COLOR_AUTO,
    COLOR_CHOICES,
    DEFAULT_TARGET_DIR,
)

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the lstree CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog=APP_NAME,
        description="List directory contents as a tree, respecting ignore files.",
    )

    p.add_argument(
        "dir",
        nargs="?",
        default=DEFAULT_TARGET_DIR,
        help="Directory to display (default: current directory).",
    )

    # --- Traversal Scope ---
    p.add_argument(
        "-d", "--depth",
        dest="max_depth",
        type=int,
        default=None,
        metavar="N",
        help="Maximum depth to recurse into directories.",
    )
    p.add_argument(
        "-H", "--hidden",
        action="store_true",
        help="Display hidden files.",
    )
    p.add_argument(
        "-n", "--no-ignore",
        action="store_true",
        help="Do not respect .ignore, .gitignore and global git ignore files.",
    )

    # --- Error Reporting ---
    p.add_argument(
        "-i", "--ignore-errors",
        action="store_true",
        help="Do not print traversal errors.",
    )

    # --- Output and Diagnostics ---
    p.add_argument(
        "--color",
        choices=COLOR_CHOICES,
        default=COLOR_AUTO,
        help="Colorize the output (default: auto).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        metavar="PATH",
        help="Also write diagnostic logs to a rotating file.",
    )
    p.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into TreeOptions overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Values keyed by TreeOptions field name.
    """
    overrides: Dict[str, Any] = {}

    overrides["target_dir"] = args.dir
    overrides["max_depth"] = args.max_depth
    overrides["color"] = args.color

    if args.hidden:
        overrides["show_hidden"] = True
    if args.ignore_errors:
        overrides["ignore_errors"] = True
    if args.no_ignore:
        overrides["respect_ignore_files"] = False

    return overrides
