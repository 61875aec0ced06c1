from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: argument parsing, logging bootstrap,
option resolution, tree generation and rendering of the tree plus its
summary line. Recoverable errors go to stderr; the exit status stays 0.
"""

import sys
from typing import List, Optional

from rich.console import Console
from rich.text import Text

from lstree.core.analysis.tree_generator import generate_tree
from lstree.core.analysis.tree_renderer import print_tree
from lstree.domain.config import get_default_options, merge_options, validate_options
from lstree.domain.tree_models import TreeReport
from lstree.infra.console import create_console
from lstree.infra.logging import LoggingConfig, configure_logging, get_logger
from lstree.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(
        argv: Optional[List[str]] = None,
        out: Optional[Console] = None,
        err: Optional[Console] = None,
) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Command line arguments. Defaults to sys.argv.
        out: Console for the tree, built from --color when omitted.
        err: Console for error messages, built from --color when omitted.

    Returns:
        int: Process exit code, 0 unless interrupted.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (stderr, optional rotating file)
    log_level = "DEBUG" if args.debug else "WARNING"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    # 3. Option resolution
    overrides = cli_args.args_to_overrides(args)
    overrides["skip_stdout"] = True
    raw_opts = merge_options(get_default_options(), overrides)
    opts, warnings = validate_options(raw_opts)
    for w in warnings:
        logger.warning(f"Configuration constraint: {w}")

    if out is None:
        out = create_console(opts.color)
    if err is None:
        err = create_console(opts.color, stderr=True)

    # 4. Walk and fold
    logger.debug(f"Listing {opts.target_dir} with {opts}")
    try:
        report = generate_tree(opts, on_error=lambda msg: _print_error(err, msg))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return 130

    # 5. Rendering
    _print_report(report, out)
    return 0

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _print_report(report: TreeReport, out: Console) -> None:
    """Print the tree, a blank line and the summary sentence."""
    print_tree(report.root, out)
    out.print()
    out.print(report.counts.format_summary(), soft_wrap=True, highlight=False, markup=False)


def _print_error(err: Console, message: str) -> None:
    err.print(Text(message), soft_wrap=True, highlight=False)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
