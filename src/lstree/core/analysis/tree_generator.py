from __future__ import annotations

"""
Directory Tree Generator.

Folds the walker's depth-first entry stream into a TreeBuilder, closing
nodes whenever the reported depth decreases, and tallies directories,
files and symlinks along the way.
"""

import logging
from typing import Callable, List, Optional

from lstree.core.walker.walker import WalkError, WalkOptions, walk
from lstree.domain.config import TreeOptions
from lstree.domain.tree_models import EntryKind, TreeBuilder, TreeCounts, TreeReport
from lstree.infra.fs import read_link_text

logger = logging.getLogger(__name__)

ErrorSink = Callable[[str], None]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def generate_tree(options: TreeOptions, on_error: Optional[ErrorSink] = None) -> TreeReport:
    """
    Walk options.target_dir and build its tree and counters.

    Recoverable errors (unreadable directories, unreadable links, broken
    ignore files) are always recorded in the report; they are forwarded to
    on_error only when options.ignore_errors is False.

    Args:
        options: Run configuration.
        on_error: Callback receiving each error message as it happens.

    Returns:
        TreeReport: Root node, counts and collected errors.
    """
    logger.debug(f"Generating directory tree for: {options.target_dir}")

    builder = TreeBuilder(options.target_dir)
    counts = TreeCounts()
    errors: List[str] = []

    def report_error(message: str) -> None:
        errors.append(message)
        logger.debug(f"Walk error: {message}")
        if on_error is not None and not options.ignore_errors:
            on_error(message)

    current_depth = 1

    for item in walk(build_walk_options(options)):
        if isinstance(item, WalkError):
            report_error(item.message)
            continue

        if item.depth < current_depth:
            for _ in range(current_depth - item.depth):
                builder.end_child()
            current_depth = item.depth

        if item.kind is EntryKind.DIRECTORY:
            builder.begin_child(item.name, EntryKind.DIRECTORY)
            current_depth += 1
            counts.directories += 1

        elif item.kind is EntryKind.SYMLINK:
            try:
                target = read_link_text(item.path)
            except OSError as e:
                report_error(f"{item.path}: {e.strerror or e}")
                continue
            builder.add_empty_child(item.name, EntryKind.SYMLINK, link_target=target)
            counts.files += 1
            counts.symlinks += 1

        else:
            builder.add_empty_child(item.name, item.kind)
            counts.files += 1

    logger.debug(f"Tree generated: {counts.format_summary()}")
    return TreeReport(root=builder.build(), counts=counts, errors=errors)


def build_walk_options(options: TreeOptions) -> WalkOptions:
    """Project the run options onto the walker configuration."""
    return WalkOptions(
        root=options.target_dir,
        max_depth=options.max_depth,
        show_hidden=options.show_hidden,
        respect_ignore_files=options.respect_ignore_files,
        skip_stdout=options.skip_stdout,
    )
