from __future__ import annotations

"""
Filesystem Walker.

Performs a depth-first, name-sorted traversal of a directory without
following symlinks. Applies ignore-file rules, hidden-entry filtering and
a depth limit, and reports unreadable directories as error values instead
of aborting the walk.
"""

import logging
import os
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union

from lstree.core.walker.ignore_rules import IgnoreScope, MatchResult
from lstree.domain.tree_models import EntryKind
from lstree.infra.fs import (
    FileIdentity,
    classify_entry,
    file_identity,
    is_hidden,
    stdout_file_identity,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# WALK MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class WalkOptions:
    """
    Traversal configuration.

    Attributes:
        root: Directory to walk, as given by the caller.
        max_depth: Deepest level yielded (children of root are depth 1).
        show_hidden: Yield hidden entries as well.
        respect_ignore_files: Apply .ignore, .gitignore and global excludes
            rules. The repository's .git/info/exclude applies regardless.
        skip_stdout: Leave out the regular file stdout is redirected into.
    """
    root: str = "."
    max_depth: Optional[int] = None
    show_hidden: bool = False
    respect_ignore_files: bool = True
    skip_stdout: bool = False


@dataclass(frozen=True)
class WalkEntry:
    """
    A traversed filesystem entry.

    Attributes:
        path: Entry path built from the walk root as given.
        name: Base name of the entry.
        depth: Nesting level, 1 for direct children of the root.
        kind: lstat-based classification.
    """
    path: str
    name: str
    depth: int
    kind: EntryKind

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


@dataclass(frozen=True)
class WalkError:
    """
    A recoverable traversal failure.

    Attributes:
        path: Path the failure relates to.
        message: Human readable description.
    """
    path: str
    message: str

    def __str__(self) -> str:
        return self.message


WalkItem = Union[WalkEntry, WalkError]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def walk(options: WalkOptions) -> Iterator[WalkItem]:
    """
    Traverse options.root and yield its descendants in sorted pre-order.

    The root itself is never yielded. Errors are yielded in place, right
    after the entry they relate to, and the walk carries on.

    Args:
        options: Traversal configuration.

    Yields:
        WalkItem: WalkEntry for each visible entry, WalkError for each failure.
    """
    root = options.root
    root_abs = os.path.abspath(root)

    if not os.path.isdir(root_abs):
        if not os.path.lexists(root_abs):
            yield WalkError(root, f"{root}: No such file or directory")
        else:
            logger.debug(f"Walk root '{root}' is not a directory; nothing to list.")
        return

    if options.max_depth == 0:
        return

    skip_identity = stdout_file_identity() if options.skip_stdout else None

    scope_errors: List[str] = []
    scope = IgnoreScope.for_root(root_abs, scope_errors, use_ignore_files=options.respect_ignore_files)
    for message in scope_errors:
        yield WalkError(root, message)

    children, errors = _read_children(root, root_abs, 1, scope, options, skip_identity)
    yield from errors

    # Each frame: pending children, their depth, their directory abs path, its scope
    stack: List[Tuple[Iterator[WalkEntry], int, str, IgnoreScope]] = [
        (iter(children), 1, root_abs, scope)
    ]

    while stack:
        pending, depth, dir_abs, dir_scope = stack[-1]
        entry = next(pending, None)
        if entry is None:
            stack.pop()
            continue

        yield entry

        if not entry.is_dir:
            continue
        if options.max_depth is not None and depth >= options.max_depth:
            continue

        entry_abs = os.path.join(dir_abs, entry.name)
        scope_errors = []
        child_scope = dir_scope.child(entry_abs, scope_errors)
        for message in scope_errors:
            yield WalkError(entry.path, message)

        children, errors = _read_children(
            entry.path, entry_abs, depth + 1, child_scope, options, skip_identity
        )
        yield from errors
        stack.append((iter(children), depth + 1, entry_abs, child_scope))

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _read_children(
        dir_path: str,
        dir_abs: str,
        depth: int,
        scope: IgnoreScope,
        options: WalkOptions,
        skip_identity: Optional[FileIdentity] = None,
) -> Tuple[List[WalkEntry], List[WalkError]]:
    """
    List, classify, filter and sort the entries of one directory.

    Returns:
        Tuple[List[WalkEntry], List[WalkError]]: Visible entries sorted by
        name, and the failures met while reading.
    """
    entries: List[WalkEntry] = []
    errors: List[WalkError] = []

    try:
        with os.scandir(dir_abs) as it:
            for dir_entry in it:
                try:
                    kind = classify_entry(dir_entry)
                except OSError as e:
                    errors.append(_os_error(os.path.join(dir_path, dir_entry.name), e))
                    continue

                if not _is_visible(dir_entry, kind, scope, options):
                    continue
                if (
                        skip_identity is not None
                        and kind is EntryKind.FILE
                        and file_identity(dir_entry.path) == skip_identity
                ):
                    logger.debug(f"Skipping redirected stdout: {dir_entry.path}")
                    continue

                entries.append(WalkEntry(
                    path=os.path.join(dir_path, dir_entry.name),
                    name=dir_entry.name,
                    depth=depth,
                    kind=kind,
                ))
    except OSError as e:
        errors.append(_os_error(dir_path, e))

    entries.sort(key=lambda e: e.name)
    return entries, errors


def _is_visible(
        dir_entry: os.DirEntry,
        kind: EntryKind,
        scope: IgnoreScope,
        options: WalkOptions,
) -> bool:
    """Apply ignore rules, then the hidden filter for unmatched entries."""
    verdict = scope.matched(dir_entry.path, kind is EntryKind.DIRECTORY)

    if verdict is MatchResult.IGNORE:
        logger.debug(f"Ignored by rule: {dir_entry.path}")
        return False

    # Explicitly whitelisted entries bypass the hidden filter
    if verdict is MatchResult.NONE and not options.show_hidden and is_hidden(dir_entry):
        return False

    return True


def _os_error(path: str, exc: OSError) -> WalkError:
    return WalkError(path, f"{path}: {exc.strerror or exc}")
