from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform helpers over 'os' for entry classification,
hidden-file detection, symlink reading, file identity and git
configuration lookup.
"""

import os
import stat
import sys
from typing import List, Optional, Tuple

from lstree.domain.constants import GIT_DIR_NAME
from lstree.domain.tree_models import EntryKind

# -----------------------------------------------------------------------------
# ENTRY INSPECTION
# -----------------------------------------------------------------------------

def classify_entry(entry: os.DirEntry) -> EntryKind:
    """
    Classify a directory entry without following symlinks.

    Raises:
        OSError: If the entry vanished or cannot be stat'ed.
    """
    if entry.is_symlink():
        return EntryKind.SYMLINK
    if entry.is_dir(follow_symlinks=False):
        return EntryKind.DIRECTORY
    if entry.is_file(follow_symlinks=False):
        return EntryKind.FILE
    return EntryKind.OTHER


def is_hidden(entry: os.DirEntry) -> bool:
    """
    Check whether an entry is hidden.

    Dot-prefixed names are hidden everywhere; on Windows the hidden file
    attribute is honoured as well.
    """
    if entry.name.startswith("."):
        return True

    if os.name == "nt":
        try:
            attrs = entry.stat(follow_symlinks=False).st_file_attributes
        except (OSError, AttributeError):
            return False
        return bool(attrs & stat.FILE_ATTRIBUTE_HIDDEN)

    return False


def read_link_text(path: str) -> str:
    """
    Return the textual target of a symlink without resolving it.

    Raises:
        OSError: If the path is not a link or cannot be read.
    """
    return os.fsdecode(os.readlink(path))


FileIdentity = Tuple[int, int]


def file_identity(path: str) -> Optional[FileIdentity]:
    """Return the (st_dev, st_ino) pair of path without following links."""
    try:
        st = os.lstat(path)
    except OSError:
        return None
    return st.st_dev, st.st_ino


def stdout_file_identity() -> Optional[FileIdentity]:
    """
    Identify the file standard output is redirected into.

    Returns:
        Optional[FileIdentity]: (st_dev, st_ino) when stdout is a regular
        file, None for terminals, pipes or a detached stdout.
    """
    try:
        st = os.fstat(sys.stdout.fileno())
    except (AttributeError, OSError, ValueError):
        return None
    if not stat.S_ISREG(st.st_mode):
        return None
    return st.st_dev, st.st_ino

# -----------------------------------------------------------------------------
# GIT LOCATIONS
# -----------------------------------------------------------------------------

def has_git_dir(directory: str) -> bool:
    """Return True if a '.git' entry (dir or worktree file) exists in directory."""
    return os.path.exists(os.path.join(directory, GIT_DIR_NAME))


def ancestors(path: str) -> List[str]:
    """
    List the strict ancestors of an absolute path, outermost first.

    Args:
        path: Absolute, normalized path.

    Returns:
        List[str]: e.g. ['/', '/home'] for '/home/user'.
    """
    chain: List[str] = []
    current = os.path.dirname(path)
    previous = path
    while current != previous:
        chain.append(current)
        previous, current = current, os.path.dirname(current)
    chain.reverse()
    return chain


def get_git_config_paths() -> List[str]:
    """
    Resolve the candidate user-level git configuration files.

    Returns:
        List[str]: '$XDG_CONFIG_HOME/git/config' then '~/.gitconfig'.
    """
    return [
        os.path.join(get_xdg_config_home(), "git", "config"),
        os.path.join(os.path.expanduser("~"), ".gitconfig"),
    ]


def get_xdg_config_home() -> str:
    """Return $XDG_CONFIG_HOME, defaulting to '~/.config'."""
    base: Optional[str] = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return base
    return os.path.join(os.path.expanduser("~"), ".config")
