from __future__ import annotations

"""
Run Configuration Domain.

Defines the immutable option set driving a single tree rendering, its
defaults, and the normalization step applied to command-line overrides.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from lstree.domain.constants import COLOR_AUTO, COLOR_CHOICES, DEFAULT_TARGET_DIR

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# CONFIGURATION MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TreeOptions:
    """
    Session options for one run.

    Attributes:
        target_dir: Directory to display, kept as typed by the user.
        max_depth: Maximum recursion depth, None for unlimited.
        show_hidden: Include dotfiles and hidden entries.
        ignore_errors: Suppress printing of recoverable errors.
        respect_ignore_files: Honour .ignore, .gitignore and global git excludes.
        color: Color policy (auto, always, never).
        skip_stdout: Omit the file standard output is redirected into.
    """
    target_dir: str = DEFAULT_TARGET_DIR
    max_depth: Optional[int] = None
    show_hidden: bool = False
    ignore_errors: bool = False
    respect_ignore_files: bool = True
    color: str = COLOR_AUTO
    skip_stdout: bool = False


def get_default_options() -> TreeOptions:
    """Return the default run options (current directory, no limits)."""
    return TreeOptions()


def merge_options(base: TreeOptions, overrides: Dict[str, Any]) -> TreeOptions:
    """
    Apply non-None override values on top of a base option set.

    Unknown keys are dropped so external sources cannot pollute the schema.
    """
    known = set(TreeOptions.__dataclass_fields__)
    clean = {k: v for k, v in overrides.items() if k in known and v is not None}
    return replace(base, **clean)

# -----------------------------------------------------------------------------
# VALIDATION
# -----------------------------------------------------------------------------

def validate_options(opts: TreeOptions) -> Tuple[TreeOptions, List[str]]:
    """
    Normalize a TreeOptions instance.

    Args:
        opts: Options to check.

    Returns:
        Tuple[TreeOptions, List[str]]: Normalized options and warning messages.
    """
    warnings: List[str] = []
    changes: Dict[str, Any] = {}

    if opts.max_depth is not None and opts.max_depth < 0:
        warnings.append(f"Negative depth {opts.max_depth} ignored; recursing without limit.")
        changes["max_depth"] = None

    if opts.color not in COLOR_CHOICES:
        warnings.append(f"Unknown color policy '{opts.color}'; using '{COLOR_AUTO}'.")
        changes["color"] = COLOR_AUTO

    if not opts.target_dir:
        changes["target_dir"] = DEFAULT_TARGET_DIR

    if changes:
        logger.debug(f"Normalized options: {changes}")
        opts = replace(opts, **changes)

    return opts, warnings
