from __future__ import annotations

"""
Domain Exception Hierarchy.
"""


class LstreeError(Exception):
    """Base class for every error raised by lstree itself."""


class TreeBuilderError(LstreeError):
    """Raised when the tree builder receives an unbalanced begin/end sequence."""
