from __future__ import annotations

"""
Directory Tree Structure Data Models.

Provides the node types, the incremental builder and the counters used to
fold a depth-first filesystem walk into a printable tree.
"""

import enum
from dataclasses import dataclass, field
from typing import List, Optional

from lstree.domain.errors import TreeBuilderError

# -----------------------------------------------------------------------------
# ENTRY CLASSIFICATION
# -----------------------------------------------------------------------------

class EntryKind(enum.Enum):
    """Classification of a traversed filesystem entry."""
    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"
    OTHER = "other"

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass
class TreeNode:
    """
    A labeled node of the rendered tree.

    Attributes:
        name: Text shown for the entry (file name, or the target dir for the root).
        kind: Entry classification driving the rendering style.
        link_target: Textual symlink target, only set for SYMLINK nodes.
        children: Child nodes in traversal order.
    """
    name: str
    kind: EntryKind = EntryKind.DIRECTORY
    link_target: Optional[str] = None
    children: List["TreeNode"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children


class TreeBuilder:
    """
    Accumulates nested nodes through begin/end markers.

    The builder keeps a stack of open nodes; the root is always open and
    can never be closed explicitly.
    """

    def __init__(self, root_label: str):
        self._root = TreeNode(name=root_label, kind=EntryKind.DIRECTORY)
        self._stack: List[TreeNode] = [self._root]

    @property
    def depth(self) -> int:
        """Number of currently open nodes below the root."""
        return len(self._stack) - 1

    def begin_child(self, name: str, kind: EntryKind = EntryKind.DIRECTORY) -> TreeBuilder:
        """Append a node to the open node and open it."""
        node = TreeNode(name=name, kind=kind)
        self._stack[-1].children.append(node)
        self._stack.append(node)
        return self

    def add_empty_child(
            self,
            name: str,
            kind: EntryKind = EntryKind.FILE,
            link_target: Optional[str] = None,
    ) -> TreeBuilder:
        """Append a leaf node to the open node."""
        self._stack[-1].children.append(
            TreeNode(name=name, kind=kind, link_target=link_target)
        )
        return self

    def end_child(self) -> TreeBuilder:
        """
        Close the currently open node.

        Raises:
            TreeBuilderError: If only the root is open.
        """
        if len(self._stack) == 1:
            raise TreeBuilderError("end_child() called with no open child node")
        self._stack.pop()
        return self

    def build(self) -> TreeNode:
        """Return the root node, implicitly closing every open node."""
        del self._stack[1:]
        return self._root

# -----------------------------------------------------------------------------
# AGGREGATES
# -----------------------------------------------------------------------------

@dataclass
class TreeCounts:
    """Running totals of the classified entries."""
    directories: int = 0
    files: int = 0
    symlinks: int = 0

    def format_summary(self) -> str:
        """
        Render the summary sentence printed after the tree.

        The symlink clause is only present when at least one symlink was counted.
        """
        text = f"{self.directories} directories, {self.files} files"
        if self.symlinks > 0:
            text += f", {self.symlinks} symlinks"
        return text


@dataclass
class TreeReport:
    """
    Result of a complete tree generation.

    Attributes:
        root: Root node of the built tree.
        counts: Aggregated entry counters.
        errors: Every recoverable error message met during the walk,
                including the ones whose printing was suppressed.
    """
    root: TreeNode
    counts: TreeCounts
    errors: List[str] = field(default_factory=list)
