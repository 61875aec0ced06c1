from __future__ import annotations

"""
Tree Renderer.

Converts TreeNode hierarchies into styled rich Text lines using the
standard connectors (├──, └──, │) and writes them to a Console.
"""

from typing import List

from rich.console import Console
from rich.text import Text

from lstree.domain.constants import (
    CONNECTOR_LAST,
    CONNECTOR_MIDDLE,
    INDENT_EMPTY,
    INDENT_OPEN,
    SYMLINK_ARROW,
)
from lstree.domain.tree_models import EntryKind, TreeNode

STYLE_DIRECTORY = "green"
STYLE_SYMLINK = "blue"
STYLE_LINK_TARGET = "cyan"
STYLE_OTHER = "red"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_tree(root: TreeNode) -> List[Text]:
    """
    Render a tree into one Text per line.

    The first line is the root label, unstyled; every descendant follows
    in pre-order with its connector prefix.

    Args:
        root: Root node of the tree.

    Returns:
        List[Text]: Styled lines, use `.plain` for the uncolored text.
    """
    lines: List[Text] = [Text(root.name)]
    render_tree_structure(root, lines, prefix="")
    return lines


def render_tree_structure(node: TreeNode, lines: List[Text], prefix: str = "") -> None:
    """
    Recursively append the children of node to lines.

    Args:
        node: Node whose children are rendered.
        lines: Accumulator list for output lines.
        prefix: Indentation prefix for the current recursion level.
    """
    total = len(node.children)

    for i, child in enumerate(node.children):
        is_last = (i == total - 1)
        connector = CONNECTOR_LAST if is_last else CONNECTOR_MIDDLE

        line = Text(prefix + connector)
        line.append_text(format_label(child))
        lines.append(line)

        if child.children:
            new_prefix = prefix + (INDENT_EMPTY if is_last else INDENT_OPEN)
            render_tree_structure(child, lines, prefix=new_prefix)


def format_label(node: TreeNode) -> Text:
    """Style a node label according to its entry kind."""
    label = Text()

    if node.kind is EntryKind.DIRECTORY:
        label.append(node.name, style=STYLE_DIRECTORY)
        label.append("/")
    elif node.kind is EntryKind.SYMLINK:
        label.append(node.name, style=STYLE_SYMLINK)
        label.append(SYMLINK_ARROW)
        label.append(node.link_target or "", style=STYLE_LINK_TARGET)
    elif node.kind is EntryKind.OTHER:
        label.append(node.name, style=STYLE_OTHER)
    else:
        label.append(node.name)

    return label


def print_tree(root: TreeNode, console: Console) -> None:
    """Write the rendered tree to console without wrapping long lines."""
    for line in render_tree(root):
        console.print(line, soft_wrap=True, highlight=False)
