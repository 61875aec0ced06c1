from __future__ import annotations

"""
Terminal Output Infrastructure.

Builds the rich Console instances used for the tree (stdout) and for
error reporting (stderr) according to the selected color policy.
"""

from typing import IO, Optional

from rich.console import Console

from lstree.domain.constants import COLOR_ALWAYS, COLOR_NEVER


def create_console(color: str, stderr: bool = False, file: Optional[IO[str]] = None) -> Console:
    """
    Create a Console honouring the color policy.

    'auto' lets rich detect a terminal (and NO_COLOR); 'always' forces ANSI
    styles even when piped; 'never' disables styling.

    Args:
        color: One of auto, always, never.
        stderr: Write to standard error instead of standard output.
        file: Explicit output stream, mainly for tests.

    Returns:
        Console: Configured console.
    """
    kwargs = {}
    if color == COLOR_ALWAYS:
        kwargs["force_terminal"] = True
    elif color == COLOR_NEVER:
        kwargs["no_color"] = True
        kwargs["color_system"] = None

    return Console(file=file, stderr=stderr, highlight=False, **kwargs)
