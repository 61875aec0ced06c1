from __future__ import annotations

"""
Domain Constants.

Provides centralized access to application-wide constants: versioning,
ignore-file names, and the glyph set used to draw tree connectors.
"""

from typing import Tuple

APP_NAME = "lstree"
APP_VERSION = "0.3.0"

DEFAULT_TARGET_DIR = "."

# -----------------------------------------------------------------------------
# IGNORE FILE SOURCES
# -----------------------------------------------------------------------------

# Ordered by precedence inside a single directory (highest first)
IGNORE_FILE_NAME = ".ignore"
GITIGNORE_FILE_NAME = ".gitignore"
GIT_DIR_NAME = ".git"
GIT_EXCLUDE_REL_PATH: Tuple[str, ...] = ("info", "exclude")

# -----------------------------------------------------------------------------
# TREE GLYPHS
# -----------------------------------------------------------------------------

CONNECTOR_MIDDLE = "├── "
CONNECTOR_LAST = "└── "
INDENT_OPEN = "│   "
INDENT_EMPTY = "    "
SYMLINK_ARROW = " -> "

# -----------------------------------------------------------------------------
# COLOR POLICIES
# -----------------------------------------------------------------------------

COLOR_AUTO = "auto"
COLOR_ALWAYS = "always"
COLOR_NEVER = "never"
COLOR_CHOICES: Tuple[str, ...] = (COLOR_AUTO, COLOR_ALWAYS, COLOR_NEVER)
