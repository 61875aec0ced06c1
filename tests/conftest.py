from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Isolation from the user's git configuration and global excludes.
3. Shared filesystem fixtures used across unit and integration tests.
"""

import os
import sys
from pathlib import Path
from typing import Iterator

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from lstree.infra.logging import shutdown_logging  # noqa: E402


# -----------------------------------------------------------------------------
# Environment Isolation
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def isolated_home(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME and XDG_CONFIG_HOME at empty directories."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    return home


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Detach lstree handlers installed by CLI runs."""
    yield
    shutdown_logging()


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    Create a small project tree.

    Structure:
    /project
      .hidden
      README.md
      docs/
        guide.md
      src/
        app.py
        pkg/
          core.py
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / ".hidden").write_text("secret", encoding="utf-8")
    (root / "README.md").write_text("# Project", encoding="utf-8")

    docs = root / "docs"
    docs.mkdir()
    (docs / "guide.md").write_text("guide", encoding="utf-8")

    pkg = root / "src" / "pkg"
    pkg.mkdir(parents=True)
    (root / "src" / "app.py").write_text("print('app')", encoding="utf-8")
    (pkg / "core.py").write_text("VALUE = 1", encoding="utf-8")

    return root


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create an empty directory marked as a git work tree."""
    repo = tmp_path / "repo"
    (repo / ".git" / "info").mkdir(parents=True)
    return repo
