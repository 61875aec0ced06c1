from __future__ import annotations

"""
Ignore File Engine.

Parses .ignore / .gitignore / git exclude files and translates their glob
rules into Python regexes. Rules are grouped into per-directory scopes that
chain to their parent, so that deeper files take precedence over shallower
ones and the last matching line of a file wins.
"""

import enum
import logging
import os
import re
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Sequence

from lstree.domain.constants import (
    GIT_DIR_NAME,
    GIT_EXCLUDE_REL_PATH,
    GITIGNORE_FILE_NAME,
    IGNORE_FILE_NAME,
)
from lstree.infra.fs import (
    ancestors,
    get_git_config_paths,
    get_xdg_config_home,
    has_git_dir,
)

logger = logging.getLogger(__name__)

_SECTION_RX = re.compile(r"^\s*\[\s*([^\]\s\"]+)[^\]]*\]")
_EXCLUDES_KEY_RX = re.compile(r"^\s*excludesfile\s*=\s*(.*?)\s*$", re.IGNORECASE)

# -----------------------------------------------------------------------------
# MATCH MODEL
# -----------------------------------------------------------------------------

class MatchResult(enum.Enum):
    """Outcome of evaluating a path against ignore rules."""
    NONE = "none"
    IGNORE = "ignore"
    WHITELIST = "whitelist"


@dataclass(frozen=True)
class IgnoreRule:
    """
    One compiled line of an ignore file.

    Attributes:
        pattern: Raw line as written in the file.
        regex: Compiled regex matched against '/'-separated relative paths.
        negated: True for '!pattern' (whitelist) lines.
        dir_only: True for patterns ending with '/'.
    """
    pattern: str
    regex: re.Pattern
    negated: bool = False
    dir_only: bool = False

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        return self.regex.match(rel_path) is not None


@dataclass(frozen=True)
class IgnoreFile:
    """
    The rules of a single ignore file, rooted at base_dir.

    Attributes:
        source: Path of the file the rules were read from.
        base_dir: Absolute directory the patterns are relative to.
        rules: Rules in file order.
        is_git: True for git-specific sources (.gitignore, exclude, global).
    """
    source: str
    base_dir: str
    rules: Sequence[IgnoreRule] = field(default_factory=tuple)
    is_git: bool = False

    def matched(self, abs_path: str, is_dir: bool) -> MatchResult:
        """Return the verdict of the last rule matching abs_path, if any."""
        if not self.rules:
            return MatchResult.NONE

        rel_path = os.path.relpath(abs_path, self.base_dir)
        if rel_path in (os.curdir, os.pardir) or rel_path.startswith(os.pardir + os.sep):
            return MatchResult.NONE
        rel_path = rel_path.replace(os.sep, "/")

        for rule in reversed(self.rules):
            if rule.matches(rel_path, is_dir):
                return MatchResult.WHITELIST if rule.negated else MatchResult.IGNORE
        return MatchResult.NONE

# -----------------------------------------------------------------------------
# PARSING
# -----------------------------------------------------------------------------

def parse_ignore_line(line: str) -> Optional[IgnoreRule]:
    """
    Compile one gitignore-syntax line into a rule.

    Args:
        line: Raw line, with or without its newline.

    Returns:
        Optional[IgnoreRule]: None for blank lines and comments.

    Raises:
        re.error: If the resulting regex cannot be compiled.
    """
    raw = line.rstrip("\r\n")
    text = _trim_trailing_spaces(raw)
    if not text or text.startswith("#"):
        return None

    negated = False
    if text.startswith("!"):
        negated = True
        text = text[1:]
    elif text.startswith("\\!") or text.startswith("\\#"):
        text = text[1:]

    dir_only = False
    if text.endswith("/") and not text.endswith("\\/"):
        dir_only = True
        text = text.rstrip("/")

    if not text:
        return None

    # A slash anywhere but at the end anchors the pattern to its base dir
    anchored = "/" in text
    if text.startswith("/"):
        text = text[1:]

    body = gitignore_to_regex(text)
    if not anchored:
        body = "(?:.*/)?" + body

    return IgnoreRule(
        pattern=raw,
        regex=re.compile(rf"(?s:{body})\Z"),
        negated=negated,
        dir_only=dir_only,
    )


def parse_ignore_lines(
        lines: Iterable[str],
        source: str,
        base_dir: str,
        is_git: bool = False,
        errors: Optional[List[str]] = None,
) -> IgnoreFile:
    """
    Compile every line of an ignore file, skipping invalid ones.

    Args:
        lines: File content, line by line.
        source: File path, used in error messages.
        base_dir: Directory the patterns are relative to.
        is_git: Whether the file is a git-specific source.
        errors: Optional accumulator for parse error messages.

    Returns:
        IgnoreFile: The compiled rule set.
    """
    rules: List[IgnoreRule] = []
    for lineno, line in enumerate(lines, start=1):
        try:
            rule = parse_ignore_line(line)
        except re.error as e:
            if errors is not None:
                errors.append(f"{source}: line {lineno}: invalid pattern {line.strip()!r}: {e}")
            continue
        if rule is not None:
            rules.append(rule)

    return IgnoreFile(source=source, base_dir=base_dir, rules=tuple(rules), is_git=is_git)


def load_ignore_file(
        path: str,
        base_dir: str,
        is_git: bool = False,
        errors: Optional[List[str]] = None,
) -> Optional[IgnoreFile]:
    """
    Read and compile an ignore file from disk.

    Returns:
        Optional[IgnoreFile]: None if the file does not exist or is unreadable.
    """
    if not os.path.isfile(path):
        return None

    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            ignore_file = parse_ignore_lines(f, path, base_dir, is_git=is_git, errors=errors)
    except OSError as e:
        if errors is not None:
            errors.append(f"{path}: {e.strerror or e}")
        return None

    logger.debug(f"Loaded {len(ignore_file.rules)} ignore rules from {path}")
    return ignore_file


def gitignore_to_regex(glob_pattern: str) -> str:
    """
    Translate a gitignore glob into a Python regex body.

    '*' and '?' never cross a '/', '**' spans directories when it forms a
    whole path segment, and bracket expressions accept '!' or '^' negation.

    Args:
        glob_pattern: Glob with leading '!' and trailing '/' already removed.

    Returns:
        str: Regex source without anchors.
    """
    out: List[str] = []
    i, n = 0, len(glob_pattern)

    while i < n:
        c = glob_pattern[i]

        if c == "*":
            if glob_pattern.startswith("**", i):
                seg_start = i == 0 or glob_pattern[i - 1] == "/"
                j = i + 2
                if seg_start and j == n:
                    out.append(".*")
                    i = j
                    continue
                if seg_start and glob_pattern[j] == "/":
                    out.append("(?:.*/)?")
                    i = j + 1
                    continue
            while i < n and glob_pattern[i] == "*":
                i += 1
            out.append("[^/]*")
            continue

        if c == "?":
            out.append("[^/]")
            i += 1
            continue

        if c == "[":
            end = _find_class_end(glob_pattern, i)
            if end < 0:
                out.append(re.escape(c))
                i += 1
                continue
            out.append(_translate_class(glob_pattern[i + 1:end]))
            i = end + 1
            continue

        if c == "\\" and i + 1 < n:
            out.append(re.escape(glob_pattern[i + 1]))
            i += 2
            continue

        out.append(re.escape(c))
        i += 1

    return "".join(out)


def _trim_trailing_spaces(line: str) -> str:
    """Drop trailing spaces unless escaped with a backslash."""
    end = len(line)
    while end > 0 and line[end - 1] == " ":
        if end >= 2 and line[end - 2] == "\\":
            break
        end -= 1
    return line[:end]


def _find_class_end(pattern: str, start: int) -> int:
    """Return the index of the ']' closing the class opened at start, or -1."""
    j = start + 1
    if j < len(pattern) and pattern[j] in "!^":
        j += 1
    if j < len(pattern) and pattern[j] == "]":
        j += 1
    while j < len(pattern) and pattern[j] != "]":
        if pattern[j] == "\\":
            j += 1
        j += 1
    return j if j < len(pattern) else -1


def _translate_class(body: str) -> str:
    negate = body[:1] in ("!", "^")
    if negate:
        body = body[1:]
    body = body.replace("\\", "\\\\")
    body = re.sub(r"([&~|\[])", r"\\\1", body)
    return f"(?!/)[{'^' if negate else ''}{body}]"

# -----------------------------------------------------------------------------
# GLOBAL GIT EXCLUDES
# -----------------------------------------------------------------------------

def find_global_excludes_path() -> Optional[str]:
    """
    Locate the user's global git excludes file.

    Honours 'core.excludesFile' (~/.gitconfig wins over the XDG config),
    otherwise falls back to '$XDG_CONFIG_HOME/git/ignore'.

    Returns:
        Optional[str]: Existing file path, or None.
    """
    for config_path in reversed(get_git_config_paths()):
        value = _read_core_excludes_file(config_path)
        if value:
            candidate = os.path.expanduser(value)
            return candidate if os.path.isfile(candidate) else None

    default = os.path.join(get_xdg_config_home(), "git", "ignore")
    return default if os.path.isfile(default) else None


def _read_core_excludes_file(config_path: str) -> Optional[str]:
    """Extract core.excludesFile from a git config file, if set."""
    if not os.path.isfile(config_path):
        return None

    section = ""
    value: Optional[str] = None
    try:
        with open(config_path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                header = _SECTION_RX.match(line)
                if header:
                    section = header.group(1).lower()
                    continue
                if section != "core":
                    continue
                m = _EXCLUDES_KEY_RX.match(line)
                if m:
                    value = m.group(1).strip('"')
    except OSError as e:
        logger.debug(f"Unreadable git config '{config_path}': {e}")
        return None

    return value or None

# -----------------------------------------------------------------------------
# DIRECTORY SCOPES
# -----------------------------------------------------------------------------

class IgnoreScope:
    """
    Ignore rules visible inside one directory.

    Each scope owns the ignore files found in its directory and points to
    its parent scope. The git exclude and global files are attached to the
    scope of the repository root and inherited below it. With
    use_ignore_files off, only .git/info/exclude is loaded.
    """

    def __init__(
            self,
            directory: str,
            parent: Optional[IgnoreScope] = None,
            files: Sequence[IgnoreFile] = (),
            is_repo_root: bool = False,
            in_git: bool = False,
            git_excludes: Sequence[IgnoreFile] = (),
            global_excludes: Optional[IgnoreFile] = None,
            use_ignore_files: bool = True,
    ):
        self.directory = directory
        self.parent = parent
        self.files = tuple(files)
        self.is_repo_root = is_repo_root
        self.in_git = in_git
        self.git_excludes = tuple(git_excludes)
        self.global_excludes = global_excludes
        self.use_ignore_files = use_ignore_files

    @classmethod
    def for_root(
            cls,
            root_abs: str,
            errors: Optional[List[str]] = None,
            use_ignore_files: bool = True,
    ) -> IgnoreScope:
        """
        Build the scope chain from the filesystem root down to root_abs.

        Args:
            root_abs: Absolute path of the walk root.
            errors: Optional accumulator for read/parse error messages.
            use_ignore_files: Load .ignore, .gitignore and the global
                excludes file. The repository's info/exclude always applies.

        Returns:
            IgnoreScope: Scope of the walk root.
        """
        global_excludes = None
        if use_ignore_files:
            global_path = find_global_excludes_path()
            if global_path:
                global_excludes = load_ignore_file(global_path, root_abs, is_git=True, errors=errors)

        chain = ancestors(root_abs) + [root_abs]
        scope = cls._load(chain[0], None, global_excludes, use_ignore_files, errors)
        for directory in chain[1:]:
            scope = scope.child(directory, errors)
        return scope

    def child(self, directory: str, errors: Optional[List[str]] = None) -> IgnoreScope:
        """Create the scope of a subdirectory, loading its ignore files."""
        return self._load(directory, self, self.global_excludes, self.use_ignore_files, errors)

    @classmethod
    def _load(
            cls,
            directory: str,
            parent: Optional[IgnoreScope],
            global_excludes: Optional[IgnoreFile],
            use_ignore_files: bool,
            errors: Optional[List[str]],
    ) -> IgnoreScope:
        is_repo_root = has_git_dir(directory)
        in_git = is_repo_root or (parent is not None and parent.in_git)

        files: List[IgnoreFile] = []
        if use_ignore_files:
            dot_ignore = load_ignore_file(os.path.join(directory, IGNORE_FILE_NAME), directory, errors=errors)
            if dot_ignore:
                files.append(dot_ignore)
            if in_git:
                gitignore = load_ignore_file(
                    os.path.join(directory, GITIGNORE_FILE_NAME), directory, is_git=True, errors=errors
                )
                if gitignore:
                    files.append(gitignore)

        git_excludes: Sequence[IgnoreFile] = parent.git_excludes if parent else ()
        if is_repo_root:
            git_excludes = []
            exclude_path = os.path.join(directory, GIT_DIR_NAME, *GIT_EXCLUDE_REL_PATH)
            exclude = load_ignore_file(exclude_path, directory, is_git=True, errors=errors)
            if exclude:
                git_excludes.append(exclude)
            if global_excludes:
                git_excludes.append(replace(global_excludes, base_dir=directory))

        return cls(
            directory,
            parent=parent,
            files=files,
            is_repo_root=is_repo_root,
            in_git=in_git,
            git_excludes=git_excludes,
            global_excludes=global_excludes,
            use_ignore_files=use_ignore_files,
        )

    def matched(self, abs_path: str, is_dir: bool) -> MatchResult:
        """
        Evaluate a path against every visible ignore source.

        Sources are consulted by type: all .ignore files (deepest first),
        then all .gitignore files (deepest first, none above the nearest
        repository root), then .git/info/exclude, then the global file.
        The first source type with a matching rule decides.
        """
        result = self._match_chain(abs_path, is_dir, git=False)
        if result is not MatchResult.NONE:
            return result

        result = self._match_chain(abs_path, is_dir, git=True)
        if result is not MatchResult.NONE:
            return result

        for ignore_file in self.git_excludes:
            result = ignore_file.matched(abs_path, is_dir)
            if result is not MatchResult.NONE:
                return result

        return MatchResult.NONE

    def _match_chain(self, abs_path: str, is_dir: bool, git: bool) -> MatchResult:
        """First verdict from the per-directory files of one type, deepest first."""
        saw_git = False
        scope: Optional[IgnoreScope] = self
        while scope is not None:
            if not (git and saw_git):
                for ignore_file in scope.files:
                    if ignore_file.is_git != git:
                        continue
                    result = ignore_file.matched(abs_path, is_dir)
                    if result is not MatchResult.NONE:
                        return result
            saw_git = saw_git or scope.is_repo_root
            scope = scope.parent
        return MatchResult.NONE
