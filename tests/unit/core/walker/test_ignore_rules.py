from __future__ import annotations

"""
Unit tests for the Ignore File Engine.

Verifies:
1. Translation of gitignore glob syntax into regexes.
2. Last-match-wins evaluation inside a single file.
3. Precedence between directories and ignore sources.
4. Discovery of the global git excludes file.
"""

from pathlib import Path

import pytest

from lstree.core.walker.ignore_rules import (
    IgnoreScope,
    MatchResult,
    find_global_excludes_path,
    parse_ignore_line,
    parse_ignore_lines,
)


def rule_matches(line: str, rel_path: str, is_dir: bool = False) -> bool:
    """Helper to compile a single line and match it."""
    rule = parse_ignore_line(line)
    assert rule is not None, f"{line!r} should produce a rule"
    return rule.matches(rel_path, is_dir)


# -----------------------------------------------------------------------------
# Line parsing
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("line", ["", "\n", "   ", "# comment", "/", "!"])
def test_blank_and_comment_lines_produce_no_rule(line: str) -> None:
    assert parse_ignore_line(line) is None


def test_unanchored_pattern_matches_at_any_depth() -> None:
    assert rule_matches("*.log", "a.log")
    assert rule_matches("*.log", "deep/dir/a.log")
    assert not rule_matches("*.log", "a.logx")
    assert not rule_matches("*.log", "a.log/child")


def test_leading_slash_anchors_to_base_dir() -> None:
    assert rule_matches("/build", "build")
    assert not rule_matches("/build", "src/build")


def test_middle_slash_anchors_to_base_dir() -> None:
    assert rule_matches("doc/frotz", "doc/frotz")
    assert not rule_matches("doc/frotz", "a/doc/frotz")


def test_trailing_slash_matches_directories_only() -> None:
    assert rule_matches("out/", "out", is_dir=True)
    assert rule_matches("out/", "nested/out", is_dir=True)
    assert not rule_matches("out/", "out", is_dir=False)


def test_negation_flag() -> None:
    rule = parse_ignore_line("!keep.log")
    assert rule is not None
    assert rule.negated is True
    assert rule.matches("keep.log", False)


def test_escaped_hash_and_bang_are_literals() -> None:
    hash_rule = parse_ignore_line("\\#file")
    bang_rule = parse_ignore_line("\\!important")

    assert hash_rule is not None and not hash_rule.negated
    assert hash_rule.matches("#file", False)
    assert bang_rule is not None and not bang_rule.negated
    assert bang_rule.matches("!important", False)


def test_trailing_spaces_trimmed_unless_escaped() -> None:
    assert rule_matches("foo   ", "foo")
    assert rule_matches("bar\\ ", "bar ")
    assert not rule_matches("bar\\ ", "bar")


def test_double_star_prefix() -> None:
    assert rule_matches("**/logs", "logs", is_dir=True)
    assert rule_matches("**/logs", "a/b/logs", is_dir=True)


def test_double_star_middle() -> None:
    assert rule_matches("a/**/b", "a/b")
    assert rule_matches("a/**/b", "a/x/y/b")
    assert not rule_matches("a/**/b", "a/xb")


def test_double_star_suffix() -> None:
    assert rule_matches("abc/**", "abc/x")
    assert rule_matches("abc/**", "abc/x/y")
    assert not rule_matches("abc/**", "abc", is_dir=True)


def test_single_star_and_question_mark_stay_in_segment() -> None:
    assert rule_matches("file?.txt", "file1.txt")
    assert not rule_matches("file?.txt", "file10.txt")
    assert not rule_matches("src/*.py", "src/pkg/mod.py")
    assert rule_matches("src/*.py", "src/mod.py")


def test_bracket_expressions() -> None:
    assert rule_matches("[abc].txt", "b.txt")
    assert not rule_matches("[abc].txt", "d.txt")
    assert rule_matches("[!a]*.py", "b.py")
    assert not rule_matches("[!a]*.py", "a.py")
    assert rule_matches("[^a]*.py", "c.py")


def test_unclosed_bracket_is_literal() -> None:
    assert rule_matches("[unclosed", "[unclosed")


def test_parse_lines_reports_invalid_patterns() -> None:
    """A broken line is reported and skipped, the rest still apply."""
    errors = []
    ignore_file = parse_ignore_lines(
        ["*.tmp\n", "[z-a]\n", "cache/\n"], source="/r/.ignore", base_dir="/r", errors=errors
    )

    assert len(ignore_file.rules) == 2
    assert len(errors) == 1
    assert "/r/.ignore: line 2" in errors[0]


def test_last_matching_rule_wins(tmp_path: Path) -> None:
    ignore_file = parse_ignore_lines(
        ["*.log", "!keep.log", "keep.log.old"], source="x", base_dir=str(tmp_path)
    )

    assert ignore_file.matched(str(tmp_path / "a.log"), False) is MatchResult.IGNORE
    assert ignore_file.matched(str(tmp_path / "keep.log"), False) is MatchResult.WHITELIST
    assert ignore_file.matched(str(tmp_path / "notes.txt"), False) is MatchResult.NONE


def test_paths_outside_base_dir_never_match(tmp_path: Path) -> None:
    base = tmp_path / "base"
    ignore_file = parse_ignore_lines(["*"], source="x", base_dir=str(base))

    assert ignore_file.matched(str(tmp_path / "other" / "f"), False) is MatchResult.NONE
    assert ignore_file.matched(str(base), True) is MatchResult.NONE


# -----------------------------------------------------------------------------
# Scopes and precedence
# -----------------------------------------------------------------------------

def test_gitignore_requires_git_work_tree(tmp_path: Path) -> None:
    plain = tmp_path / "plain"
    plain.mkdir()
    (plain / ".gitignore").write_text("*.log\n", encoding="utf-8")

    scope = IgnoreScope.for_root(str(plain))

    assert scope.matched(str(plain / "a.log"), False) is MatchResult.NONE


def test_gitignore_applies_inside_repo(git_repo: Path) -> None:
    (git_repo / ".gitignore").write_text("*.log\n", encoding="utf-8")

    scope = IgnoreScope.for_root(str(git_repo))

    assert scope.matched(str(git_repo / "a.log"), False) is MatchResult.IGNORE
    assert scope.matched(str(git_repo / "a.txt"), False) is MatchResult.NONE


def test_dot_ignore_applies_without_git(tmp_path: Path) -> None:
    plain = tmp_path / "plain"
    plain.mkdir()
    (plain / ".ignore").write_text("target/\n", encoding="utf-8")

    scope = IgnoreScope.for_root(str(plain))

    assert scope.matched(str(plain / "target"), True) is MatchResult.IGNORE


def test_dot_ignore_overrides_gitignore_in_same_dir(git_repo: Path) -> None:
    (git_repo / ".gitignore").write_text("*.log\n", encoding="utf-8")
    (git_repo / ".ignore").write_text("!keep.log\n", encoding="utf-8")

    scope = IgnoreScope.for_root(str(git_repo))

    assert scope.matched(str(git_repo / "keep.log"), False) is MatchResult.WHITELIST
    assert scope.matched(str(git_repo / "drop.log"), False) is MatchResult.IGNORE


def test_deeper_ignore_file_wins(git_repo: Path) -> None:
    sub = git_repo / "sub"
    sub.mkdir()
    (git_repo / ".gitignore").write_text("*.txt\n", encoding="utf-8")
    (sub / ".gitignore").write_text("!notes.txt\n", encoding="utf-8")

    scope = IgnoreScope.for_root(str(git_repo)).child(str(sub))

    assert scope.matched(str(sub / "notes.txt"), False) is MatchResult.WHITELIST
    assert scope.matched(str(sub / "other.txt"), False) is MatchResult.IGNORE


def test_dot_ignore_beats_deeper_gitignore(git_repo: Path) -> None:
    sub = git_repo / "sub"
    sub.mkdir()
    (git_repo / ".ignore").write_text("*.log\n", encoding="utf-8")
    (sub / ".gitignore").write_text("!keep.log\n", encoding="utf-8")

    scope = IgnoreScope.for_root(str(git_repo)).child(str(sub))

    assert scope.matched(str(sub / "keep.log"), False) is MatchResult.IGNORE


def test_gitignore_beats_git_info_exclude(git_repo: Path) -> None:
    sub = git_repo / "sub"
    sub.mkdir()
    (git_repo / ".git" / "info" / "exclude").write_text("*.tmp\n", encoding="utf-8")
    (git_repo / ".gitignore").write_text("!keep.tmp\n", encoding="utf-8")

    scope = IgnoreScope.for_root(str(git_repo)).child(str(sub))

    assert scope.matched(str(sub / "keep.tmp"), False) is MatchResult.WHITELIST
    assert scope.matched(str(sub / "drop.tmp"), False) is MatchResult.IGNORE


def test_git_info_exclude_is_honoured(git_repo: Path) -> None:
    (git_repo / ".git" / "info" / "exclude").write_text("secret\n", encoding="utf-8")

    scope = IgnoreScope.for_root(str(git_repo))

    assert scope.matched(str(git_repo / "secret"), False) is MatchResult.IGNORE


def test_disabled_ignore_files_keep_git_info_exclude(isolated_home: Path, git_repo: Path) -> None:
    global_ignore = isolated_home / ".config" / "git" / "ignore"
    global_ignore.parent.mkdir(parents=True)
    global_ignore.write_text("*.bak\n", encoding="utf-8")
    (git_repo / ".git" / "info" / "exclude").write_text("secret.txt\n", encoding="utf-8")
    (git_repo / ".gitignore").write_text("*.log\n", encoding="utf-8")
    (git_repo / ".ignore").write_text("*.tmp\n", encoding="utf-8")

    scope = IgnoreScope.for_root(str(git_repo), use_ignore_files=False)

    assert scope.matched(str(git_repo / "secret.txt"), False) is MatchResult.IGNORE
    assert scope.matched(str(git_repo / "app.log"), False) is MatchResult.NONE
    assert scope.matched(str(git_repo / "x.tmp"), False) is MatchResult.NONE
    assert scope.matched(str(git_repo / "old.bak"), False) is MatchResult.NONE


def test_gitignore_above_nested_repo_is_skipped(tmp_path: Path) -> None:
    outer = tmp_path / "outer"
    inner = outer / "inner"
    (outer / ".git").mkdir(parents=True)
    (inner / ".git").mkdir(parents=True)
    (outer / ".gitignore").write_text("*.md\n", encoding="utf-8")
    (outer / ".ignore").write_text("*.tmp\n", encoding="utf-8")

    scope = IgnoreScope.for_root(str(inner))

    assert scope.matched(str(inner / "README.md"), False) is MatchResult.NONE
    assert scope.matched(str(inner / "x.tmp"), False) is MatchResult.IGNORE


def test_ancestor_ignore_files_apply_to_root(tmp_path: Path) -> None:
    parent = tmp_path / "parent"
    child = parent / "child"
    child.mkdir(parents=True)
    (parent / ".ignore").write_text("child/*.bak\n", encoding="utf-8")

    scope = IgnoreScope.for_root(str(child))

    assert scope.matched(str(child / "a.bak"), False) is MatchResult.IGNORE


def test_errors_from_broken_ignore_file_are_collected(tmp_path: Path) -> None:
    plain = tmp_path / "plain"
    plain.mkdir()
    (plain / ".ignore").write_text("[z-a]\n", encoding="utf-8")

    errors = []
    IgnoreScope.for_root(str(plain), errors)

    assert len(errors) == 1


# -----------------------------------------------------------------------------
# Global excludes
# -----------------------------------------------------------------------------

def test_global_excludes_default_xdg_location(isolated_home: Path, git_repo: Path) -> None:
    global_ignore = isolated_home / ".config" / "git" / "ignore"
    global_ignore.parent.mkdir(parents=True)
    global_ignore.write_text("*.bak\n", encoding="utf-8")

    assert find_global_excludes_path() == str(global_ignore)

    scope = IgnoreScope.for_root(str(git_repo))
    assert scope.matched(str(git_repo / "old.bak"), False) is MatchResult.IGNORE


def test_global_excludes_ignored_outside_repo(isolated_home: Path, tmp_path: Path) -> None:
    global_ignore = isolated_home / ".config" / "git" / "ignore"
    global_ignore.parent.mkdir(parents=True)
    global_ignore.write_text("*.bak\n", encoding="utf-8")
    plain = tmp_path / "plain"
    plain.mkdir()

    scope = IgnoreScope.for_root(str(plain))

    assert scope.matched(str(plain / "old.bak"), False) is MatchResult.NONE


def test_core_excludes_file_from_gitconfig(isolated_home: Path) -> None:
    custom = isolated_home / "my_ignore"
    custom.write_text("*.swp\n", encoding="utf-8")
    (isolated_home / ".gitconfig").write_text(
        "[user]\n\tname = someone\n[core]\n\texcludesfile = ~/my_ignore\n",
        encoding="utf-8",
    )

    assert find_global_excludes_path() == str(custom)


def test_no_global_excludes(isolated_home: Path) -> None:
    assert find_global_excludes_path() is None
