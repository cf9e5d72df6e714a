"""
Tests for GitignoreManager parsing, scoping and error handling.

Covers graceful handling of unreadable ignore files, the three-valued
match result used by the ignore layers, nested scoping and
``.git/info/exclude`` loading.
"""

import logging
import tempfile
import warnings
from pathlib import Path
from unittest.mock import patch

from hypothesis import given, settings
from hypothesis import strategies as st

from remix.core.gitignore_manager import GitignoreManager, GitignorePattern

simple_pattern_name = st.text(
    st.sampled_from(list("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")),
    min_size=1,
    max_size=20,
)


class TestPatternParsing:
    """GitignorePattern.parse flags."""

    def test_flags(self):
        pattern = GitignorePattern.parse("!/logs/", Path(".gitignore"))

        assert pattern.negation
        assert pattern.anchored
        assert pattern.directory_only
        assert pattern.pattern == "logs"

    def test_compiling_emits_no_deprecation_warning(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            pattern = GitignorePattern.parse("build/", Path(".gitignore"))

        assert pattern.spec.match_file("build/")

    def test_empty_after_markers_raises(self):
        for raw in ("!", "/", "!/"):
            try:
                GitignorePattern.parse(raw, Path(".gitignore"))
            except ValueError as e:
                assert "empty" in str(e)
            else:
                raise AssertionError(f"'{raw}' should be rejected")


class TestErrorHandling:
    """Unreadable or odd ignore files never abort a scan."""

    def test_invalid_utf8_returns_zero_patterns(self, caplog):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir_path = Path(tmpdir)
            gitignore_path = tmpdir_path / ".gitignore"
            gitignore_path.write_bytes(b"valid_pattern\n\xff\xfe invalid bytes\n")

            manager = GitignoreManager(tmpdir_path)
            with caplog.at_level(logging.WARNING):
                loaded = manager.load_gitignore(gitignore_path)

            assert loaded == 0
            assert manager.pattern_count == 0
            assert any("Invalid UTF-8 encoding" in r.message for r in caplog.records)

    def test_empty_patterns_skipped_with_warning(self, caplog):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir_path = Path(tmpdir)
            gitignore_path = tmpdir_path / ".gitignore"
            gitignore_path.write_text("!/\n!\nvalid_pattern\n", encoding="utf-8")

            manager = GitignoreManager(tmpdir_path)
            with caplog.at_level(logging.WARNING):
                loaded = manager.load_gitignore(gitignore_path)

            assert loaded == 1
            assert any("Malformed pattern" in r.message for r in caplog.records)

    def test_permission_error_via_mock(self, caplog):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir_path = Path(tmpdir)
            gitignore_path = tmpdir_path / ".gitignore"
            gitignore_path.write_text("pattern\n", encoding="utf-8")

            manager = GitignoreManager(tmpdir_path)
            with patch.object(Path, "read_text", side_effect=PermissionError("Access denied")):
                with caplog.at_level(logging.WARNING):
                    loaded = manager.load_gitignore(gitignore_path)

            assert loaded == 0
            assert any("Permission denied" in r.message for r in caplog.records)

    def test_os_error_via_mock(self, caplog):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir_path = Path(tmpdir)
            gitignore_path = tmpdir_path / ".gitignore"
            gitignore_path.write_text("pattern\n", encoding="utf-8")

            manager = GitignoreManager(tmpdir_path)
            with patch.object(Path, "read_text", side_effect=OSError("Disk error")):
                with caplog.at_level(logging.WARNING):
                    loaded = manager.load_gitignore(gitignore_path)

            assert loaded == 0
            assert any("Error reading" in r.message for r in caplog.records)

    def test_missing_file_returns_zero(self, tmp_path):
        manager = GitignoreManager(tmp_path)
        assert manager.load_gitignore(tmp_path / ".gitignore") == 0

    def test_comments_and_blank_lines_ignored(self, tmp_path):
        (tmp_path / ".gitignore").write_text("# comment\n\n   \n*.log\n", encoding="utf-8")

        manager = GitignoreManager(tmp_path)

        assert manager.load_gitignore(tmp_path / ".gitignore") == 1


class TestMatchResult:
    """matches() answers True, False or None."""

    def test_no_patterns_means_no_opinion(self, tmp_path):
        assert GitignoreManager(tmp_path).matches("src/main.rs") is None

    def test_ignored_and_reincluded(self, tmp_path):
        manager = GitignoreManager(tmp_path)
        manager.add_lines(["*.log", "!keep.log"], tmp_path / ".remixignore")

        assert manager.matches("debug.log") is True
        assert manager.matches("keep.log") is False
        assert manager.matches("main.rs") is None
        assert manager.is_ignored("debug.log")
        assert not manager.is_ignored("keep.log")

    def test_last_match_wins(self, tmp_path):
        manager = GitignoreManager(tmp_path)
        manager.add_lines(["!secret.txt", "secret.txt"], tmp_path / ".gitignore")

        assert manager.matches("secret.txt") is True

    def test_absolute_paths_are_made_relative(self, tmp_path):
        manager = GitignoreManager(tmp_path)
        manager.add_lines(["*.tmp"], tmp_path / ".gitignore")

        assert manager.matches(tmp_path.resolve() / "a" / "b.tmp") is True

    def test_case_insensitive_manager(self, tmp_path):
        manager = GitignoreManager(tmp_path, case_sensitive=False)
        manager.add_lines(["*.LOG"], tmp_path / ".gitignore")

        assert manager.matches("Debug.log") is True


class TestHierarchy:
    """Nested ignore files are scoped to their directory."""

    def test_nested_directory_pattern_ignores_files_under_that_directory(self, tmp_path):
        (tmp_path / "apps" / "web").mkdir(parents=True)
        (tmp_path / "apps" / "web" / ".gitignore").write_text("out/\n", encoding="utf-8")

        manager = GitignoreManager(tmp_path)
        manager.load_gitignore(tmp_path / "apps" / "web" / ".gitignore")

        assert manager.matches(Path("apps") / "web" / "out", is_dir=True)
        assert manager.matches(Path("apps") / "web" / "out" / "chunks" / "app.js")
        assert not manager.matches(Path("apps") / "web" / "src" / "app.js")

    def test_nested_anchored_pattern_is_scoped_to_its_directory(self, tmp_path):
        (tmp_path / "a" / "b").mkdir(parents=True)
        (tmp_path / "a" / ".gitignore").write_text("/build\n", encoding="utf-8")

        manager = GitignoreManager(tmp_path)
        manager.load_gitignore(tmp_path / "a" / ".gitignore")

        assert manager.matches(Path("a") / "build")
        assert not manager.matches(Path("build"))
        assert not manager.matches(Path("a") / "b" / "build")

    def test_hierarchy_loads_root_then_nested(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / ".gitignore").write_text("*.log\n", encoding="utf-8")
        (tmp_path / "sub" / ".gitignore").write_text("!keep.log\n", encoding="utf-8")

        manager = GitignoreManager(tmp_path)
        loaded = manager.load_gitignore_hierarchy()

        assert loaded == 2
        assert manager.matches("sub/other.log") is True
        assert manager.matches("sub/keep.log") is False
        assert manager.matches("keep.log") is True

    def test_hierarchy_skips_dependency_directories(self, tmp_path):
        (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
        (tmp_path / "node_modules" / "pkg" / ".gitignore").write_text("*\n", encoding="utf-8")

        manager = GitignoreManager(tmp_path)

        assert manager.load_gitignore_hierarchy() == 0

    def test_hierarchy_does_not_descend_into_ignored_directories(self, tmp_path):
        (tmp_path / "out" / "nested").mkdir(parents=True)
        (tmp_path / ".gitignore").write_text("out/\n", encoding="utf-8")
        (tmp_path / "out" / "nested" / ".gitignore").write_text("*.txt\n", encoding="utf-8")

        manager = GitignoreManager(tmp_path)

        assert manager.load_gitignore_hierarchy() == 1
        assert [p.raw for p in manager.patterns] == ["out/"]

    def test_hierarchy_honors_prune_predicate(self, tmp_path):
        (tmp_path / "vendor" / "lib").mkdir(parents=True)
        (tmp_path / "vendor" / "lib" / ".gitignore").write_text("*\n", encoding="utf-8")
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / ".gitignore").write_text("*.gen\n", encoding="utf-8")
        asked: list[str] = []

        def prune(relative_dir: str) -> bool:
            asked.append(relative_dir)
            return relative_dir == "vendor"

        manager = GitignoreManager(tmp_path)

        assert manager.load_gitignore_hierarchy(prune=prune) == 1
        assert sorted(asked) == ["src", "vendor"]
        assert manager.matches("src/a.gen") is True

    def test_git_info_exclude_applies_from_root(self, tmp_path):
        (tmp_path / ".git" / "info").mkdir(parents=True)
        (tmp_path / ".git" / "info" / "exclude").write_text("scratch/\n", encoding="utf-8")

        manager = GitignoreManager(tmp_path)
        loaded = manager.load_gitignore_hierarchy()

        assert loaded == 1
        assert manager.matches("scratch", is_dir=True) is True
        assert manager.matches("src/scratch/notes.txt") is True


@given(pattern_name=simple_pattern_name)
@settings(max_examples=100, deadline=None)
def test_root_anchored_pattern_matching(pattern_name):
    """A leading slash anchors the pattern to the ignore file's directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        tmpdir_path = Path(tmpdir)
        manager = GitignoreManager(tmpdir_path)
        manager.add_lines([f"/{pattern_name}"], tmpdir_path / ".gitignore")

        assert manager.matches(Path(pattern_name))
        assert not manager.matches(Path("subdir") / pattern_name)
        assert not manager.matches(Path("a") / "b" / "c" / pattern_name)


@given(pattern_name=simple_pattern_name)
@settings(max_examples=100, deadline=None)
def test_directory_only_pattern_matching(pattern_name):
    """A trailing slash matches directories but not files of the same name."""
    with tempfile.TemporaryDirectory() as tmpdir:
        tmpdir_path = Path(tmpdir)
        manager = GitignoreManager(tmpdir_path)
        manager.add_lines([f"{pattern_name}/"], tmpdir_path / ".gitignore")

        assert manager.matches(Path(pattern_name), is_dir=True)
        assert not manager.matches(Path(pattern_name), is_dir=False)
        assert manager.matches(Path("subdir") / pattern_name, is_dir=True)
        assert not manager.matches(Path("subdir") / pattern_name, is_dir=False)
