"""
GitignoreManager module for Remix.

Provides gitignore pattern parsing and matching for both the local
``.remixignore`` file and version-control ignore rules, with support for:
- Nested .gitignore files with proper scoping
- Pattern precedence (later patterns override earlier ones)
- Negation patterns (!)
- Directory-only patterns (trailing /)
- Anchored patterns (leading /)
- Double-star globs (**)
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import pathspec

from remix.core.path_utils import normalize_path

logger = logging.getLogger(__name__)

GITIGNORE_FILENAME = ".gitignore"

# Directories never searched for nested .gitignore files
_HIERARCHY_SKIP_DIRS = frozenset({".git", "node_modules", "target", "__pycache__", ".venv", "venv"})


@dataclass
class GitignorePattern:
    """
    A parsed gitignore pattern with metadata.

    Attributes:
        raw: Original pattern string (e.g., "!/important.py")
        pattern: Normalized pattern for matching (e.g., "important.py")
        negation: True if pattern starts with ! (re-includes files)
        directory_only: True if pattern ends with / (matches only directories)
        anchored: True if pattern starts with / (root-relative only)
        source_path: Path to the ignore file containing this pattern
        source_depth: Depth of the ignore file from root (0 = root)
        spec: Compiled single-pattern matcher (negation stripped)
    """

    raw: str
    pattern: str
    negation: bool
    directory_only: bool
    anchored: bool
    source_path: Path
    source_depth: int = 0
    spec: pathspec.PathSpec | None = field(default=None, repr=False, compare=False)

    @classmethod
    def parse(
        cls,
        raw_line: str,
        source_path: Path,
        source_depth: int = 0,
        case_sensitive: bool = True,
    ) -> "GitignorePattern":
        """
        Parse a raw gitignore line into a GitignorePattern.

        Args:
            raw_line: Raw line from the ignore file (already stripped)
            source_path: Path to the ignore file
            source_depth: Depth of the ignore file from root (0 = root)
            case_sensitive: If False, the compiled matcher is lowercased

        Returns:
            Parsed GitignorePattern instance

        Raises:
            ValueError: If the line is empty after removing ! and / markers
                or pathspec rejects it
        """
        pattern = raw_line
        negation = False
        directory_only = False
        anchored = False

        if pattern.startswith("!"):
            negation = True
            pattern = pattern[1:]

        if pattern.endswith("/"):
            directory_only = True
            pattern = pattern[:-1]

        if pattern.startswith("/"):
            anchored = True
            pattern = pattern[1:]

        if not pattern:
            raise ValueError("Pattern is empty")

        # pathspec understands anchoring and trailing slashes natively;
        # only the negation marker is handled here.
        match_text = raw_line[1:] if negation else raw_line
        if not case_sensitive:
            match_text = match_text.lower()
        spec = pathspec.PathSpec.from_lines(
            pathspec.patterns.GitWildMatchPattern, [match_text]
        )

        return cls(
            raw=raw_line,
            pattern=pattern,
            negation=negation,
            directory_only=directory_only,
            anchored=anchored,
            source_path=source_path,
            source_depth=source_depth,
            spec=spec,
        )


class GitignoreManager:
    """
    Manages gitignore patterns with proper scoping and precedence.

    ``matches`` answers with three values so callers can use the manager
    as a single layer of a larger decision: True (ignored), False
    (explicitly re-included by a negation) or None (no pattern matched).
    """

    def __init__(self, root_path: Path, case_sensitive: bool = True):
        """
        Initialize the GitignoreManager.

        Args:
            root_path: Root directory for pattern matching
            case_sensitive: Whether matching is case-sensitive
        """
        self._root_path = Path(root_path).resolve()
        self._case_sensitive = case_sensitive
        self._patterns: list[GitignorePattern] = []

    def load_gitignore(self, gitignore_path: Path, source_depth: int | None = None) -> int:
        """
        Load patterns from a gitignore-syntax file.

        Args:
            gitignore_path: Path to the file
            source_depth: Scope override; None derives it from the file location

        Returns:
            Number of patterns loaded

        Raises:
            No exceptions - errors are logged and the method returns 0
        """
        gitignore_path = Path(gitignore_path).resolve()

        if not gitignore_path.is_file():
            logger.debug(f"Ignore file not found: {gitignore_path}")
            return 0

        if source_depth is None:
            try:
                rel_path = gitignore_path.parent.relative_to(self._root_path)
                source_depth = len(rel_path.parts)
            except ValueError:
                source_depth = 0

        try:
            content = gitignore_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.warning(f"Invalid UTF-8 encoding in {gitignore_path}: {e}")
            return 0
        except PermissionError as e:
            logger.warning(f"Permission denied reading {gitignore_path}: {e}")
            return 0
        except OSError as e:
            logger.warning(f"Error reading {gitignore_path}: {e}")
            return 0

        return self.add_lines(content.splitlines(), gitignore_path, source_depth)

    def add_lines(self, lines: list[str], source_path: Path, source_depth: int = 0) -> int:
        """
        Parse and append gitignore lines as if read from ``source_path``.

        Returns:
            Number of patterns added
        """
        patterns_loaded = 0

        for line in lines:
            line = line.strip()

            if not line or line.startswith("#"):
                continue

            try:
                pattern = GitignorePattern.parse(
                    line, source_path, source_depth, case_sensitive=self._case_sensitive
                )
            except ValueError as e:
                logger.warning(f"Malformed pattern '{line}' in {source_path}: {e}")
                continue

            self._patterns.append(pattern)
            patterns_loaded += 1

        if patterns_loaded > 0:
            logger.debug(f"Loaded {patterns_loaded} patterns from {source_path}")

        return patterns_loaded

    def load_gitignore_hierarchy(
        self,
        root_path: Path | None = None,
        prune: Callable[[str], bool] | None = None,
    ) -> int:
        """
        Load .gitignore files from root and all subdirectories.

        Also loads ``.git/info/exclude`` when present. The walk is top-down,
        so a directory's ignore file is loaded before any of its
        descendants' and deeper patterns take precedence over shallower
        ones. Directories ignored by the patterns loaded so far, or for
        which ``prune`` returns True, are never listed.

        Args:
            root_path: Root directory to scan (defaults to manager's root_path)
            prune: Optional predicate over a directory path relative to the
                manager's root; True skips the directory and its subtree

        Returns:
            Total number of patterns loaded
        """
        if root_path is None:
            root_path = self._root_path
        else:
            root_path = Path(root_path).resolve()

        total_patterns = 0

        exclude_path = root_path / ".git" / "info" / "exclude"
        if exclude_path.is_file():
            total_patterns += self.load_gitignore(exclude_path, source_depth=0)

        for dirpath, dirnames, filenames in root_path.walk(on_error=self._log_walk_error):
            if GITIGNORE_FILENAME in filenames:
                total_patterns += self.load_gitignore(dirpath / GITIGNORE_FILENAME)

            dirnames[:] = [
                d for d in sorted(dirnames)
                if d not in _HIERARCHY_SKIP_DIRS and not self._prunes(dirpath / d, prune)
            ]

        logger.debug(f"Total patterns loaded from hierarchy: {total_patterns}")
        return total_patterns

    def _prunes(self, directory: Path, prune: Callable[[str], bool] | None) -> bool:
        try:
            rel_path_str = normalize_path(directory.relative_to(self._root_path))
        except ValueError:
            return False

        if prune is not None and prune(rel_path_str):
            logger.debug(f"Not searching ignored directory for ignore files: {rel_path_str}")
            return True
        return self.matches(rel_path_str, is_dir=True) is True

    @staticmethod
    def _log_walk_error(error: OSError) -> None:
        logger.warning(f"Error scanning directory for ignore files: {error}")

    @property
    def pattern_count(self) -> int:
        """Return the number of loaded patterns."""
        return len(self._patterns)

    @property
    def patterns(self) -> list[GitignorePattern]:
        """Return a copy of the loaded patterns."""
        return list(self._patterns)

    def matches(self, path: Path | str, is_dir: bool = False) -> bool | None:
        """
        Check a path against the loaded patterns.

        Patterns are applied in order, with negation patterns able to
        re-include previously excluded files. The last matching pattern wins.

        Args:
            path: Path to check (absolute, or relative to root)
            is_dir: True if the path is a directory

        Returns:
            True if ignored, False if re-included by a negation pattern,
            None if no pattern matched
        """
        path = Path(path)
        try:
            rel_path = path.relative_to(self._root_path) if path.is_absolute() else path
        except ValueError:
            return None

        rel_path_str = normalize_path(rel_path)
        if not self._case_sensitive:
            rel_path_str = rel_path_str.lower()

        decision: bool | None = None
        for pattern in self._patterns:
            if self._pattern_matches(pattern, rel_path_str, is_dir):
                decision = not pattern.negation

        return decision

    def is_ignored(self, path: Path | str, is_dir: bool = False) -> bool:
        """Boolean view of ``matches``: True only when the path is ignored."""
        return self.matches(path, is_dir=is_dir) is True

    def _pattern_matches(self, pattern: GitignorePattern, rel_path_str: str, is_dir: bool) -> bool:
        """
        Check if a single pattern matches the given path.

        Patterns from a nested ignore file only apply to files under the
        directory containing that file, and are matched against the path
        relative to that directory.
        """
        scoped_path_str = rel_path_str
        if pattern.source_depth > 0:
            source_dir = self._get_pattern_source_dir(pattern)
            if source_dir:
                if not self._case_sensitive:
                    source_dir = source_dir.lower()
                if not rel_path_str.startswith(source_dir + "/"):
                    return False
                scoped_path_str = rel_path_str[len(source_dir) + 1:]

        if not scoped_path_str or pattern.spec is None:
            return False

        if is_dir:
            scoped_path_str += "/"
        return pattern.spec.match_file(scoped_path_str)

    def _get_pattern_source_dir(self, pattern: GitignorePattern) -> str | None:
        """
        Get the directory containing the pattern's source file relative to
        the root path, or None if at root.
        """
        if pattern.source_depth <= 0:
            return None

        try:
            return normalize_path(pattern.source_path.parent.relative_to(self._root_path))
        except ValueError:
            return None
