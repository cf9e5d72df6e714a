"""
PatternMatcher module for Remix.

Glob-style pattern matching used by every filtering layer that does not
follow gitignore semantics (built-in defaults, custom ignore patterns and
include patterns).

Supported syntax:
- ``*``   any run of characters except ``/`` (or including ``/`` when
          ``literal_separator`` is off)
- ``**``  any run of characters including ``/``; ``**/`` also matches
          zero directories
- ``?``   a single character (never ``/`` when ``literal_separator`` is on)
- ``[..]`` character class, ``[!..]`` or ``[^..]`` negated
- a trailing ``/`` matches the directory itself and everything below it

Patterns and paths are both normalized to forward slashes before
comparison.
"""

import logging
import re
from functools import lru_cache
from typing import Iterable

from remix.core.errors import PatternError
from remix.core.path_utils import normalize_path

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1024)
def translate(pattern: str, literal_separator: bool = True) -> str:
    """
    Translate a glob pattern into an anchored regular expression source.

    Args:
        pattern: Glob pattern (separators already normalized or not)
        literal_separator: If True, ``*`` and ``?`` never match ``/``

    Returns:
        Regular expression source suitable for ``re.fullmatch``

    Raises:
        PatternError: If the pattern contains an unterminated ``[`` class
    """
    pattern = normalize_path(pattern)
    if not pattern:
        raise PatternError("Empty pattern")

    directory_prefix = pattern.endswith("/") and pattern != "/"
    if directory_prefix:
        pattern = pattern.rstrip("/")

    any_char = "[^/]" if literal_separator else "."
    parts: list[str] = []
    i = 0
    n = len(pattern)

    while i < n:
        ch = pattern[i]
        if ch == "*":
            if i + 1 < n and pattern[i + 1] == "*":
                if i + 2 < n and pattern[i + 2] == "/":
                    parts.append("(?:.*/)?")
                    i += 3
                else:
                    parts.append(".*")
                    i += 2
                continue
            parts.append(any_char + "*")
        elif ch == "?":
            parts.append(any_char)
        elif ch == "[":
            end = i + 1
            if end < n and pattern[end] in "!^":
                end += 1
            if end < n and pattern[end] == "]":
                end += 1
            while end < n and pattern[end] != "]":
                end += 1
            if end >= n:
                raise PatternError(f"Unbalanced brackets in pattern '{pattern}'")
            body = pattern[i + 1:end]
            negated = body[:1] in ("!", "^")
            if negated:
                body = body[1:]
            body = body.replace("\\", "\\\\")
            parts.append("[" + ("^" if negated else "") + body + "]")
            i = end
        else:
            parts.append(re.escape(ch))
        i += 1

    source = "".join(parts)
    if directory_prefix:
        source += "/.*"
    return source


@lru_cache(maxsize=1024)
def _compile(pattern: str, case_sensitive: bool, literal_separator: bool) -> re.Pattern[str]:
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(translate(pattern, literal_separator), flags)


class PatternMatcher:
    """
    Glob matcher with fixed case and separator semantics.

    Instances are immutable and safe to share between worker threads; the
    compiled expressions live in a process-wide cache.

    Example:
        >>> PatternMatcher().matches("**/*.rs", "src/main.rs")
        True
        >>> PatternMatcher(case_sensitive=False).matches("*.MD", "readme.md")
        True
    """

    def __init__(self, case_sensitive: bool = True, literal_separator: bool = True):
        self._case_sensitive = case_sensitive
        self._literal_separator = literal_separator

    @property
    def case_sensitive(self) -> bool:
        return self._case_sensitive

    def validate(self, pattern: str) -> None:
        """Raise PatternError if ``pattern`` cannot be compiled."""
        _compile(normalize_path(pattern), self._case_sensitive, self._literal_separator)

    def matches(self, pattern: str, path: str) -> bool:
        """
        Check whether ``path`` matches ``pattern``.

        Args:
            pattern: Glob pattern
            path: Path relative to the scan root (any separator style)

        Returns:
            True if the whole path matches

        Raises:
            PatternError: If the pattern is invalid
        """
        regex = _compile(normalize_path(pattern), self._case_sensitive, self._literal_separator)
        return regex.fullmatch(normalize_path(path)) is not None

    def first_match(self, patterns: Iterable[str], path: str) -> str | None:
        """
        Return the first pattern that matches ``path``.

        Invalid patterns are logged and skipped rather than aborting the
        lookup.
        """
        for pattern in patterns:
            try:
                if self.matches(pattern, path):
                    return pattern
            except PatternError as e:
                logger.warning(f"Skipping invalid pattern '{pattern}': {e}")
        return None


def matches(
    pattern: str,
    path: str,
    case_sensitive: bool = True,
    literal_separator: bool = True,
) -> bool:
    """Module-level shortcut for ``PatternMatcher(...).matches``."""
    return PatternMatcher(case_sensitive, literal_separator).matches(pattern, path)
