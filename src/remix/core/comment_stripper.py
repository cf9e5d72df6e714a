"""
Comment stripping for packed source files.

One lexical pass per comment-syntax family rather than per language:

- C family: character automaton with five named states and a pure
  transition function, so single-character edge cases (escape pairs,
  adjacent delimiters) can be tested without any I/O.
- Hash family (Python, Ruby) and its shell and YAML variants: line
  oriented heuristics.
- PHP: the C-family pass followed by the hash pass.
- HTML/XML/SVG: five-state automaton for ``<!--`` ... ``-->``.
- CSS family: literal ``/*`` ... ``*/`` pairs.

These are lexical approximations, not parsers. Callers select the family
with the lowercase file extension; unknown extensions pass through
unchanged.
"""

import logging
from enum import Enum
from typing import Callable, Iterator, NamedTuple

logger = logging.getLogger(__name__)

C_FAMILY_TAGS: frozenset[str] = frozenset(
    ["rs", "js", "ts", "jsx", "tsx", "c", "cpp", "h", "hpp", "cs", "java", "go", "swift", "kt"]
)
HASH_FAMILY_TAGS: frozenset[str] = frozenset(["py", "rb"])
SHELL_TAGS: frozenset[str] = frozenset(["sh", "bash"])
YAML_TAGS: frozenset[str] = frozenset(["yaml", "yml"])
PHP_TAGS: frozenset[str] = frozenset(["php"])
MARKUP_TAGS: frozenset[str] = frozenset(["html", "xml", "svg"])
CSS_TAGS: frozenset[str] = frozenset(["css", "scss", "sass", "less"])

TRIPLE_QUOTES: tuple[str, ...] = ('"""', "'''")

# Commands whose arguments commonly carry a literal '#'
SHELL_ECHO_COMMANDS: tuple[str, ...] = ("echo", "printf")


# ---------------------------------------------------------------------------
# C family
# ---------------------------------------------------------------------------


class CState(Enum):
    """Lexical states of the C-family automaton."""

    NORMAL = "normal"
    DOUBLE_QUOTED = "double_quoted"
    SINGLE_QUOTED = "single_quoted"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"


class Step(NamedTuple):
    """Result of one automaton step."""

    state: CState
    output: str
    consumed: int


def c_transition(state: CState, ch: str, nxt: str | None) -> Step:
    """
    Advance the C-family automaton by one input position.

    Args:
        state: Current state
        ch: Character at the current position
        nxt: Following character, or None at end of input

    Returns:
        Step with the next state, the text to emit and how many characters
        were consumed (1, or 2 for escape pairs and two-character delimiters)

    Example:
        >>> c_transition(CState.NORMAL, "/", "/")
        Step(state=<CState.LINE_COMMENT: 'line_comment'>, output='', consumed=2)
    """
    if state is CState.NORMAL:
        if ch == "/" and nxt == "/":
            return Step(CState.LINE_COMMENT, "", 2)
        if ch == "/" and nxt == "*":
            return Step(CState.BLOCK_COMMENT, "", 2)
        if ch == '"':
            return Step(CState.DOUBLE_QUOTED, ch, 1)
        if ch == "'":
            return Step(CState.SINGLE_QUOTED, ch, 1)
        return Step(CState.NORMAL, ch, 1)

    if state is CState.DOUBLE_QUOTED:
        if ch == "\\" and nxt is not None:
            return Step(state, ch + nxt, 2)
        if ch == '"':
            return Step(CState.NORMAL, ch, 1)
        return Step(state, ch, 1)

    if state is CState.SINGLE_QUOTED:
        if ch == "\\" and nxt is not None:
            return Step(state, ch + nxt, 2)
        # A char literal never spans lines; a lone quote (Rust lifetime,
        # apostrophe) must not swallow the rest of the file.
        if ch == "'" or ch == "\n":
            return Step(CState.NORMAL, ch, 1)
        return Step(state, ch, 1)

    if state is CState.LINE_COMMENT:
        if ch == "\n":
            return Step(CState.NORMAL, ch, 1)
        return Step(state, "", 1)

    # BLOCK_COMMENT
    if ch == "*" and nxt == "/":
        return Step(CState.NORMAL, "", 2)
    if ch == "\n":
        return Step(state, ch, 1)
    return Step(state, "", 1)


def strip_c_family(content: str) -> str:
    """Remove ``//`` and ``/* */`` comments, keeping string literals and newlines."""
    output: list[str] = []
    state = CState.NORMAL
    i = 0
    n = len(content)

    while i < n:
        nxt = content[i + 1] if i + 1 < n else None
        state, emitted, consumed = c_transition(state, content[i], nxt)
        output.append(emitted)
        i += consumed

    return "".join(output)


# ---------------------------------------------------------------------------
# Line-oriented families
# ---------------------------------------------------------------------------


def _iter_lines(content: str) -> Iterator[tuple[str, str]]:
    """Yield ``(body, ending)`` pairs; joining them reproduces ``content``."""
    lines = content.split("\n")
    last = len(lines) - 1
    for index, line in enumerate(lines):
        ending = "\n" if index < last else ""
        if line.endswith("\r"):
            line, ending = line[:-1], "\r" + ending
        yield line, ending


def _comment_index(line: str) -> int | None:
    """
    Index of the first ``#`` that starts a comment, or None.

    A ``#`` preceded by an odd number of quote characters (``'`` or ``"``)
    on the same line is treated as part of a string.
    """
    index = line.find("#")
    while index >= 0:
        preceding = line[:index]
        if (preceding.count('"') + preceding.count("'")) % 2 == 0:
            return index
        index = line.find("#", index + 1)
    return None


def _first_triple_quote(line: str, end: int | None = None) -> str | None:
    """Return the triple-quote delimiter that occurs first in ``line[:end]``."""
    region = line if end is None else line[:end]
    found = [(region.find(d), d) for d in TRIPLE_QUOTES if d in region]
    return min(found)[1] if found else None


def _count_unescaped(line: str, delimiter: str) -> int:
    count = 0
    start = 0
    while True:
        index = line.find(delimiter, start)
        if index < 0:
            return count
        if index == 0 or line[index - 1] != "\\":
            count += 1
        start = index + len(delimiter)


def strip_hash_family(content: str) -> str:
    """
    Remove ``#`` comments from Python and Ruby sources.

    Lines inside a triple-quoted string are kept verbatim; the string stays
    open while the delimiter has been seen an odd number of times. A line
    that opens a triple-quoted string before any comment is kept whole.
    Elsewhere a line is cut at its first ``#`` preceded by an even number
    of quote characters.
    """
    output: list[str] = []
    open_delimiter: str | None = None

    for line, ending in _iter_lines(content):
        if open_delimiter is not None:
            if _count_unescaped(line, open_delimiter) % 2 == 1:
                open_delimiter = None
            output.append(line + ending)
            continue

        comment_index = _comment_index(line)
        delimiter = _first_triple_quote(line, comment_index)
        if delimiter is not None:
            if _count_unescaped(line, delimiter) % 2 == 1:
                open_delimiter = delimiter
            output.append(line + ending)
        elif comment_index is not None:
            output.append(line[:comment_index] + ending)
        else:
            output.append(line + ending)

    return "".join(output)


def strip_shell(content: str) -> str:
    """
    Remove ``#`` comments from shell scripts.

    A line is kept whole when the text before its first ``#`` contains
    ``echo`` or ``printf``. A shebang on the first line is kept.
    """
    output: list[str] = []

    for index, (line, ending) in enumerate(_iter_lines(content)):
        comment_index = line.find("#")
        if comment_index < 0 or (index == 0 and line.startswith("#!")):
            output.append(line + ending)
            continue

        preceding = line[:comment_index]
        if any(command in preceding for command in SHELL_ECHO_COMMANDS):
            output.append(line + ending)
        else:
            output.append(preceding + ending)

    return "".join(output)


def strip_yaml(content: str) -> str:
    """Drop everything from the first ``#`` on each line."""
    output: list[str] = []
    for line, ending in _iter_lines(content):
        comment_index = line.find("#")
        output.append((line if comment_index < 0 else line[:comment_index]) + ending)
    return "".join(output)


def strip_php(content: str) -> str:
    """C-family pass, then ``#`` comments outside same-line strings."""
    output: list[str] = []
    for line, ending in _iter_lines(strip_c_family(content)):
        comment_index = _comment_index(line)
        output.append((line if comment_index is None else line[:comment_index]) + ending)
    return "".join(output)


# ---------------------------------------------------------------------------
# Markup and stylesheets
# ---------------------------------------------------------------------------


class MarkupState(Enum):
    """States of the HTML/XML comment automaton."""

    NORMAL = "normal"
    LT = "lt"
    LT_BANG = "lt_bang"
    LT_BANG_DASH = "lt_bang_dash"
    IN_COMMENT = "in_comment"


# Character that advances each opening state, and the state it leads to
_MARKUP_OPENING: dict[MarkupState, tuple[str, MarkupState]] = {
    MarkupState.NORMAL: ("<", MarkupState.LT),
    MarkupState.LT: ("!", MarkupState.LT_BANG),
    MarkupState.LT_BANG: ("-", MarkupState.LT_BANG_DASH),
    MarkupState.LT_BANG_DASH: ("-", MarkupState.IN_COMMENT),
}


def strip_markup(content: str) -> str:
    """
    Remove ``<!-- ... -->`` comments.

    Characters of a possible opener are held back until the opener either
    completes or fails; a failed prefix such as ``<!DOCTYPE`` is emitted
    unchanged. An unterminated comment runs to the end of the input.
    """
    output: list[str] = []
    pending: list[str] = []
    state = MarkupState.NORMAL
    dashes = 0

    for ch in content:
        if state is MarkupState.IN_COMMENT:
            if ch == ">" and dashes >= 2:
                state = MarkupState.NORMAL
            dashes = dashes + 1 if ch == "-" else 0
            continue

        expected, next_state = _MARKUP_OPENING[state]
        if ch == expected:
            pending.append(ch)
            state = next_state
            if state is MarkupState.IN_COMMENT:
                pending.clear()
                dashes = 0
            continue

        # Not an opener after all: release the held prefix and re-read ch
        output.extend(pending)
        pending.clear()
        if state is not MarkupState.NORMAL and ch == "<":
            pending.append(ch)
            state = MarkupState.LT
        else:
            output.append(ch)
            state = MarkupState.NORMAL

    output.extend(pending)
    return "".join(output)


def strip_css(content: str) -> str:
    """Remove ``/* ... */`` pairs; an unterminated comment runs to end of file."""
    output: list[str] = []
    position = 0

    while True:
        start = content.find("/*", position)
        if start < 0:
            output.append(content[position:])
            break
        output.append(content[position:start])
        end = content.find("*/", start + 2)
        if end < 0:
            break
        position = end + 2

    return "".join(output)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

_STRIPPERS: dict[str, Callable[[str], str]] = {}
for _tags, _stripper in (
    (C_FAMILY_TAGS, strip_c_family),
    (HASH_FAMILY_TAGS, strip_hash_family),
    (SHELL_TAGS, strip_shell),
    (YAML_TAGS, strip_yaml),
    (PHP_TAGS, strip_php),
    (MARKUP_TAGS, strip_markup),
    (CSS_TAGS, strip_css),
):
    for _tag in _tags:
        _STRIPPERS[_tag] = _stripper


def is_comment_removal_supported(language_tag: str) -> bool:
    """True if ``language_tag`` (a lowercase file extension) has a stripper."""
    return language_tag in _STRIPPERS


def strip_comments(content: str, language_tag: str) -> str:
    """
    Remove comments from ``content`` using the family for ``language_tag``.

    Args:
        content: Source text
        language_tag: Lowercase file extension without the dot (e.g. "rs")

    Returns:
        Content without comments, or the input unchanged when the tag is
        not supported
    """
    stripper = _STRIPPERS.get(language_tag)
    if stripper is None:
        logger.debug(f"No comment stripper for '{language_tag}', content left unchanged")
        return content
    return stripper(content)
