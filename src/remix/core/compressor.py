"""
Structural compression: a lossy line filter that keeps declarations and
signatures so large files read as a denser outline.

This is a heuristic, not a parser; the output is not expected to be
syntactically valid.
"""

# Files with fewer lines are returned unmodified
MIN_COMPRESSION_LINES = 10

# Line prefixes (after stripping indentation) that mark structural lines
STRUCTURAL_PREFIXES: tuple[str, ...] = (
    "fn ",
    "pub fn ",
    "class ",
    "interface ",
    "trait ",
    "struct ",
    "enum ",
    "type ",
    "pub struct ",
    "pub enum ",
    "export ",
    "import ",
    "use ",
    "const ",
    "let ",
    "var ",
    "function ",
    "def ",
    "async def ",
    "from ",
    "package ",
    "func ",
)

BRACE_LINES = frozenset(["{", "}"])


def is_structural(stripped_line: str) -> bool:
    """True if an indentation-stripped line is always kept."""
    if stripped_line.startswith(STRUCTURAL_PREFIXES):
        return True
    if stripped_line in BRACE_LINES:
        return True
    return "impl" in stripped_line or " for " in stripped_line


def compress(content: str) -> str:
    """
    Reduce ``content`` to its structural outline.

    Rules, applied per line:
    - runs of blank lines collapse to one
    - full-line ``//`` comments are dropped
    - ``/* ... */`` blocks are kept verbatim
    - structural lines (see ``STRUCTURAL_PREFIXES``, brace-only lines,
      lines mentioning ``impl`` or `` for ``) are kept
    - any other line is kept only if it contains ``(`` or ``)``

    Args:
        content: Source text

    Returns:
        Compressed text; unchanged if shorter than MIN_COMPRESSION_LINES
    """
    # Only "\n" ends a line; a "\r" before it stays with the line text
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    if len(lines) < MIN_COMPRESSION_LINES:
        return content

    kept: list[str] = []
    in_block_comment = False
    blank_run = 0

    for line in lines:
        stripped = line.strip()

        if in_block_comment:
            kept.append(line)
            if stripped.endswith("*/"):
                in_block_comment = False
            continue

        if stripped.startswith("/*"):
            kept.append(line)
            if not stripped.endswith("*/") or stripped == "/*/":
                in_block_comment = True
            continue

        if not stripped:
            blank_run += 1
            if blank_run == 1:
                kept.append(line)
            continue
        blank_run = 0

        if stripped.startswith("//"):
            continue

        if is_structural(stripped) or "(" in stripped or ")" in stripped:
            kept.append(line)

    result = "\n".join(kept)
    if content.endswith("\n"):
        result += "\n"
    return result
