"""
Path validation utilities for Remix.

Provides scan root validation and the separator normalization shared by
every filtering layer.
"""

import os
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Optional


@dataclass
class PathValidationResult:
    """Result of path validation.

    Attributes:
        valid: True if the path can be used as a scan root.
        error_message: Human-readable error message if validation failed.
    """
    valid: bool
    error_message: Optional[str] = None


def normalize_path(path: str | PurePath) -> str:
    """
    Normalize a path string to forward-slash separators.

    Platform separators must never influence pattern matching, so both
    patterns and candidate paths go through this before comparison.
    """
    return str(path).replace("\\", "/")


def to_relative_posix(path: Path, root: Path) -> str:
    """
    Return ``path`` relative to ``root`` with forward slashes.

    Falls back to the normalized absolute path when ``path`` is not
    located under ``root``.
    """
    try:
        return normalize_path(path.relative_to(root))
    except ValueError:
        return normalize_path(path)


def validate_scan_root(path: str | Path) -> PathValidationResult:
    """
    Validate that a path is suitable as a packing root.

    Performs the following checks:
    1. Path exists
    2. Path is a directory
    3. Directory is readable and listable

    Args:
        path: Path to validate (string or Path object).

    Returns:
        PathValidationResult with valid=True if all checks pass,
        or valid=False with an appropriate error message.
    """
    try:
        p = Path(path) if isinstance(path, str) else path

        if not p.exists():
            return PathValidationResult(
                valid=False,
                error_message=f"Path '{path}' does not exist"
            )

        if not p.is_dir():
            return PathValidationResult(
                valid=False,
                error_message=f"Path '{path}' is not a directory"
            )

        if not os.access(p, os.R_OK | os.X_OK):
            return PathValidationResult(
                valid=False,
                error_message=f"Path '{path}' is not readable"
            )

        return PathValidationResult(valid=True)

    except (OSError, ValueError) as e:
        return PathValidationResult(
            valid=False,
            error_message=f"Invalid path '{path}': {e}"
        )
