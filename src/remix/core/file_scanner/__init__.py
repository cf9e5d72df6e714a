"""
FileScanner module for Remix.

Provides the deterministic directory walk over the ignore layers and
content-sniffed binary/text classification of the surviving files.
"""

from .classifier import FileClassifier, is_binary_mime
from .interfaces import FileClassifierInterface, FileScannerInterface
from .models import (
    BUILTIN_EXCLUDED_DIRS,
    BUILTIN_EXCLUDED_EXTENSIONS,
    DEFAULT_IGNORE_PATTERNS,
    LOCAL_IGNORE_FILENAME,
    CandidatePath,
    FileRecord,
)
from .scanner import FileScanner

__all__ = [
    # Main classes
    "FileScanner",
    "FileClassifier",
    "FileScannerInterface",
    "FileClassifierInterface",
    "CandidatePath",
    "FileRecord",
    "is_binary_mime",
    # Constants
    "BUILTIN_EXCLUDED_DIRS",
    "BUILTIN_EXCLUDED_EXTENSIONS",
    "DEFAULT_IGNORE_PATTERNS",
    "LOCAL_IGNORE_FILENAME",
]
