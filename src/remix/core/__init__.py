"""
Core Layer - Ignore resolution, file classification, content transformation
and sensitive content detection.
"""

from remix.core.file_scanner import (
    BUILTIN_EXCLUDED_DIRS,
    BUILTIN_EXCLUDED_EXTENSIONS,
    DEFAULT_IGNORE_PATTERNS,
    CandidatePath,
    FileClassifier,
    FileClassifierInterface,
    FileRecord,
    FileScanner,
    FileScannerInterface,
)
from remix.core.comment_stripper import is_comment_removal_supported, strip_comments
from remix.core.compressor import compress
from remix.core.config import (
    IgnoreConfig,
    LoggingConfig,
    OutputConfig,
    ProcessingConfig,
    RemixConfig,
    SecurityConfig,
    load_config,
)
from remix.core.errors import (
    ConfigError,
    FileAccessError,
    PatternError,
    RemixError,
    RootPathError,
    SensitiveScanError,
)
from remix.core.ignore_resolver import IgnoreDecision, IgnoreResolver, should_include
from remix.core.pattern_matcher import PatternMatcher, matches
from remix.core.sensitive_scanner import SensitiveContentScanner, check_sensitive_content

__all__ = [
    # Config
    "RemixConfig",
    "IgnoreConfig",
    "SecurityConfig",
    "OutputConfig",
    "ProcessingConfig",
    "LoggingConfig",
    "load_config",
    # Errors
    "RemixError",
    "RootPathError",
    "FileAccessError",
    "PatternError",
    "ConfigError",
    "SensitiveScanError",
    # FileScanner
    "CandidatePath",
    "FileRecord",
    "FileScannerInterface",
    "FileScanner",
    "FileClassifierInterface",
    "FileClassifier",
    "BUILTIN_EXCLUDED_DIRS",
    "BUILTIN_EXCLUDED_EXTENSIONS",
    "DEFAULT_IGNORE_PATTERNS",
    # Ignore layers
    "IgnoreDecision",
    "IgnoreResolver",
    "PatternMatcher",
    "matches",
    "should_include",
    # Transformation
    "strip_comments",
    "is_comment_removal_supported",
    "compress",
    # Security
    "SensitiveContentScanner",
    "check_sensitive_content",
]
