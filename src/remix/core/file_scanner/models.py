"""
Data models and constants for the file scanner module.
"""

from dataclasses import dataclass
from pathlib import Path

# Name of the project-local ignore file (gitignore syntax)
LOCAL_IGNORE_FILENAME = ".remixignore"

# Directories that are ALWAYS excluded regardless of user config.
# The walk never descends into them.
BUILTIN_EXCLUDED_DIRS: frozenset[str] = frozenset([
    ".git",
    "target",
    "node_modules",
    "dist",
    "build",
])

# File extensions that are ALWAYS excluded regardless of user config
BUILTIN_EXCLUDED_EXTENSIONS: frozenset[str] = frozenset([
    ".exe",
    ".o",
    ".obj",
    ".dll",
    ".so",
    ".dylib",
    ".class",
    ".jar",
    ".war",
    ".zip",
    ".tar",
    ".gz",
    ".rar",
    ".7z",
    ".pyc",
])

# Broader default ignore set, toggled by ignore.use_default_patterns.
# Glob syntax; a trailing slash covers the directory and its contents.
DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    # Version control metadata
    "**/.git/",
    "**/.gitignore",
    "**/.gitattributes",
    "**/.github/",
    "**/.gitmodules",
    "**/.gitkeep",
    # Build output
    "**/target/",
    "**/dist/",
    "**/build/",
    "**/bin/",
    "**/obj/",
    # Dependencies and environments
    "**/node_modules/",
    "**/vendor/",
    "**/package-lock.json",
    "**/bun.lockb",
    "**/bun.lock",
    "**/Cargo.lock",
    "**/.venv/",
    "**/.conda/",
    "**/.mamba/",
    "**/.pyenv/",
    "**/__pycache__/",
    # Editors
    "**/.idea/",
    "**/.vscode/",
    # Logs, secrets and compiled artifacts
    "**/*.log",
    "**/.env",
    "**/*.exe",
    "**/*.o",
    "**/*.so",
    "**/*.dll",
    "**/*.dylib",
    "**/*.lib",
    "**/*.a",
    "**/*.zip",
    "**/*.tar",
    "**/*.gz",
    "**/*.rar",
    "**/*.7z",
    "**/*.jar",
    "**/*.class",
    "**/*.pyc",
)


@dataclass(frozen=True)
class CandidatePath:
    """
    A filesystem entry discovered by the walk, before any inclusion decision.

    Attributes:
        absolute_path: Absolute path to the entry
        relative_path: Path relative to the scan root, forward slashes
        is_dir: True if the entry is a directory
    """

    absolute_path: Path
    relative_path: str
    is_dir: bool = False

    @property
    def name(self) -> str:
        return self.absolute_path.name


@dataclass(frozen=True)
class FileRecord:
    """
    Metadata for a file that survived the ignore layers.

    Attributes:
        relative_path: Path relative to the scan root, forward slashes
        absolute_path: Absolute path to the file
        size_bytes: File size in bytes
        mime_type: Media type sniffed from the file content
        is_binary: True if the media type marks the file as binary
    """

    relative_path: str
    absolute_path: Path
    size_bytes: int
    mime_type: str
    is_binary: bool

    @property
    def extension(self) -> str:
        """Lowercase extension without the dot ('' if none)."""
        return self.absolute_path.suffix.lower().lstrip(".")
