"""
Abstract interfaces for file scanning operations.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from .models import CandidatePath, FileRecord


class FileScannerInterface(ABC):
    """
    Abstract interface for the directory walk.

    Implementations traverse a root directory in a stable order and yield
    the files that survive the configured ignore layers.
    """

    @abstractmethod
    def scan(self, root_path: Path) -> list[CandidatePath]:
        """
        Walk a directory and collect candidate files.

        Args:
            root_path: Root directory to scan

        Returns:
            Candidate files sorted by relative path

        Notes:
            - Never descends into excluded directories
            - Never follows symlinks
            - Logs errors and continues on unreadable directories
        """
        pass


class FileClassifierInterface(ABC):
    """Abstract interface for metadata and binary/text classification."""

    @abstractmethod
    def file_size(self, candidate: CandidatePath) -> int:
        """
        Return the candidate's size in bytes without reading its content.

        Raises:
            FileAccessError: If the file metadata cannot be read
        """
        pass

    @abstractmethod
    def classify(self, candidate: CandidatePath, size_bytes: int | None = None) -> FileRecord:
        """
        Compute the FileRecord for a candidate file.

        Raises:
            FileAccessError: If the file metadata cannot be read
        """
        pass
