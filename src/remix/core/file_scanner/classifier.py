"""
FileClassifier implementation: metadata plus content-sniffed binary detection.
"""

import logging
import os

import magic

from remix.core.errors import FileAccessError

from .interfaces import FileClassifierInterface
from .models import CandidatePath, FileRecord

logger = logging.getLogger(__name__)

# Fallback media type when libmagic cannot identify a file
UNKNOWN_MIME_TYPE = "application/octet-stream"

# application/* subtypes that are source text despite the top-level type.
# "x-empty" covers zero-byte files on libmagic builds that report them as
# application/x-empty.
TEXT_LIKE_SUBTYPES: tuple[str, ...] = ("json", "xml", "javascript", "typescript", "x-empty")

# Top-level media types that are always binary
BINARY_TOP_LEVEL_TYPES: frozenset[str] = frozenset(["image", "audio", "video"])


def is_binary_mime(mime_type: str) -> bool:
    """
    Decide binary vs. text from a sniffed media type.

    Binary iff the type is ``application/*`` with a subtype that is not
    text-like, or the top-level type is image, audio or video.

    Example:
        >>> is_binary_mime("application/json")
        False
        >>> is_binary_mime("application/octet-stream")
        True
    """
    top_level, _, subtype = mime_type.lower().partition("/")
    if top_level == "application":
        return not any(marker in subtype for marker in TEXT_LIKE_SUBTYPES)
    return top_level in BINARY_TOP_LEVEL_TYPES


class FileClassifier(FileClassifierInterface):
    """
    Concrete implementation of FileClassifierInterface.

    A single ``magic.Magic`` handle is shared by all workers; python-magic
    serializes access to it internally.
    """

    def __init__(self):
        self._magic = magic.Magic(mime=True)

    def sniff_mime_type(self, path: os.PathLike | str) -> str:
        """
        Return the media type of ``path`` from its content.

        Raises:
            FileAccessError: If the file cannot be opened
        """
        try:
            return self._magic.from_file(str(path))
        except OSError as e:
            raise FileAccessError(f"Cannot read {path}: {e}") from e
        except magic.MagicException as e:
            logger.debug(f"libmagic could not identify {path}: {e}")
            return UNKNOWN_MIME_TYPE

    def file_size(self, candidate: CandidatePath) -> int:
        """
        Return the size of a candidate file in bytes.

        Raises:
            FileAccessError: If the metadata cannot be read
        """
        try:
            return candidate.absolute_path.stat().st_size
        except OSError as e:
            raise FileAccessError(
                f"Cannot read metadata of {candidate.relative_path}: {e}"
            ) from e

    def classify(self, candidate: CandidatePath, size_bytes: int | None = None) -> FileRecord:
        """
        Compute the FileRecord for a candidate file.

        Args:
            candidate: File found by the walk
            size_bytes: Size already read by the caller, if any

        Returns:
            FileRecord with size and sniffed media type

        Raises:
            FileAccessError: If the file metadata or content cannot be read
                (permission denied, broken symlink, concurrent deletion)
        """
        if size_bytes is None:
            size_bytes = self.file_size(candidate)

        mime_type = self.sniff_mime_type(candidate.absolute_path)

        return FileRecord(
            relative_path=candidate.relative_path,
            absolute_path=candidate.absolute_path,
            size_bytes=size_bytes,
            mime_type=mime_type,
            is_binary=is_binary_mime(mime_type),
        )
