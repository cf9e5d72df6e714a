"""
Packing Service for Remix.

Coordinates the packing workflow: directory walk through the ignore
layers, binary/text classification, content transformation, the
sensitive content check and the aggregate summary.

Per-file work (classification, read and transform) fans out over a
bounded ThreadPoolExecutor; the directory-wide security check runs as one
more task on the same pool and overlaps with it. The summary is computed
only after every per-file result has been collected.
"""

import logging
import posixpath
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from remix.core.comment_stripper import is_comment_removal_supported, strip_comments
from remix.core.compressor import compress
from remix.core.config import RemixConfig
from remix.core.errors import ConfigError, FileAccessError, RootPathError, SensitiveScanError
from remix.core.file_scanner import (
    CandidatePath,
    FileClassifier,
    FileClassifierInterface,
    FileRecord,
    FileScanner,
    FileScannerInterface,
)
from remix.core.path_utils import validate_scan_root
from remix.core.sensitive_scanner import SensitiveContentScanner, check_sensitive_content
from remix.services.packing_models import (
    PackedRepository,
    SecurityCheckStatus,
    Summary,
    TransformedFile,
)

logger = logging.getLogger(__name__)

# Include-pattern markers that ask for binary files to be listed on purpose
BINARY_INCLUDE_MARKERS: tuple[str, ...] = ("*.bin", "binary")


def generate_summary(files: list[TransformedFile], binary_file_count: int) -> Summary:
    """
    Compute aggregate statistics over the final text-file set.

    ``directory_count`` counts distinct parent directories; files at the
    root contribute the root itself.
    """
    directories = {posixpath.dirname(f.relative_path) for f in files}
    extensions = sorted({f.extension for f in files if f.extension})

    return Summary(
        file_count=len(files),
        total_size=sum(f.size_bytes for f in files),
        directory_count=len(directories),
        distinct_extensions=extensions,
        binary_file_count=binary_file_count,
    )


def resolve_instruction(config: RemixConfig) -> Optional[str]:
    """
    Return the instruction text for a packing run.

    The content of ``output.instruction_file_path`` wins when that file is
    readable; otherwise the inline ``instruction`` is used.
    """
    instruction_file = config.output.instruction_file_path
    if not instruction_file:
        return config.instruction

    path = Path(instruction_file)
    if not path.is_file():
        logger.warning(f"Instruction file not found: {instruction_file}")
        return config.instruction

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read instruction file {instruction_file}: {e}")
        return config.instruction

    logger.debug(f"Read instruction file: {instruction_file}")
    return content


class PackingService:
    """
    Service for packing a repository into an in-memory file set.

    Shared collaborators (config, resolver, classifier) are only read by
    worker threads; each worker returns its own result object.
    """

    def __init__(
        self,
        config: Optional[RemixConfig] = None,
        file_scanner: Optional[FileScannerInterface] = None,
        file_classifier: Optional[FileClassifierInterface] = None,
        sensitive_scanner: Optional[SensitiveContentScanner] = None,
    ):
        """
        Initialize the packing service.

        Args:
            config: Packing configuration (default: bundled defaults)
            file_scanner: Walk implementation (default: FileScanner)
            file_classifier: Classifier (default: FileClassifier)
            sensitive_scanner: Directory-wide scan (default: SensitiveContentScanner)

        Raises:
            ConfigError: If processing.max_workers is not positive
        """
        self._config = config or RemixConfig()
        if self._config.processing.max_workers < 1:
            raise ConfigError(
                f"processing.max_workers must be positive, got {self._config.processing.max_workers}"
            )
        self._file_scanner = file_scanner or FileScanner(self._config)
        self._file_classifier = file_classifier or FileClassifier()
        self._sensitive_scanner = sensitive_scanner or SensitiveContentScanner()
        self._force_binary = any(
            marker in pattern
            for pattern in self._config.include
            for marker in BINARY_INCLUDE_MARKERS
        )

    @property
    def config(self) -> RemixConfig:
        return self._config

    def pack(self, root_path: Path | str) -> PackedRepository:
        """
        Pack the repository at ``root_path``.

        Args:
            root_path: Directory to pack

        Returns:
            PackedRepository with files sorted by relative path

        Raises:
            RootPathError: If the root is missing, not a directory or unreadable
        """
        validation = validate_scan_root(root_path)
        if not validation.valid:
            raise RootPathError(validation.error_message)

        root_path = Path(root_path).resolve()
        logger.info(f"Packing repository at {root_path}")

        security_enabled = self._config.security.enable_security_check

        with ThreadPoolExecutor(max_workers=self._config.processing.max_workers) as executor:
            security_future: Future | None = None
            if security_enabled:
                security_future = executor.submit(self._sensitive_scanner.scan, root_path)

            candidates = self._file_scanner.scan(root_path)
            logger.debug(f"Found {len(candidates)} files to process")

            records = [r for r in executor.map(self._classify, candidates) if r is not None]
            binary_files = sorted(r.relative_path for r in records if r.is_binary)
            text_records = [r for r in records if not r.is_binary]

            transformed = [
                f for f in executor.map(self._read_and_transform, text_records) if f is not None
            ]

            if security_future is None:
                suspicious, status = None, SecurityCheckStatus.disabled()
            else:
                suspicious, status = self._collect_security_result(security_future)

        files = sorted(transformed, key=lambda f: f.relative_path)
        logger.info(f"Processed {len(files)} files")

        return PackedRepository(
            files=files,
            summary=generate_summary(files, len(binary_files)),
            binary_files=binary_files,
            suspicious_files=suspicious,
            security_status=status,
            instruction=resolve_instruction(self._config),
        )

    def _classify(self, candidate: CandidatePath) -> FileRecord | None:
        """Classify one candidate; None drops it from the run."""
        try:
            size_bytes = self._file_classifier.file_size(candidate)
            if size_bytes > self._config.max_file_size:
                logger.debug(
                    f"Skipping large file ({size_bytes} bytes): {candidate.relative_path}"
                )
                return None
            record = self._file_classifier.classify(candidate, size_bytes=size_bytes)
        except FileAccessError as e:
            logger.warning(f"Skipping {candidate.relative_path}: {e}")
            return None

        if record.is_binary and not self._force_binary:
            logger.debug(f"Skipping binary file content: {record.relative_path}")
        return record

    def _read_and_transform(self, record: FileRecord) -> TransformedFile | None:
        """Read one text file and apply the configured transformation."""
        try:
            with open(record.absolute_path, encoding="utf-8", newline="") as f:
                content = f.read()
        except UnicodeDecodeError as e:
            logger.warning(f"Failed to decode file as UTF-8: {record.relative_path} - {e}")
            return None
        except OSError as e:
            logger.warning(f"Error reading file: {record.relative_path} - {e}")
            return None

        if self._config.security.enable_security_check and check_sensitive_content(content):
            logger.warning(f"Skipping file with sensitive content: {record.relative_path}")
            return None

        extension = record.extension
        if self._config.compress:
            content = compress(content)
        elif self._config.output.remove_comments and is_comment_removal_supported(extension):
            content = strip_comments(content, extension)

        return TransformedFile(
            relative_path=record.relative_path,
            extension=extension,
            content=content,
            size_bytes=record.size_bytes,
            is_binary=False,
        )

    def _collect_security_result(
        self, future: Future
    ) -> tuple[list[str] | None, SecurityCheckStatus]:
        try:
            found = future.result()
        except (SensitiveScanError, OSError) as e:
            logger.warning(f"Security check failed: {e}")
            return None, SecurityCheckStatus.failed(str(e))

        if not found:
            return None, SecurityCheckStatus.clean()

        logger.info(
            f"Found {len(found)} suspicious files that may contain sensitive information"
        )
        return sorted(found), SecurityCheckStatus.findings()
