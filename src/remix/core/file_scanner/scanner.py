"""
FileScanner implementation for the deterministic directory walk.
"""

import logging
from pathlib import Path

from remix.core.config import RemixConfig
from remix.core.errors import RootPathError
from remix.core.ignore_resolver import IgnoreResolver
from remix.core.path_utils import to_relative_posix, validate_scan_root

from .interfaces import FileScannerInterface
from .models import CandidatePath

logger = logging.getLogger(__name__)


class FileScanner(FileScannerInterface):
    """
    Concrete implementation of FileScannerInterface.

    Walks the tree single-threaded with entries sorted by name, so the
    candidate order is reproducible. Provides:
    - Pruning of ignored directories before descending
    - Hidden entries visited and filtered like any other path
    - Symlinks never followed
    - Graceful handling of unreadable subdirectories
    """

    def __init__(self, config: RemixConfig | None = None):
        """
        Initialize the FileScanner.

        Args:
            config: Packing configuration used to build the ignore layers.
                    If None, the bundled defaults are used.
        """
        self._config = config or RemixConfig()
        self._resolver: IgnoreResolver | None = None

    @property
    def resolver(self) -> IgnoreResolver | None:
        """Resolver of the most recent scan."""
        return self._resolver

    def scan(self, root_path: Path) -> list[CandidatePath]:
        """
        Walk ``root_path`` and return the files that survive every ignore
        layer and the include filter.

        Raises:
            RootPathError: If the root is missing, not a directory or unreadable
        """
        validation = validate_scan_root(root_path)
        if not validation.valid:
            raise RootPathError(validation.error_message)

        root_path = Path(root_path).resolve()
        self._resolver = IgnoreResolver(root_path, self._config)

        candidates: list[CandidatePath] = []
        self._scan_directory(root_path, root_path, candidates)
        logger.debug(f"Walk of {root_path} produced {len(candidates)} candidates")
        return candidates

    def _scan_directory(
        self, root_path: Path, current_path: Path, candidates: list[CandidatePath]
    ) -> None:
        try:
            entries = sorted(current_path.iterdir(), key=lambda p: p.name)
        except PermissionError as e:
            if current_path == root_path:
                raise RootPathError(f"Path '{root_path}' is not readable: {e}") from e
            logger.warning(f"Permission denied accessing directory: {current_path} - {e}")
            return
        except OSError as e:
            if current_path == root_path:
                raise RootPathError(f"Error reading '{root_path}': {e}") from e
            logger.warning(f"Error accessing directory: {current_path} - {e}")
            return

        for entry in entries:
            if entry.is_symlink():
                logger.debug(f"Skipping symlink: {entry}")
                continue

            relative_path = to_relative_posix(entry, root_path)

            if entry.is_dir():
                candidate = CandidatePath(entry, relative_path, is_dir=True)
                if self._resolver.should_prune(candidate):
                    logger.debug(f"Pruning directory: {relative_path}")
                    continue
                self._scan_directory(root_path, entry, candidates)
            elif entry.is_file():
                candidate = CandidatePath(entry, relative_path)
                if self._resolver.should_include(candidate):
                    candidates.append(candidate)
