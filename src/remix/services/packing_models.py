"""
Packing Service data models.

Contains dataclasses for transformed files, the aggregate summary, the
security check status and the packed repository handed to formatters.
"""

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class TransformedFile:
    """A packed text file with its (possibly transformed) content."""

    relative_path: str
    extension: str
    content: str
    size_bytes: int
    is_binary: bool = False


@dataclass(frozen=True)
class Summary:
    """Aggregate statistics over the packed text files."""

    file_count: int = 0
    total_size: int = 0
    directory_count: int = 0
    distinct_extensions: list[str] = field(default_factory=list)
    binary_file_count: int = 0


class SecurityCheckState(Enum):
    """Outcome of the directory-wide sensitive content scan."""

    DISABLED = "disabled"
    CLEAN = "clean"
    FINDINGS = "findings"
    FAILED = "failed"


@dataclass(frozen=True)
class SecurityCheckStatus:
    """Security check state plus the failure reason, if any."""

    state: SecurityCheckState
    reason: str | None = None

    @classmethod
    def disabled(cls) -> "SecurityCheckStatus":
        return cls(SecurityCheckState.DISABLED)

    @classmethod
    def clean(cls) -> "SecurityCheckStatus":
        return cls(SecurityCheckState.CLEAN)

    @classmethod
    def findings(cls) -> "SecurityCheckStatus":
        return cls(SecurityCheckState.FINDINGS)

    @classmethod
    def failed(cls, reason: str) -> "SecurityCheckStatus":
        return cls(SecurityCheckState.FAILED, reason)


@dataclass
class PackedRepository:
    """
    Result of a packing run.

    Attributes:
        files: Text files sorted by relative path
        summary: Aggregate statistics computed after all files were processed
        binary_files: Relative paths of binary files (sorted, never read)
        suspicious_files: Relative paths flagged by the security check, or
            None when the check is disabled, failed or found nothing
        security_status: Outcome of the security check
        instruction: Optional instruction text for downstream consumers
    """

    files: list[TransformedFile] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    binary_files: list[str] = field(default_factory=list)
    suspicious_files: list[str] | None = None
    security_status: SecurityCheckStatus = field(default_factory=SecurityCheckStatus.disabled)
    instruction: str | None = None
