"""
Services Layer - Packing orchestration over the core components.
"""

from remix.services.packing_models import (
    PackedRepository,
    SecurityCheckState,
    SecurityCheckStatus,
    Summary,
    TransformedFile,
)
from remix.services.packing_service import (
    PackingService,
    generate_summary,
    resolve_instruction,
)

__all__ = [
    # Models
    "PackedRepository",
    "SecurityCheckState",
    "SecurityCheckStatus",
    "Summary",
    "TransformedFile",
    # Service
    "PackingService",
    "generate_summary",
    "resolve_instruction",
]
