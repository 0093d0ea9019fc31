from .models import (
    BinaryDetection,
    DiffGenerationResult,
    ExcludedFile,
    ExclusionReason,
    ExclusionRule,
    ExclusionSummary,
)
from .orchestrator import DiffOrchestrator, generate_diff

__all__ = [
    "BinaryDetection",
    "DiffGenerationResult",
    "ExcludedFile",
    "ExclusionReason",
    "ExclusionRule",
    "ExclusionSummary",
    "DiffOrchestrator",
    "generate_diff",
]
