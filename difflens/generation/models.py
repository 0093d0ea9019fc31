from enum import StrEnum

from pydantic import BaseModel, Field

from difflens.filters.models import BinaryDetection, ExclusionRule

__all__ = [
    "BinaryDetection",
    "DiffGenerationResult",
    "ExcludedFile",
    "ExclusionReason",
    "ExclusionRule",
    "ExclusionSummary",
]


class ExclusionReason(StrEnum):
    DELETED = "deleted"
    EXTENSION_FILTER = "extension_filter"
    FILE_SIZE = "file_size"
    BINARY = "binary"
    IGNORED = "ignored"
    NO_CONTENT = "no_content"


class ExcludedFile(BaseModel):
    path: str
    reason: ExclusionReason
    size: int = 0


class ExclusionSummary(BaseModel):
    excluded_files: list[ExcludedFile] = Field(default_factory=list)
    total_files: int = 0
    total_size: int = 0

    def add(self, path: str, reason: ExclusionReason, size: int = 0) -> None:
        self.excluded_files.append(ExcludedFile(path=path, reason=reason, size=size))
        self.total_files += 1
        self.total_size += size


class DiffGenerationResult(BaseModel):
    diff: str
    files: list[str] = Field(default_factory=list)
    exclusions: ExclusionSummary = Field(default_factory=ExclusionSummary)
