from dataclasses import dataclass, field
from enum import StrEnum


class OpTag(StrEnum):
    EQUAL = "equal"
    INSERT = "insert"
    DELETE = "delete"


@dataclass(frozen=True)
class DiffOp:
    tag: OpTag
    lines: list[str]

    @property
    def count(self) -> int:
        return len(self.lines)


class LineRole(StrEnum):
    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"

    @property
    def prefix(self) -> str:
        return _PREFIXES[self]


_PREFIXES = {
    LineRole.CONTEXT: " ",
    LineRole.ADDED: "+",
    LineRole.REMOVED: "-",
}


@dataclass(frozen=True)
class PrefixedLine:
    role: LineRole
    text: str
    # False only for a final line that had no terminator
    newline: bool = True

    @classmethod
    def from_raw(cls, role: LineRole, raw: str) -> "PrefixedLine":
        if raw.endswith("\n"):
            return cls(role=role, text=raw[:-1])
        return cls(role=role, text=raw, newline=False)


@dataclass
class Hunk:
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: list[PrefixedLine] = field(default_factory=list)

    @property
    def old_end(self) -> int:
        return self.old_start + self.old_count

    @property
    def new_end(self) -> int:
        return self.new_start + self.new_count


class FileState(StrEnum):
    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"


@dataclass
class FileDiffRequest:
    old_path: str
    new_path: str
    old_content: str | None
    new_content: str | None
    context_lines: int = 3
    # status reported by the repository, only consulted for empty files
    declared_state: FileState | None = None

    def __post_init__(self) -> None:
        if self.context_lines < 0:
            raise ValueError(f"context_lines must be non-negative, got {self.context_lines}")

    @property
    def state(self) -> FileState | None:
        """
        Derive the file state from content. Empty text counts as absent, so
        two empty sides give None unless the repository declared an empty
        file as added or deleted.
        """
        if not self.old_content and not self.new_content:
            if self.declared_state is FileState.ADDED and self.new_content is not None:
                return FileState.ADDED
            if self.declared_state is FileState.DELETED and self.old_content is not None:
                return FileState.DELETED
            return None
        if not self.old_content:
            return FileState.ADDED
        if not self.new_content:
            return FileState.DELETED
        if self.old_path != self.new_path:
            return FileState.RENAMED
        return FileState.MODIFIED
