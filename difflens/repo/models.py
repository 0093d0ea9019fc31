from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ChangeStatus(StrEnum):
    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"
    COPIED = "copied"
    UNTRACKED = "untracked"
    TYPE_CHANGED = "type_changed"
    UNMERGED = "unmerged"
    IGNORED = "ignored"

    @classmethod
    def from_git_letter(cls, letter: str) -> "ChangeStatus":
        """Map a ``git diff --name-status`` letter (``R100`` reads as ``R``)."""
        try:
            return _GIT_LETTERS[letter[:1].upper()]
        except KeyError:
            raise ValueError(f"Unknown git status letter: {letter!r}") from None


_GIT_LETTERS = {
    "A": ChangeStatus.ADDED,
    "D": ChangeStatus.DELETED,
    "M": ChangeStatus.MODIFIED,
    "R": ChangeStatus.RENAMED,
    "C": ChangeStatus.COPIED,
    "T": ChangeStatus.TYPE_CHANGED,
    "U": ChangeStatus.UNMERGED,
    "?": ChangeStatus.UNTRACKED,
    "!": ChangeStatus.IGNORED,
}


class FileChangeDescriptor(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str
    # previous path for renames and copies
    original_path: str | None = None
    status: ChangeStatus

    @property
    def old_path(self) -> str:
        return self.original_path or self.path
