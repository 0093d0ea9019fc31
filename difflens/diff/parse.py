import logging
import re
from dataclasses import dataclass, field

from difflens.diff.models import FileState, Hunk, LineRole, PrefixedLine
from difflens.diff.render import DEV_NULL, NO_NEWLINE_MARKER

logger = logging.getLogger(__name__)

HUNK_HEADER_RE = re.compile(r"@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
GIT_HEADER_RE = re.compile(r"diff --git a/(.+) b/(.+)")

_ROLES = {
    " ": LineRole.CONTEXT,
    "+": LineRole.ADDED,
    "-": LineRole.REMOVED,
}


@dataclass
class FilePatch:
    old_path: str | None
    new_path: str | None
    hunks: list[Hunk] = field(default_factory=list)

    @property
    def state(self) -> FileState:
        if self.old_path is None:
            return FileState.ADDED
        if self.new_path is None:
            return FileState.DELETED
        if self.old_path != self.new_path:
            return FileState.RENAMED
        return FileState.MODIFIED

    @property
    def path(self) -> str:
        return self.new_path or self.old_path or ""


@dataclass
class FileStat:
    path: str
    additions: int
    deletions: int


@dataclass
class DiffStat:
    files: list[FileStat] = field(default_factory=list)

    @property
    def additions(self) -> int:
        return sum(f.additions for f in self.files)

    @property
    def deletions(self) -> int:
        return sum(f.deletions for f in self.files)


def _strip_side(raw: str, prefix: str) -> str | None:
    raw = raw.split("\t", 1)[0].strip()
    if raw == DEV_NULL:
        return None
    return raw.removeprefix(prefix)


def parse_unified_diff(patch_txt: str) -> list[FilePatch]:
    """
    Parse multi-file unified diff text into file patches.

    Understands ``diff --git`` headers, ``/dev/null`` sides, any number of
    hunks per file, and ``\\ No newline at end of file`` markers. Header
    lines between ``diff --git`` and ``---`` (modes, index) are ignored.
    Hunk bodies are consumed by their header counts, so removed lines that
    start with ``--`` are not mistaken for file headers.
    """
    patches: list[FilePatch] = []
    current: FilePatch | None = None
    hunk: Hunk | None = None
    old_left = 0
    new_left = 0

    for line in patch_txt.split("\n"):
        if hunk is not None and line.startswith(NO_NEWLINE_MARKER):
            if hunk.lines:
                last = hunk.lines[-1]
                hunk.lines[-1] = PrefixedLine(last.role, last.text, newline=False)
            continue

        if hunk is not None and (old_left > 0 or new_left > 0):
            role = _ROLES.get(line[:1], LineRole.CONTEXT)
            hunk.lines.append(PrefixedLine(role, line[1:]))
            if role is not LineRole.ADDED:
                old_left -= 1
            if role is not LineRole.REMOVED:
                new_left -= 1
            continue

        git_header = GIT_HEADER_RE.match(line)
        if git_header:
            current = FilePatch(old_path=git_header.group(1), new_path=git_header.group(2))
            patches.append(current)
            hunk = None
            continue

        if line.startswith("--- "):
            if current is None or current.hunks:
                # plain unified diff without a git header
                current = FilePatch(old_path=None, new_path=None)
                patches.append(current)
                hunk = None
            current.old_path = _strip_side(line[4:], "a/")
            continue

        if line.startswith("+++ ") and current is not None and not current.hunks:
            current.new_path = _strip_side(line[4:], "b/")
            continue

        match = HUNK_HEADER_RE.match(line)
        if match and current is not None:
            hunk = Hunk(
                old_start=int(match.group(1)),
                old_count=int(match.group(2)) if match.group(2) is not None else 1,
                new_start=int(match.group(3)),
                new_count=int(match.group(4)) if match.group(4) is not None else 1,
            )
            current.hunks.append(hunk)
            old_left = hunk.old_count
            new_left = hunk.new_count

    logger.debug("Parsed %d file patches from unified diff", len(patches))
    return patches


def diff_stat(patches: list[FilePatch]) -> DiffStat:
    stat = DiffStat()
    for patch in patches:
        additions = 0
        deletions = 0
        for hunk in patch.hunks:
            for line in hunk.lines:
                if line.role is LineRole.ADDED:
                    additions += 1
                elif line.role is LineRole.REMOVED:
                    deletions += 1
        stat.files.append(FileStat(path=patch.path, additions=additions, deletions=deletions))
    return stat
