import logging
from collections.abc import Sequence

from difflens.diff.models import DiffOp, Hunk, LineRole, OpTag, PrefixedLine
from difflens.errors import HunkInvariantError

logger = logging.getLogger(__name__)


class _HunkBuilder:
    """Accumulates one open hunk while walking the edit script."""

    def __init__(self, old_line: int, new_line: int):
        # first old/new line numbers covered by the hunk
        self.old_line = max(1, old_line)
        self.new_line = max(1, new_line)
        self.old_count = 0
        self.new_count = 0
        self.lines: list[PrefixedLine] = []

    def add_context(self, lines: Sequence[str]) -> None:
        for raw in lines:
            self.lines.append(PrefixedLine.from_raw(LineRole.CONTEXT, raw))
        self.old_count += len(lines)
        self.new_count += len(lines)

    def add_removed(self, lines: Sequence[str]) -> None:
        for raw in lines:
            self.lines.append(PrefixedLine.from_raw(LineRole.REMOVED, raw))
        self.old_count += len(lines)

    def add_added(self, lines: Sequence[str]) -> None:
        for raw in lines:
            self.lines.append(PrefixedLine.from_raw(LineRole.ADDED, raw))
        self.new_count += len(lines)

    def close(self) -> Hunk:
        # an empty side points at the line before the change
        hunk = Hunk(
            old_start=self.old_line if self.old_count else self.old_line - 1,
            old_count=self.old_count,
            new_start=self.new_line if self.new_count else self.new_line - 1,
            new_count=self.new_count,
            lines=self.lines,
        )
        validate_hunk(hunk)
        return hunk


def validate_hunk(hunk: Hunk) -> None:
    old_seen = sum(1 for line in hunk.lines if line.role is not LineRole.ADDED)
    new_seen = sum(1 for line in hunk.lines if line.role is not LineRole.REMOVED)
    if old_seen != hunk.old_count or new_seen != hunk.new_count:
        raise HunkInvariantError(
            f"Hunk {format_hunk_header(hunk)} carries {old_seen} old and "
            f"{new_seen} new lines"
        )
    if not any(line.role is not LineRole.CONTEXT for line in hunk.lines):
        raise HunkInvariantError(f"Hunk {format_hunk_header(hunk)} has no changes")


def _tail(lines: Sequence[str], count: int) -> list[str]:
    if count <= 0:
        return []
    return list(lines[-count:])


def assemble_hunks(ops: Sequence[DiffOp], context_lines: int) -> list[Hunk]:
    """
    Group an edit script into unified diff hunks.

    Each change run gets up to ``context_lines`` unchanged lines on either
    side. Two changes separated by at most ``2 * context_lines`` unchanged
    lines share a hunk. Returns an empty list when nothing changed.

    Raises:
        ValueError: ``context_lines`` is negative
        HunkInvariantError: an assembled hunk disagrees with its counts
    """
    if context_lines < 0:
        raise ValueError(f"context_lines must be non-negative, got {context_lines}")

    last_change = max(
        (index for index, op in enumerate(ops) if op.tag is not OpTag.EQUAL),
        default=-1,
    )
    hunks: list[Hunk] = []
    current: _HunkBuilder | None = None
    preceding: Sequence[str] = ()
    old_line = 1
    new_line = 1

    for index, op in enumerate(ops):
        if op.tag is OpTag.EQUAL:
            if current is not None:
                if index < last_change and op.count <= 2 * context_lines:
                    current.add_context(op.lines)
                else:
                    current.add_context(op.lines[:context_lines])
                    hunks.append(current.close())
                    current = None
            old_line += op.count
            new_line += op.count
            preceding = op.lines
            continue

        if current is None:
            before = _tail(preceding, context_lines)
            current = _HunkBuilder(old_line - len(before), new_line - len(before))
            current.add_context(before)
        preceding = ()

        if op.tag is OpTag.DELETE:
            current.add_removed(op.lines)
            old_line += op.count
        else:
            current.add_added(op.lines)
            new_line += op.count

    if current is not None:
        hunks.append(current.close())

    for previous, following in zip(hunks, hunks[1:]):
        if following.old_start < previous.old_end or following.new_start < previous.new_end:
            raise HunkInvariantError(
                f"Hunks overlap: {format_hunk_header(previous)} then {format_hunk_header(following)}"
            )

    logger.debug("Assembled %d hunks with %d context lines", len(hunks), context_lines)
    return hunks


def format_hunk_header(hunk: Hunk) -> str:
    return f"@@ -{hunk.old_start},{hunk.old_count} +{hunk.new_start},{hunk.new_count} @@"
