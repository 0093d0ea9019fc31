"""
Line-level diff using Myers' O(ND) shortest edit script.

Lines are compared exactly, terminators included, so a final line that lacks
a newline differs from the same text followed by one.
"""

import logging
from collections.abc import Sequence

from difflens.diff.models import DiffOp, OpTag
from difflens.errors import DiffTooComplexError

logger = logging.getLogger(__name__)

DEFAULT_MAX_EDIT_DISTANCE = 2000


def split_lines(content: str | None) -> list[str]:
    """Split text on ``\\n`` keeping terminators. Empty content gives no lines."""
    if not content:
        return []
    pieces = content.split("\n")
    lines = [piece + "\n" for piece in pieces[:-1]]
    if pieces[-1]:
        lines.append(pieces[-1])
    return lines


def replay(ops: Sequence[DiffOp]) -> tuple[list[str], list[str]]:
    """Rebuild the (old, new) line sequences an edit script was computed from."""
    old: list[str] = []
    new: list[str] = []
    for op in ops:
        if op.tag is not OpTag.INSERT:
            old.extend(op.lines)
        if op.tag is not OpTag.DELETE:
            new.extend(op.lines)
    return old, new


def diff_lines(
    old_lines: Sequence[str],
    new_lines: Sequence[str],
    max_edit_distance: int = DEFAULT_MAX_EDIT_DISTANCE,
) -> list[DiffOp]:
    """
    Compute the edit script turning ``old_lines`` into ``new_lines``.

    Returns runs of EQUAL, DELETE and INSERT ops in order. Inside every change
    region the DELETE run comes before the INSERT run. Identical inputs give a
    single EQUAL op, two empty inputs give no ops.

    Raises:
        DiffTooComplexError: the middle section (after trimming the common
            prefix and suffix) needs more than ``max_edit_distance`` edits
    """
    n, m = len(old_lines), len(new_lines)

    prefix = 0
    while prefix < n and prefix < m and old_lines[prefix] == new_lines[prefix]:
        prefix += 1

    suffix = 0
    while (
        suffix < n - prefix
        and suffix < m - prefix
        and old_lines[n - 1 - suffix] == new_lines[m - 1 - suffix]
    ):
        suffix += 1

    middle_old = old_lines[prefix:n - suffix]
    middle_new = new_lines[prefix:m - suffix]

    tags: list[OpTag] = [OpTag.EQUAL] * prefix
    if not middle_old:
        tags.extend([OpTag.INSERT] * len(middle_new))
    elif not middle_new:
        tags.extend([OpTag.DELETE] * len(middle_old))
    else:
        trace = _shortest_edit(middle_old, middle_new, max_edit_distance)
        tags.extend(_backtrack(trace, len(middle_old), len(middle_new)))
    tags.extend([OpTag.EQUAL] * suffix)

    ops = _build_ops(tags, old_lines, new_lines)
    logger.debug(
        "Diffed %d -> %d lines into %d ops (prefix=%d, suffix=%d)",
        n,
        m,
        len(ops),
        prefix,
        suffix,
    )
    return ops


def _shortest_edit(
    a: Sequence[str],
    b: Sequence[str],
    limit: int,
) -> list[dict[int, int]]:
    # trace[d] holds the furthest x per diagonal k reached with d - 1 edits
    n, m = len(a), len(b)
    v = {1: 0}
    trace: list[dict[int, int]] = []

    for d in range(n + m + 1):
        if d > limit:
            raise DiffTooComplexError(limit)
        trace.append(dict(v))
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[k - 1] < v[k + 1]):
                x = v[k + 1]
            else:
                x = v[k - 1] + 1
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            v[k] = x
            if x >= n and y >= m:
                return trace

    return trace


def _backtrack(trace: list[dict[int, int]], n: int, m: int) -> list[OpTag]:
    x, y = n, m
    moves: list[OpTag] = []

    for d in range(len(trace) - 1, -1, -1):
        v = trace[d]
        k = x - y
        if k == -d or (k != d and v[k - 1] < v[k + 1]):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = v[prev_k]
        prev_y = prev_x - prev_k

        while x > prev_x and y > prev_y:
            moves.append(OpTag.EQUAL)
            x -= 1
            y -= 1

        if d > 0:
            moves.append(OpTag.INSERT if x == prev_x else OpTag.DELETE)

        x, y = prev_x, prev_y

    moves.reverse()
    return moves


def _build_ops(
    tags: list[OpTag],
    old_lines: Sequence[str],
    new_lines: Sequence[str],
) -> list[DiffOp]:
    ops: list[DiffOp] = []
    equal: list[str] = []
    deleted: list[str] = []
    inserted: list[str] = []
    old_index = 0
    new_index = 0

    def flush_changes() -> None:
        if deleted:
            ops.append(DiffOp(OpTag.DELETE, list(deleted)))
            deleted.clear()
        if inserted:
            ops.append(DiffOp(OpTag.INSERT, list(inserted)))
            inserted.clear()

    for tag in tags:
        if tag is OpTag.EQUAL:
            flush_changes()
            equal.append(old_lines[old_index])
            old_index += 1
            new_index += 1
            continue

        if equal:
            ops.append(DiffOp(OpTag.EQUAL, list(equal)))
            equal.clear()
        if tag is OpTag.DELETE:
            deleted.append(old_lines[old_index])
            old_index += 1
        else:
            inserted.append(new_lines[new_index])
            new_index += 1

    flush_changes()
    if equal:
        ops.append(DiffOp(OpTag.EQUAL, list(equal)))

    return ops
