"""
Unified diff rendering for a single file.

Output follows the ``diff --git`` layout:

```diff
diff --git a/src/main.py b/src/main.py
index 0000000..0000000 100644
--- a/src/main.py
+++ b/src/main.py
@@ -1,3 +1,3 @@
 x
-y
+Y
 z
```

Added and deleted files swap one side for ``/dev/null`` and carry a
``new file mode`` or ``deleted file mode`` line. The header tokens are read
back by the markdown renderer, so their literal text must not change.
"""

import logging

from difflens.diff.differ import DEFAULT_MAX_EDIT_DISTANCE, diff_lines, split_lines
from difflens.diff.hunks import assemble_hunks, format_hunk_header
from difflens.diff.models import FileDiffRequest, FileState, Hunk, LineRole, PrefixedLine
from difflens.errors import DiffTooComplexError

logger = logging.getLogger(__name__)

DEV_NULL = "/dev/null"
FILE_MODE = "100644"
NULL_INDEX = "0000000..0000000"
NO_NEWLINE_MARKER = "\\ No newline at end of file"


def render_header(request: FileDiffRequest, state: FileState) -> list[str]:
    lines = [f"diff --git a/{request.old_path} b/{request.new_path}"]

    if state is FileState.ADDED:
        lines.append(f"new file mode {FILE_MODE}")
        lines.append(f"index {NULL_INDEX}")
        lines.append(f"--- {DEV_NULL}")
        lines.append(f"+++ b/{request.new_path}")
    elif state is FileState.DELETED:
        lines.append(f"deleted file mode {FILE_MODE}")
        lines.append(f"index {NULL_INDEX}")
        lines.append(f"--- a/{request.old_path}")
        lines.append(f"+++ {DEV_NULL}")
    else:
        lines.append(f"index {NULL_INDEX} {FILE_MODE}")
        lines.append(f"--- a/{request.old_path}")
        lines.append(f"+++ b/{request.new_path}")

    return lines


def render_hunk(hunk: Hunk) -> list[str]:
    lines = [format_hunk_header(hunk)]
    for line in hunk.lines:
        lines.append(f"{line.role.prefix}{line.text}")
        if not line.newline:
            lines.append(NO_NEWLINE_MARKER)
    return lines


def render_unified_diff(request: FileDiffRequest, hunks: list[Hunk]) -> str:
    """Format one file's hunks. Returns "" when there is nothing to show."""
    state = request.state
    if state is None or not hunks:
        return ""

    lines = render_header(request, state)
    for hunk in hunks:
        lines.extend(render_hunk(hunk))
    return "\n".join(lines)


def whole_file_hunk(old_lines: list[str], new_lines: list[str]) -> Hunk:
    """Replace every old line with every new line in a single hunk."""
    lines = [PrefixedLine.from_raw(LineRole.REMOVED, raw) for raw in old_lines]
    lines.extend(PrefixedLine.from_raw(LineRole.ADDED, raw) for raw in new_lines)
    return Hunk(
        old_start=1 if old_lines else 0,
        old_count=len(old_lines),
        new_start=1 if new_lines else 0,
        new_count=len(new_lines),
        lines=lines,
    )


def _empty_file_hunk(state: FileState) -> Hunk:
    if state is FileState.ADDED:
        return Hunk(0, 0, 1, 1, [PrefixedLine(LineRole.ADDED, "")])
    return Hunk(1, 1, 0, 0, [PrefixedLine(LineRole.REMOVED, "")])


def compute_hunks(
    request: FileDiffRequest,
    max_edit_distance: int = DEFAULT_MAX_EDIT_DISTANCE,
) -> list[Hunk]:
    state = request.state
    if state is None:
        return []

    old_lines = split_lines(request.old_content)
    new_lines = split_lines(request.new_content)

    if state is FileState.ADDED and not new_lines:
        return [_empty_file_hunk(state)]
    if state is FileState.DELETED and not old_lines:
        return [_empty_file_hunk(state)]

    try:
        ops = diff_lines(old_lines, new_lines, max_edit_distance=max_edit_distance)
    except DiffTooComplexError as exc:
        logger.warning(
            "Falling back to whole-file replacement for %s: %s",
            request.new_path,
            exc,
        )
        return [whole_file_hunk(old_lines, new_lines)]

    return assemble_hunks(ops, request.context_lines)


def generate_file_diff(
    request: FileDiffRequest,
    max_edit_distance: int = DEFAULT_MAX_EDIT_DISTANCE,
) -> str:
    """Diff and render one file, "" when the two versions do not differ."""
    if not request.old_content and request.new_content and request.old_path != request.new_path:
        logger.info(
            "Old content for renamed file %s unavailable, rendering %s as added",
            request.old_path,
            request.new_path,
        )

    hunks = compute_hunks(request, max_edit_distance=max_edit_distance)
    diff = render_unified_diff(request, hunks)
    if not diff:
        logger.debug("No differences for %s", request.new_path)
    return diff
