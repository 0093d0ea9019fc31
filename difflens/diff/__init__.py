from difflens.diff.differ import diff_lines, replay, split_lines
from difflens.diff.hunks import assemble_hunks, format_hunk_header, validate_hunk
from difflens.diff.models import (
    DiffOp,
    FileDiffRequest,
    FileState,
    Hunk,
    LineRole,
    OpTag,
    PrefixedLine,
)
from difflens.diff.parse import (
    DiffStat,
    FilePatch,
    FileStat,
    diff_stat,
    parse_unified_diff,
)
from difflens.diff.render import (
    compute_hunks,
    generate_file_diff,
    render_unified_diff,
)

__all__ = [
    "DiffOp",
    "OpTag",
    "LineRole",
    "PrefixedLine",
    "Hunk",
    "FileState",
    "FileDiffRequest",
    "FilePatch",
    "FileStat",
    "DiffStat",
    "split_lines",
    "diff_lines",
    "replay",
    "assemble_hunks",
    "format_hunk_header",
    "validate_hunk",
    "compute_hunks",
    "generate_file_diff",
    "render_unified_diff",
    "parse_unified_diff",
    "diff_stat",
]
