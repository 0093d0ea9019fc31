from __future__ import annotations

from datetime import datetime

from difflens.diff.parse import GIT_HEADER_RE, DiffStat
from difflens.filters.binary import file_category, format_file_size
from difflens.generation.models import ExclusionReason, ExclusionSummary
from difflens.reporting.templates import (
    DIFF_FENCE,
    EXCLUSION_BY_TYPE_HEADER,
    EXCLUSION_FILES_HEADER,
    EXCLUSION_TITLE,
    FENCE,
    NO_EXCLUSIONS,
    PREVIEW_TITLE,
)

DEFAULT_REPORT_LIMIT = 20

_METADATA_PREFIXES = ("index ", "--- ", "+++ ")

_REASON_LABELS = {
    ExclusionReason.DELETED: "Deleted",
    ExclusionReason.EXTENSION_FILTER: "Extension filter",
    ExclusionReason.FILE_SIZE: "Size limit",
    ExclusionReason.BINARY: "Binary file",
    ExclusionReason.IGNORED: "Ignored",
    ExclusionReason.NO_CONTENT: "No content",
}


def format_diff_as_markdown(diff: str) -> str:
    """
    Split a multi-file diff into one fenced ``diff`` block per file.

    Each block is headed by ``## <new path>``. ``index``, ``---`` and ``+++``
    lines before the first hunk are dropped, mode lines stay. Text without
    any ``diff --git`` header is wrapped in a single block.
    """
    lines: list[str] = []
    current_file: str | None = None
    content: list[str] = []
    in_header = False

    def flush() -> None:
        if current_file and content:
            lines.append(f"## {current_file}")
            lines.append("")
            lines.append(DIFF_FENCE)
            lines.extend(content)
            lines.append(FENCE)
            lines.append("")

    for line in diff.split("\n"):
        if line.startswith("diff --git "):
            flush()
            match = GIT_HEADER_RE.match(line)
            current_file = match.group(2) if match else "Unknown file"
            content = []
            in_header = True
            continue
        if line.startswith("@@"):
            in_header = False
        elif in_header and line.startswith(_METADATA_PREFIXES):
            continue
        if current_file:
            content.append(line)
    flush()

    if not lines:
        return f"{DIFF_FENCE}\n{diff}\n{FENCE}"
    return "\n".join(lines)


def exclusion_stats_by_type(summary: ExclusionSummary) -> dict[str, tuple[int, int]]:
    """Category -> (file count, total bytes), in first-seen order."""
    stats: dict[str, tuple[int, int]] = {}
    for excluded in summary.excluded_files:
        category = file_category(excluded.path)
        count, size = stats.get(category, (0, 0))
        stats[category] = (count + 1, size + excluded.size)
    return stats


def render_exclusion_report(
    summary: ExclusionSummary,
    limit: int = DEFAULT_REPORT_LIMIT,
) -> str:
    if not summary.excluded_files:
        return NO_EXCLUSIONS

    lines = [EXCLUSION_TITLE, ""]
    lines.append(
        f"**Total Excluded:** {summary.total_files} files "
        f"({format_file_size(summary.total_size)})"
    )
    lines.append("")

    lines.append(EXCLUSION_BY_TYPE_HEADER)
    lines.append("")
    for category, (count, size) in exclusion_stats_by_type(summary).items():
        lines.append(f"- **{category}:** {count} files ({format_file_size(size)})")

    lines.append("")
    lines.append(EXCLUSION_FILES_HEADER)
    lines.append("")
    for excluded in summary.excluded_files[:limit]:
        reason = _REASON_LABELS[excluded.reason]
        lines.append(f"- `{excluded.path}` - {format_file_size(excluded.size)} ({reason})")

    hidden = summary.total_files - min(limit, len(summary.excluded_files))
    if hidden > 0:
        lines.append("")
        lines.append(f"... and {hidden} more files.")

    return "\n".join(lines) + "\n"


def render_preview(
    diff: str,
    from_revision: str,
    to_revision: str | None = None,
    context_lines: int = 50,
    exclude_deletes: bool = True,
    extension_filter: str = "",
    generated_at: datetime | None = None,
) -> str:
    generated_at = generated_at or datetime.now()
    target = to_revision[:8] if to_revision else "working tree"
    options = "Exclude deleted files" if exclude_deletes else "Include all changes"

    lines = [PREVIEW_TITLE, ""]
    lines.append(f"**Comparison:** {from_revision[:8]} vs {target}  ")
    lines.append(f"**Context Lines:** {context_lines}  ")
    lines.append(f"**Options:** {options}  ")
    if extension_filter:
        lines.append(f"**File Extensions Filter:** {extension_filter}  ")
    lines.append(f"**Generated at:** {generated_at.strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append("")
    lines.append("---")
    lines.append("")
    lines.append(DIFF_FENCE)
    lines.append(diff)
    lines.append(FENCE)
    return "\n".join(lines)


def render_stat(stat: DiffStat, bar_width: int = 40) -> str:
    """``git diff --stat`` style summary. Bars are scaled to ``bar_width``."""
    lines = []
    width = max((len(f.path) for f in stat.files), default=0)
    largest = max((f.additions + f.deletions for f in stat.files), default=0)
    scale = min(1.0, bar_width / largest) if largest else 1.0
    for f in stat.files:
        changes = f.additions + f.deletions
        plus = "+" * round(f.additions * scale)
        minus = "-" * round(f.deletions * scale)
        lines.append(f" {f.path.ljust(width)} | {changes:>4} {plus}{minus}")
    lines.append(
        f" {len(stat.files)} files changed, {stat.additions} insertions(+), "
        f"{stat.deletions} deletions(-)"
    )
    return "\n".join(lines)
