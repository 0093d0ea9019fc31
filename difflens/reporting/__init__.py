from difflens.reporting.render import (
    exclusion_stats_by_type,
    format_diff_as_markdown,
    render_exclusion_report,
    render_preview,
    render_stat,
)

__all__ = [
    "format_diff_as_markdown",
    "exclusion_stats_by_type",
    "render_exclusion_report",
    "render_preview",
    "render_stat",
]
