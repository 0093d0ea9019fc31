PREVIEW_TITLE = "# Diff Preview"
EXCLUSION_TITLE = "## Excluded Files Report"
EXCLUSION_BY_TYPE_HEADER = "### Exclusion by Type"
EXCLUSION_FILES_HEADER = "### Excluded Files"
NO_EXCLUSIONS = "No files were excluded."
DIFF_FENCE = "```diff"
FENCE = "```"
