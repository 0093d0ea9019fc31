"""Unit tests for unified diff parsing and stats."""

from difflens.diff.models import FileDiffRequest, FileState, LineRole
from difflens.diff.parse import diff_stat, parse_unified_diff
from difflens.diff.render import compute_hunks, generate_file_diff

MULTI_FILE = """diff --git a/src/app.py b/src/app.py
index 0000000..0000000 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,3 @@
 import os
--- old comment
+++ new comment
 print(os.getcwd())
@@ -10,2 +10,3 @@ def main():
 a
+b
 c

diff --git a/docs/new.md b/docs/new.md
new file mode 100644
index 0000000..0000000
--- /dev/null
+++ b/docs/new.md
@@ -0,0 +1 @@
+# Title
\\ No newline at end of file"""


class TestParseUnifiedDiff:
    """Tests for parse_unified_diff."""

    def test_multi_file_diff(self):
        patches = parse_unified_diff(MULTI_FILE)

        assert [p.path for p in patches] == ["src/app.py", "docs/new.md"]
        assert patches[0].state is FileState.MODIFIED
        assert patches[1].state is FileState.ADDED
        assert len(patches[0].hunks) == 2

    def test_removed_line_starting_with_dashes(self):
        """Hunk bodies are read by count, so '--- x' inside a hunk is a removal."""
        hunk = parse_unified_diff(MULTI_FILE)[0].hunks[0]
        assert [(line.role, line.text) for line in hunk.lines] == [
            (LineRole.CONTEXT, "import os"),
            (LineRole.REMOVED, "-- old comment"),
            (LineRole.ADDED, "++ new comment"),
            (LineRole.CONTEXT, "print(os.getcwd())"),
        ]

    def test_missing_counts_default_to_one(self):
        hunk = parse_unified_diff(MULTI_FILE)[1].hunks[0]
        assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count) == (0, 0, 1, 1)
        assert hunk.lines[0].newline is False

    def test_plain_unified_diff(self):
        text = "--- a/x.txt\n+++ b/x.txt\n@@ -1 +1 @@\n-a\n+b\n"
        patches = parse_unified_diff(text)
        assert len(patches) == 1
        assert patches[0].old_path == "x.txt"
        assert patches[0].new_path == "x.txt"

    def test_deleted_file(self):
        diff = generate_file_diff(
            FileDiffRequest("gone.txt", "gone.txt", "a\nb\n", None)
        )
        patch = parse_unified_diff(diff)[0]
        assert patch.new_path is None
        assert patch.state is FileState.DELETED
        assert patch.path == "gone.txt"

    def test_reads_back_rendered_hunks(self):
        request = FileDiffRequest(
            "m.txt",
            "m.txt",
            "1\n2\n3\n4\n5\n6\n7\n8\n9\nlast",
            "1\nTWO\n3\n4\n5\n6\n7\n8\n9\nLAST",
            context_lines=1,
        )
        patches = parse_unified_diff(generate_file_diff(request))
        assert patches[0].hunks == compute_hunks(request)


class TestDiffStat:
    """Tests for diff_stat."""

    def test_counts_per_file_and_total(self):
        stat = diff_stat(parse_unified_diff(MULTI_FILE))

        assert [(f.path, f.additions, f.deletions) for f in stat.files] == [
            ("src/app.py", 2, 1),
            ("docs/new.md", 1, 0),
        ]
        assert stat.additions == 3
        assert stat.deletions == 1

    def test_empty_input(self):
        stat = diff_stat(parse_unified_diff(""))
        assert stat.files == []
        assert stat.additions == 0
