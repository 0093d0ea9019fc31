"""Unit tests for git repository access."""

import asyncio
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from difflens.errors import ContentUnavailableError, GitCommandError
from difflens.repo.git import GitRepository, git_content_provider, parse_name_status
from difflens.repo.models import ChangeStatus, FileChangeDescriptor


def _completed(stdout: bytes = b"", returncode: int = 0, stderr: bytes = b""):
    return subprocess.CompletedProcess(
        args=["git"], returncode=returncode, stdout=stdout, stderr=stderr
    )


class TestParseNameStatus:
    """Tests for parse_name_status."""

    def test_statuses_and_renames(self):
        output = "M\0src/a.py\0A\0new.py\0D\0old.py\0R087\0before.py\0after.py\0"
        assert parse_name_status(output) == [
            FileChangeDescriptor(path="src/a.py", status=ChangeStatus.MODIFIED),
            FileChangeDescriptor(path="new.py", status=ChangeStatus.ADDED),
            FileChangeDescriptor(path="old.py", status=ChangeStatus.DELETED),
            FileChangeDescriptor(
                path="after.py",
                original_path="before.py",
                status=ChangeStatus.RENAMED,
            ),
        ]

    def test_paths_with_spaces(self):
        changes = parse_name_status("M\0dir with space/file name.txt\0")
        assert changes[0].path == "dir with space/file name.txt"

    def test_empty_output(self):
        assert parse_name_status("") == []

    def test_unknown_letter(self):
        with pytest.raises(ValueError):
            parse_name_status("Z\0x\0")


class TestChangeStatus:
    """Tests for ChangeStatus.from_git_letter."""

    def test_letters(self):
        assert ChangeStatus.from_git_letter("C100") is ChangeStatus.COPIED
        assert ChangeStatus.from_git_letter("T") is ChangeStatus.TYPE_CHANGED
        assert ChangeStatus.from_git_letter("U") is ChangeStatus.UNMERGED
        assert ChangeStatus.from_git_letter("?") is ChangeStatus.UNTRACKED
        assert ChangeStatus.from_git_letter("!") is ChangeStatus.IGNORED

    def test_old_path_falls_back_to_path(self):
        descriptor = FileChangeDescriptor(path="a.py", status=ChangeStatus.MODIFIED)
        assert descriptor.old_path == "a.py"


class TestGitRepository:
    """Tests for GitRepository."""

    def test_show_runs_git_show(self, tmp_path: Path):
        repo = GitRepository(tmp_path)
        with patch("difflens.repo.git.subprocess.run") as mock_run:
            mock_run.return_value = _completed(b"print('hi')\n")

            assert repo.show("HEAD~1", "src/a.py") == "print('hi')\n"

            cmd = mock_run.call_args.args[0]
            assert cmd == ["git", "show", "HEAD~1:src/a.py"]
            assert mock_run.call_args.kwargs["cwd"] == tmp_path

    def test_show_missing_file(self, tmp_path: Path):
        repo = GitRepository(tmp_path)
        with patch("difflens.repo.git.subprocess.run") as mock_run:
            mock_run.return_value = _completed(
                returncode=128, stderr=b"fatal: path 'x' does not exist"
            )

            with pytest.raises(ContentUnavailableError) as exc_info:
                repo.show("HEAD", "x")
            assert exc_info.value.revision == "HEAD"
            assert "does not exist" in str(exc_info.value)

    def test_show_timeout_is_content_unavailable(self, tmp_path: Path):
        repo = GitRepository(tmp_path, timeout_sec=5)
        with patch("difflens.repo.git.subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired(["git", "show"], 5)

            with pytest.raises(ContentUnavailableError) as exc_info:
                repo.show("HEAD", "a.py")
            assert exc_info.value.path == "a.py"
            assert "timed out" in str(exc_info.value)

    def test_timeout_raises_git_command_error(self, tmp_path: Path):
        repo = GitRepository(tmp_path, timeout_sec=5)
        with patch("difflens.repo.git.subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired(["git", "log"], 5)

            with pytest.raises(GitCommandError) as exc_info:
                repo.log()
            assert "timed out after 5s" in str(exc_info.value)

    def test_missing_git_binary(self, tmp_path: Path):
        repo = GitRepository(tmp_path)
        with patch("difflens.repo.git.subprocess.run") as mock_run:
            mock_run.side_effect = FileNotFoundError("No such file or directory: 'git'")

            with pytest.raises(GitCommandError) as exc_info:
                repo.resolve_revision("HEAD")
            assert exc_info.value.returncode == -1
            assert "No such file" in str(exc_info.value)

    def test_read_working(self, tmp_path: Path):
        (tmp_path / "a.txt").write_text("hello\n")
        repo = GitRepository(tmp_path)

        assert repo.read_working("a.txt") == "hello\n"
        assert repo.read_working("missing.txt") is None

    def test_read_working_keeps_undecodable_bytes(self, tmp_path: Path):
        (tmp_path / "blob.bin").write_bytes(b"\xff\x00ab")
        content = GitRepository(tmp_path).read_working("blob.bin")
        assert content.encode("utf-8", errors="surrogateescape") == b"\xff\x00ab"

    def test_list_changes_between_revisions(self, tmp_path: Path):
        repo = GitRepository(tmp_path)
        with patch("difflens.repo.git.subprocess.run") as mock_run:
            mock_run.return_value = _completed(b"M\0a.py\0")

            changes = repo.list_changes("abc", "def")

            assert mock_run.call_count == 1
            assert mock_run.call_args.args[0] == [
                "git", "diff", "--name-status", "-M", "-z", "abc", "def",
            ]
            assert [c.path for c in changes] == ["a.py"]

    def test_list_changes_against_working_tree_adds_untracked(self, tmp_path: Path):
        repo = GitRepository(tmp_path)
        with patch("difflens.repo.git.subprocess.run") as mock_run:
            mock_run.side_effect = [
                _completed(b"M\0a.py\0"),
                _completed(b"notes.md\0"),
            ]

            changes = repo.list_changes("abc")

            assert [(c.path, c.status) for c in changes] == [
                ("a.py", ChangeStatus.MODIFIED),
                ("notes.md", ChangeStatus.UNTRACKED),
            ]
            assert mock_run.call_args_list[1].args[0][:3] == ["git", "ls-files", "--others"]

    def test_failing_command_raises(self, tmp_path: Path):
        repo = GitRepository(tmp_path)
        with patch("difflens.repo.git.subprocess.run") as mock_run:
            mock_run.return_value = _completed(returncode=128, stderr=b"bad revision")

            with pytest.raises(GitCommandError) as exc_info:
                repo.resolve_revision("nope")
            assert exc_info.value.returncode == 128
            assert "bad revision" in str(exc_info.value)

    def test_resolve_revision(self, tmp_path: Path):
        repo = GitRepository(tmp_path)
        with patch("difflens.repo.git.subprocess.run") as mock_run:
            mock_run.return_value = _completed(b"0123456789abcdef\n")

            assert repo.resolve_revision("HEAD") == "0123456789abcdef"
            assert mock_run.call_args.args[0] == [
                "git", "rev-parse", "--verify", "HEAD^{commit}",
            ]

    def test_log(self, tmp_path: Path):
        repo = GitRepository(tmp_path)
        line = "\x1f".join(["abc123", "Dana", "2024-05-01T10:00:00+00:00", "Fix: a | b"])
        with patch("difflens.repo.git.subprocess.run") as mock_run:
            mock_run.return_value = _completed(f"{line}\n".encode())

            commits = repo.log(max_count=5)

            assert mock_run.call_args.args[0][:3] == ["git", "log", "-n5"]
            assert len(commits) == 1
            assert commits[0].sha == "abc123"
            assert commits[0].subject == "Fix: a | b"


class TestGitContentProvider:
    """Tests for git_content_provider."""

    def test_revision_and_working_tree(self, tmp_path: Path):
        (tmp_path / "a.py").write_text("new\n")
        provider = git_content_provider(GitRepository(tmp_path))

        with patch("difflens.repo.git.subprocess.run") as mock_run:
            mock_run.return_value = _completed(b"old\n")
            old = asyncio.run(provider.get_content_at_revision("HEAD", "a.py"))

        assert old == "old\n"
        assert asyncio.run(provider.get_working_content("a.py")) == "new\n"

    def test_missing_at_revision_is_none(self, tmp_path: Path):
        provider = git_content_provider(GitRepository(tmp_path))

        with patch("difflens.repo.git.subprocess.run") as mock_run:
            mock_run.return_value = _completed(returncode=128, stderr=b"fatal")
            assert asyncio.run(provider.get_content_at_revision("HEAD", "a.py")) is None

    def test_timeout_at_revision_is_none(self, tmp_path: Path):
        provider = git_content_provider(GitRepository(tmp_path))

        with patch("difflens.repo.git.subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired(["git", "show"], 30)
            assert asyncio.run(provider.get_content_at_revision("HEAD", "a.py")) is None
