import asyncio
import logging
import subprocess
from pathlib import Path

from pydantic import BaseModel

from difflens.errors import ContentUnavailableError, GitCommandError
from difflens.repo.models import ChangeStatus, FileChangeDescriptor
from difflens.repo.provider import ContentRetrievalChain

logger = logging.getLogger(__name__)

_LOG_SEPARATOR = "\x1f"


class CommitInfo(BaseModel):
    sha: str
    author: str
    date: str
    subject: str


def _decode(raw: bytes) -> str:
    # surrogateescape keeps undecodable bytes recoverable for binary checks
    return raw.decode("utf-8", errors="surrogateescape")


def parse_name_status(output: str) -> list[FileChangeDescriptor]:
    """Parse ``git diff --name-status -z`` output into change descriptors."""
    tokens = output.split("\0")
    if tokens and tokens[-1] == "":
        tokens.pop()

    changes: list[FileChangeDescriptor] = []
    index = 0
    while index < len(tokens):
        status = ChangeStatus.from_git_letter(tokens[index])
        if status in (ChangeStatus.RENAMED, ChangeStatus.COPIED):
            original_path, path = tokens[index + 1], tokens[index + 2]
            index += 3
        else:
            original_path, path = None, tokens[index + 1]
            index += 2
        changes.append(
            FileChangeDescriptor(path=path, original_path=original_path, status=status)
        )
    return changes


class GitRepository:
    """Read-only access to a git work tree through the ``git`` binary."""

    def __init__(self, root: Path, timeout_sec: int = 30):
        self.root = Path(root)
        self.timeout_sec = timeout_sec

    def _run(self, args: list[str]) -> subprocess.CompletedProcess:
        """
        Run ``git`` with ``args`` in the work tree.

        Raises:
            GitCommandError: the command timed out or git could not be started
        """
        cmd = ["git", *args]
        logger.debug("Running %s in %s", " ".join(cmd), self.root)
        try:
            return subprocess.run(
                cmd,
                cwd=self.root,
                capture_output=True,
                check=False,
                timeout=self.timeout_sec,
            )
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(args, -1, f"timed out after {self.timeout_sec}s") from e
        except OSError as e:
            raise GitCommandError(args, -1, str(e)) from e

    def _run_checked(self, args: list[str]) -> str:
        result = self._run(args)
        if result.returncode != 0:
            raise GitCommandError(args, result.returncode, _decode(result.stderr))
        return _decode(result.stdout)

    def show(self, revision: str, path: str) -> str:
        try:
            result = self._run(["show", f"{revision}:{path}"])
        except GitCommandError as e:
            raise ContentUnavailableError(revision, path, e.stderr) from e
        if result.returncode != 0:
            raise ContentUnavailableError(revision, path, _decode(result.stderr).strip())
        return _decode(result.stdout)

    def read_working(self, path: str) -> str | None:
        try:
            return _decode((self.root / path).read_bytes())
        except FileNotFoundError:
            return None

    def resolve_revision(self, revision: str) -> str:
        return self._run_checked(["rev-parse", "--verify", f"{revision}^{{commit}}"]).strip()

    def list_changes(
        self,
        from_revision: str,
        to_revision: str | None = None,
        include_untracked: bool = True,
    ) -> list[FileChangeDescriptor]:
        """
        Changed files between ``from_revision`` and ``to_revision``.

        Without ``to_revision`` the working tree is compared, and untracked
        files are appended as UNTRACKED when ``include_untracked`` is set.
        """
        args = ["diff", "--name-status", "-M", "-z", from_revision]
        if to_revision:
            args.append(to_revision)
        changes = parse_name_status(self._run_checked(args))

        if to_revision is None and include_untracked:
            output = self._run_checked(["ls-files", "--others", "--exclude-standard", "-z"])
            for path in output.split("\0"):
                if path:
                    changes.append(
                        FileChangeDescriptor(path=path, status=ChangeStatus.UNTRACKED)
                    )

        logger.info(
            "Found %d changed files between %s and %s",
            len(changes),
            from_revision,
            to_revision or "working tree",
        )
        return changes

    def log(self, max_count: int = 20, revision: str = "HEAD") -> list[CommitInfo]:
        fmt = _LOG_SEPARATOR.join(["%H", "%an", "%aI", "%s"])
        output = self._run_checked(["log", f"-n{max_count}", f"--format={fmt}", revision])
        commits = []
        for line in output.splitlines():
            if not line:
                continue
            sha, author, date, subject = line.split(_LOG_SEPARATOR, 3)
            commits.append(CommitInfo(sha=sha, author=author, date=date, subject=subject))
        return commits


def git_content_provider(repository: GitRepository) -> ContentRetrievalChain:
    """Content provider reading revisions with ``git show`` and the work tree from disk."""

    async def from_revision(revision: str | None, path: str) -> str | None:
        if revision is None:
            return None
        return await asyncio.to_thread(repository.show, revision, path)

    async def from_working_tree(revision: str | None, path: str) -> str | None:
        if revision is not None:
            return None
        return await asyncio.to_thread(repository.read_working, path)

    return ContentRetrievalChain(
        [
            ("git-show", from_revision),
            ("working-tree", from_working_tree),
        ]
    )
