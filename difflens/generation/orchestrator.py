"""
Multi-file diff generation.

The orchestrator filters change descriptors, fetches both sides of every
remaining file concurrently, applies size and binary exclusions and joins
the per-file unified diffs with a blank line, in descriptor order.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from difflens.diff.differ import DEFAULT_MAX_EDIT_DISTANCE
from difflens.diff.models import FileDiffRequest, FileState
from difflens.diff.render import generate_file_diff
from difflens.errors import ContentUnavailableError, NoChangesFoundError
from difflens.filters.binary import content_size, exceeds_size, is_binary
from difflens.filters.extensions import matches_extension_filter, parse_extension_filter
from difflens.generation.models import (
    DiffGenerationResult,
    ExclusionReason,
    ExclusionRule,
    ExclusionSummary,
)
from difflens.repo.models import ChangeStatus, FileChangeDescriptor
from difflens.repo.provider import ContentProvider

logger = logging.getLogger(__name__)

DEFAULT_FROM_REVISION = "HEAD"

_NEW_FILE_STATUSES = frozenset({ChangeStatus.ADDED, ChangeStatus.UNTRACKED})
_DELETED_STATUSES = frozenset({ChangeStatus.DELETED})


def _declared_state(status: ChangeStatus) -> FileState | None:
    if status in _NEW_FILE_STATUSES:
        return FileState.ADDED
    if status in _DELETED_STATUSES:
        return FileState.DELETED
    return None


async def _absent() -> None:
    return None


@dataclass
class _FetchedFile:
    descriptor: FileChangeDescriptor
    old_content: str | None
    new_content: str | None


def _compare_info(from_revision: str, to_revision: str | None) -> str:
    target = to_revision[:8] if to_revision else "the working tree"
    return f"between {from_revision[:8]} and {target}"


class DiffOrchestrator:
    def __init__(
        self,
        provider: ContentProvider,
        max_edit_distance: int = DEFAULT_MAX_EDIT_DISTANCE,
    ):
        self.provider = provider
        self.max_edit_distance = max_edit_distance

    def select(
        self,
        files: Sequence[FileChangeDescriptor],
        rule: ExclusionRule,
        summary: ExclusionSummary,
    ) -> list[FileChangeDescriptor]:
        """Drop ignored, deleted (when excluded) and extension-filtered files."""
        selected = []
        for descriptor in files:
            if descriptor.status is ChangeStatus.IGNORED:
                summary.add(descriptor.path, ExclusionReason.IGNORED)
            elif rule.exclude_deletes and descriptor.status in _DELETED_STATUSES:
                summary.add(descriptor.path, ExclusionReason.DELETED)
            elif not matches_extension_filter(descriptor.path, rule.extension_patterns):
                summary.add(descriptor.path, ExclusionReason.EXTENSION_FILTER)
            else:
                selected.append(descriptor)

        logger.debug(
            "Selected %d of %d files (%d excluded)",
            len(selected),
            len(files),
            len(files) - len(selected),
        )
        return selected

    async def _fetch(self, revision: str | None, path: str) -> str | None:
        try:
            if revision is None:
                return await self.provider.get_working_content(path)
            return await self.provider.get_content_at_revision(revision, path)
        except (ContentUnavailableError, OSError) as exc:
            logger.warning("Content for %s unavailable, treating it as absent: %s", path, exc)
            return None

    async def _fetch_file(
        self,
        descriptor: FileChangeDescriptor,
        from_revision: str,
        to_revision: str | None,
    ) -> _FetchedFile:
        status = descriptor.status

        if status in _NEW_FILE_STATUSES:
            old_task = None
        else:
            old_task = self._fetch(from_revision, descriptor.old_path)

        if status in _DELETED_STATUSES:
            new_task = None
        else:
            new_task = self._fetch(to_revision, descriptor.path)

        old_content, new_content = await asyncio.gather(
            old_task or _absent(),
            new_task or _absent(),
        )
        return _FetchedFile(descriptor, old_content, new_content)

    def _check_content(
        self,
        fetched: _FetchedFile,
        rule: ExclusionRule,
        summary: ExclusionSummary,
    ) -> bool:
        path = fetched.descriptor.path
        if fetched.old_content is None and fetched.new_content is None:
            logger.warning("Skipping %s: no content available for either side", path)
            summary.add(path, ExclusionReason.NO_CONTENT)
            return False

        sides = [
            (candidate_path, content)
            for candidate_path, content in (
                (path, fetched.new_content),
                (fetched.descriptor.old_path, fetched.old_content),
            )
            if content is not None
        ]
        size = max(content_size(content) for _, content in sides)
        if any(exceeds_size(content, rule.max_file_size) for _, content in sides):
            logger.info("Skipping %s: %d bytes exceeds limit of %d", path, size, rule.max_file_size)
            summary.add(path, ExclusionReason.FILE_SIZE, size)
            return False
        if any(is_binary(side_path, content, rule) for side_path, content in sides):
            logger.info("Skipping binary file %s", path)
            summary.add(path, ExclusionReason.BINARY, size)
            return False
        return True

    async def generate(
        self,
        files: Sequence[FileChangeDescriptor],
        rule: ExclusionRule,
        context_lines: int,
        from_revision: str = DEFAULT_FROM_REVISION,
        to_revision: str | None = None,
    ) -> DiffGenerationResult:
        """
        Build the combined unified diff for ``files``.

        ``to_revision`` None compares against the working tree.

        Raises:
            NoChangesFoundError: no file is left after filtering, or none of
                the remaining files differ
        """
        filter_info = ",".join(rule.extension_patterns) or None
        compare_info = _compare_info(from_revision, to_revision)
        summary = ExclusionSummary()

        selected = self.select(files, rule, summary)
        if not selected:
            raise NoChangesFoundError(compare_info, filter_info)

        fetched_files = await asyncio.gather(
            *(self._fetch_file(d, from_revision, to_revision) for d in selected)
        )

        diffs: list[str] = []
        included: list[str] = []
        for fetched in fetched_files:
            if not self._check_content(fetched, rule, summary):
                continue
            descriptor = fetched.descriptor
            request = FileDiffRequest(
                old_path=descriptor.old_path,
                new_path=descriptor.path,
                old_content=fetched.old_content,
                new_content=fetched.new_content,
                context_lines=context_lines,
                declared_state=_declared_state(descriptor.status),
            )
            diff = generate_file_diff(request, max_edit_distance=self.max_edit_distance)
            if diff:
                diffs.append(diff)
                included.append(descriptor.path)

        if not diffs:
            raise NoChangesFoundError(compare_info, filter_info)

        logger.info(
            "Generated diff for %d files, excluded %d",
            len(included),
            summary.total_files,
        )
        return DiffGenerationResult(diff="\n\n".join(diffs), files=included, exclusions=summary)


async def generate_diff(
    files: Sequence[FileChangeDescriptor],
    provider: ContentProvider,
    context_lines: int = 50,
    exclude_deletes: bool = True,
    extension_filter: str = "",
    from_revision: str = DEFAULT_FROM_REVISION,
    to_revision: str | None = None,
    rule: ExclusionRule | None = None,
) -> str:
    """Convenience wrapper returning only the combined diff text.

    ``rule`` supplies the size and binary settings; ``exclude_deletes`` and
    ``extension_filter`` always override the matching fields.
    """
    base = rule or ExclusionRule()
    rule = base.model_copy(
        update={
            "exclude_deletes": exclude_deletes,
            "extension_patterns": parse_extension_filter(extension_filter),
        }
    )
    result = await DiffOrchestrator(provider).generate(
        files,
        rule,
        context_lines,
        from_revision=from_revision,
        to_revision=to_revision,
    )
    return result.diff
