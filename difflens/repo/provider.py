import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence

from difflens.errors import ContentUnavailableError

logger = logging.getLogger(__name__)

# (revision, path) -> text, or None when the strategy has nothing.
# revision None means the working tree.
RetrievalStrategy = Callable[[str | None, str], Awaitable[str | None]]


class ContentProvider(ABC):
    """Supplies file text for a revision or for the working tree."""

    @abstractmethod
    async def get_content_at_revision(self, revision: str, path: str) -> str | None:
        """Return the file text at ``revision``, or None if it does not exist there."""
        pass

    @abstractmethod
    async def get_working_content(self, path: str) -> str | None:
        """Return the current working tree text, or None if the file is gone."""
        pass


class ContentRetrievalChain(ContentProvider):
    """
    Try retrieval strategies in order until one produces text.

    Each attempt is logged. A strategy that raises ``ContentUnavailableError``
    or ``OSError`` counts as a miss, so later strategies still run. Any other
    exception propagates.
    """

    def __init__(self, strategies: Sequence[tuple[str, RetrievalStrategy]]):
        if not strategies:
            raise ValueError("ContentRetrievalChain needs at least one strategy")
        self.strategies = list(strategies)

    async def retrieve(self, revision: str | None, path: str) -> str | None:
        where = f"{revision}:{path}" if revision else path
        for name, strategy in self.strategies:
            try:
                content = await strategy(revision, path)
            except (ContentUnavailableError, OSError) as exc:
                logger.debug("Strategy %s failed for %s: %s", name, where, exc)
                continue
            if content is not None:
                logger.debug("Strategy %s supplied %s", name, where)
                return content
            logger.debug("Strategy %s had no content for %s", name, where)

        logger.warning("No strategy could supply content for %s", where)
        return None

    async def get_content_at_revision(self, revision: str, path: str) -> str | None:
        return await self.retrieve(revision, path)

    async def get_working_content(self, path: str) -> str | None:
        return await self.retrieve(None, path)
