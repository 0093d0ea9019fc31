"""
Refreshable repository handle for long-lived hosts.

The one-shot CLI builds a fresh GitRepository per command and does not need
it; editor integrations and services that diff repeatedly hold one of these
per work tree.
"""

import logging
import time
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RepositoryCache(Generic[T]):
    """
    Holds a repository handle built by ``factory``.

    ``get()`` rebuilds the handle once it is older than ``freshness_sec``;
    ``refresh()`` rebuilds it unconditionally. ``clock`` returns seconds and
    defaults to ``time.monotonic``.
    """

    def __init__(
        self,
        factory: Callable[[], T],
        freshness_sec: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if freshness_sec < 0:
            raise ValueError(f"freshness_sec must be non-negative, got {freshness_sec}")
        self.factory = factory
        self.freshness_sec = freshness_sec
        self.clock = clock
        self._handle: T | None = None
        self._loaded_at: float | None = None

    def is_fresh(self) -> bool:
        if self._loaded_at is None:
            return False
        return self.clock() - self._loaded_at < self.freshness_sec

    def refresh(self) -> T:
        self._handle = self.factory()
        self._loaded_at = self.clock()
        logger.debug("Repository handle refreshed")
        return self._handle

    def get(self) -> T:
        if self._handle is None or not self.is_fresh():
            return self.refresh()
        return self._handle

    def invalidate(self) -> None:
        self._handle = None
        self._loaded_at = None
