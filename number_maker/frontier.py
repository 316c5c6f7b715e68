from __future__ import annotations

"""Frontier: groups waiting to be expanded plus the set of groups already seen."""

import logging
from collections import deque
from typing import Iterable, Optional

from .group import Group, group_id
from .settings import Settings

logger = logging.getLogger(__name__)


class SeenCache:
    """Identities of groups already enqueued, with a reset policy.

    Holding every identity of a large search exhausts memory, so once the set
    would grow past ``limit`` it is cleared and starts again. After a reset
    some groups may be expanded a second time.
    """

    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError("cache limit must be at least 1")
        self.limit = limit
        self.resets = 0
        self._ids: set[str] = set()

    def __contains__(self, ident: object) -> bool:
        return ident in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def add(self, ident: str) -> None:
        if len(self._ids) >= self.limit:
            self._ids.clear()
            self.resets += 1
            logger.debug("[number-maker] seen-set reset #%d at %d entries", self.resets, self.limit)
        self._ids.add(ident)


class Frontier:
    """Work queue of pending groups with deduplication.

    ``depth`` traversal expands the newest group first (keeping the queue
    small), ``breadth`` expands the oldest first. Both visit the same groups
    when the search runs to completion.
    """

    def __init__(self, settings: Settings, cache: Optional[SeenCache] = None) -> None:
        self.settings = settings
        self.depth_first = settings.traversal == "depth"
        self.cache = cache if cache is not None else SeenCache(settings.cache_limit)
        self.queued_total = 0
        self.cache_hit_total = 0
        self._queue: deque[Group] = deque()

    def push(self, group: Group) -> bool:
        """Enqueue ``group`` unless an equivalent group was seen before."""
        if not self._accept(group):
            return False
        self._queue.append(group)
        self.queued_total += 1
        return True

    def extend(self, groups: Iterable[Group]) -> int:
        """Push sibling groups so they are expanded in the order given."""
        accepted = [g for g in groups if self._accept(g)]
        if self.depth_first:
            accepted.reverse()
        self._queue.extend(accepted)
        self.queued_total += len(accepted)
        return len(accepted)

    def _accept(self, group: Group) -> bool:
        ident = group_id(group, self.settings)
        if ident in self.cache:
            self.cache_hit_total += 1
            return False
        self.cache.add(ident)
        return True

    def pop(self) -> Group:
        if self.depth_first:
            return self._queue.pop()
        return self._queue.popleft()

    @property
    def cache_size(self) -> int:
        return len(self.cache)

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)


__all__ = ["SeenCache", "Frontier"]
