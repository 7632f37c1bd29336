from __future__ import annotations

from collections.abc import Awaitable, Callable

from duomatch.matching.constants import FEED_INITIAL_BATCH, FEED_TOP_UP_BATCH, FEED_TOP_UP_THRESHOLD
from duomatch.matching.types import FeedCandidate, ProfileCard

FetchBatch = Callable[[frozenset[str], int], Awaitable[list[FeedCandidate]]]


class FeedQueue:
    """Viewer-side queue of swipeable cards with incremental top-up.

    `fetch` receives the ids already staged in the queue (so a top-up never
    repeats a card) and the batch size.
    """

    def __init__(
        self,
        fetch: FetchBatch,
        *,
        initial_batch: int = FEED_INITIAL_BATCH,
        top_up_batch: int = FEED_TOP_UP_BATCH,
        top_up_threshold: int = FEED_TOP_UP_THRESHOLD,
    ) -> None:
        self._fetch = fetch
        self._initial_batch = initial_batch
        self._top_up_batch = top_up_batch
        self._top_up_threshold = top_up_threshold
        self._items: list[FeedCandidate] = []
        self._cursor = 0

    @property
    def current(self) -> FeedCandidate | None:
        if self._cursor < len(self._items):
            return self._items[self._cursor]
        return None

    @property
    def remaining(self) -> int:
        return len(self._items) - self._cursor

    @property
    def position(self) -> int:
        return self._cursor

    @property
    def staged_ids(self) -> frozenset[str]:
        return frozenset(item.profile.id for item in self._items)

    async def load(self) -> int:
        self._items = list(await self._fetch(frozenset(), self._initial_batch))
        self._cursor = 0
        return len(self._items)

    async def top_up_if_needed(self) -> int:
        if self.remaining > self._top_up_threshold:
            return 0
        staged = self.staged_ids
        fresh = [
            item
            for item in await self._fetch(staged, self._top_up_batch)
            if item.profile.id not in staged
        ]
        self._items.extend(fresh)
        return len(fresh)

    async def advance(self) -> FeedCandidate | None:
        if self._cursor < len(self._items):
            self._cursor += 1
        await self.top_up_if_needed()
        return self.current

    def restore(self, profile: ProfileCard) -> None:
        """Makes a rewound card current again; cards already swiped stay behind the cursor."""
        before = [item for item in self._items[: self._cursor] if item.profile.id != profile.id]
        after = [item for item in self._items[self._cursor :] if item.profile.id != profile.id]
        self._items = before + [FeedCandidate(profile=profile)] + after
        self._cursor = len(before)
