from __future__ import annotations

import pytest

from duomatch.matching.feed_queue import FeedQueue
from duomatch.matching.types import FeedCandidate, ProfileCard


def _card(user_id: str) -> ProfileCard:
    return ProfileCard(id=user_id, name=user_id, age=21, city="Recife", current_rank="Epic")


class _Source:
    def __init__(self, total: int) -> None:
        self.pool = [f"p{index:02d}" for index in range(total)]
        self.calls: list[tuple[frozenset[str], int]] = []

    async def __call__(self, staged: frozenset[str], limit: int) -> list[FeedCandidate]:
        self.calls.append((staged, limit))
        fresh = [user_id for user_id in self.pool if user_id not in staged][:limit]
        return [FeedCandidate(profile=_card(user_id)) for user_id in fresh]


@pytest.mark.asyncio
async def test_load_fetches_initial_batch_of_ten() -> None:
    source = _Source(total=30)
    queue = FeedQueue(source)

    loaded = await queue.load()

    assert loaded == 10
    assert queue.current.profile.id == "p00"
    assert source.calls == [(frozenset(), 10)]


@pytest.mark.asyncio
async def test_top_up_triggers_within_two_of_the_end_and_excludes_staged() -> None:
    source = _Source(total=30)
    queue = FeedQueue(source)
    await queue.load()

    for _ in range(7):
        await queue.advance()
    assert len(source.calls) == 1

    await queue.advance()

    assert len(source.calls) == 2
    staged, limit = source.calls[1]
    assert limit == 5
    assert staged == frozenset(f"p{index:02d}" for index in range(10))
    assert queue.remaining == 7


@pytest.mark.asyncio
async def test_exhausted_source_leaves_queue_empty() -> None:
    source = _Source(total=3)
    queue = FeedQueue(source)
    await queue.load()

    for _ in range(3):
        await queue.advance()

    assert queue.current is None
    assert queue.remaining == 0


@pytest.mark.asyncio
async def test_restore_puts_rewound_card_back_in_front() -> None:
    source = _Source(total=30)
    queue = FeedQueue(source)
    await queue.load()
    first = queue.current.profile
    await queue.advance()

    queue.restore(first)

    assert queue.current.profile.id == first.id
    await queue.advance()
    assert queue.current.profile.id == "p01"


@pytest.mark.asyncio
async def test_restore_of_card_no_longer_queued_does_not_replay_swiped_cards() -> None:
    source = _Source(total=30)
    queue = FeedQueue(source)
    await queue.load()
    await queue.advance()
    await queue.advance()

    queue.restore(_card("elsewhere"))

    assert queue.position == 2
    assert queue.current.profile.id == "elsewhere"
    await queue.advance()
    assert queue.current.profile.id == "p02"
