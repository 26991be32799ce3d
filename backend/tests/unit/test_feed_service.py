"""Unit tests for FeedService cursor handling and filter assembly."""

from datetime import datetime, timedelta, timezone

import pytest

from editorial.application.schemas import CategoryCreate, FeedQuery
from editorial.application.services import FeedService
from editorial.application.pagination import CursorPosition, encode_cursor
from editorial.domain.entities import FeedFilter, FeedItem, FeedSort
from editorial.domain.exceptions import EntityNotFoundError, InvalidCursorError, ValidationError

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _item(n: int, likes: int = 0, author: str = "author-1", published: datetime | None = None) -> FeedItem:
    when = published or T0 + timedelta(hours=n)
    return FeedItem(
        id=f"article-{n:02d}",
        slug=f"article-{n:02d}",
        author_id=author,
        title=f"Article {n}",
        summary="summary",
        categories=[],
        like_count=likes,
        save_count=0,
        view_count=0,
        first_published_at=when,
        last_published_at=when,
    )


@pytest.fixture
def feed(feed_repo, services) -> FeedService:
    return FeedService(feed_repo, services.categories, default_limit=3, max_limit=5)


async def _collect(feed: FeedService, **query) -> list[str]:
    seen, cursor = [], None
    while True:
        page = await feed.get_feed(FeedQuery(cursor=cursor, **query))
        seen.extend(i.id for i in page.items)
        if not page.has_more:
            return seen
        cursor = page.next_cursor


@pytest.mark.asyncio
async def test_new_feed_pages_cover_every_item_once(feed, feed_repo):
    for n in range(8):
        feed_repo.add(_item(n))

    seen = await _collect(feed)

    assert seen == [f"article-{n:02d}" for n in reversed(range(8))]


@pytest.mark.asyncio
async def test_ties_on_timestamp_are_broken_by_id(feed, feed_repo):
    for n in range(5):
        feed_repo.add(_item(n, published=T0))

    seen = await _collect(feed, limit=2)

    assert seen == sorted((f"article-{n:02d}" for n in range(5)), reverse=True)


@pytest.mark.asyncio
async def test_popular_feed_orders_by_likes_then_recency(feed, feed_repo):
    feed_repo.add(_item(0, likes=5))
    feed_repo.add(_item(1, likes=1))
    feed_repo.add(_item(2, likes=5))
    feed_repo.add(_item(3, likes=0))

    seen = await _collect(feed, sort=FeedSort.POPULAR, limit=1)

    assert seen == ["article-02", "article-00", "article-01", "article-03"]


@pytest.mark.asyncio
async def test_popular_cursor_for_deleted_anchor_is_invalid(feed):
    cursor = encode_cursor(CursorPosition(T0, "gone"))
    with pytest.raises(InvalidCursorError):
        await feed.get_feed(FeedQuery(sort=FeedSort.POPULAR, cursor=cursor))


@pytest.mark.asyncio
async def test_limit_is_clamped_to_maximum(feed, feed_repo):
    for n in range(10):
        feed_repo.add(_item(n))
    page = await feed.get_feed(FeedQuery(limit=50))
    assert len(page.items) == 5
    assert page.has_more


@pytest.mark.asyncio
async def test_category_filter_expands_subtree(feed, feed_repo, services, admin):
    hadith = await services.categories.create_category(admin, CategoryCreate(name="Hadith"))
    sciences = await services.categories.create_category(
        admin, CategoryCreate(name="Hadith Sciences", parent_id=hadith.id)
    )
    fiqh = await services.categories.create_category(admin, CategoryCreate(name="Fiqh"))
    feed_repo.add(_item(0), {sciences.id})
    feed_repo.add(_item(1), {fiqh.id})
    feed_repo.add(_item(2), {hadith.id})

    seen = await _collect(feed, category="hadith")

    assert seen == ["article-02", "article-00"]


@pytest.mark.asyncio
async def test_unknown_category_is_not_found(feed):
    with pytest.raises(EntityNotFoundError):
        await feed.get_feed(FeedQuery(category="nope"))


@pytest.mark.asyncio
async def test_text_and_author_filters(feed, feed_repo):
    feed_repo.add(_item(0, author="a"))
    feed_repo.add(_item(1, author="b"))
    feed_repo.add(_item(11, author="a"))

    by_author = await _collect(feed, author_id="a")
    by_text = await _collect(feed, query="article 1")

    assert by_author == ["article-11", "article-00"]
    assert by_text == ["article-11", "article-01"]


def test_inverted_date_range_is_rejected():
    with pytest.raises(ValueError):
        FeedQuery(published_from=T0, published_to=T0 - timedelta(days=1))


def test_naive_bound_is_read_as_utc_next_to_an_aware_one():
    query = FeedQuery(published_from=datetime(2024, 1, 1), published_to=T0 + timedelta(days=1))
    assert query.published_from == T0
    assert query.published_from.tzinfo is not None

    with pytest.raises(ValueError):
        FeedQuery(published_from=datetime(2024, 1, 3), published_to=T0 + timedelta(days=1))


def test_offset_bounds_are_converted_to_utc():
    plus_three = timezone(timedelta(hours=3))
    feed_filter = FeedFilter().with_published_range(
        datetime(2024, 1, 1, 3, tzinfo=plus_three), datetime(2024, 1, 2)
    )
    assert feed_filter.published_from == T0
    assert feed_filter.published_from.utcoffset() == timedelta(0)
    assert feed_filter.published_to == T0 + timedelta(days=1)
    assert feed_filter.validate() is feed_filter


@pytest.mark.asyncio
async def test_malformed_cursor_is_a_validation_error(feed):
    with pytest.raises(ValidationError):
        await feed.get_feed(FeedQuery(cursor="%%%"))
