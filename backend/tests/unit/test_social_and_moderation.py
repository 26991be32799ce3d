"""Unit tests for reader interactions and admin moderation."""

from datetime import date

import pytest
import pytest_asyncio

from editorial.domain.auth import AuthContext
from editorial.domain.entities import AdminArticleFilter, ArticleStatus, AuditAction
from editorial.domain.exceptions import (
    ConflictError,
    ContentRestrictedError,
    EntityNotFoundError,
    ForbiddenError,
    ValidationError,
)

READER = AuthContext(user_id="reader-1")


@pytest_asyncio.fixture
async def published(services, author, reviewer, admin, system_category, article_input):
    draft = await services.revisions.create_article_with_draft(author, article_input([system_category.id]))
    await services.revisions.submit_to_review(author, draft.id)
    await services.reviews.approve(reviewer, draft.id)
    return await services.publishing.publish(admin, draft.id)


@pytest.mark.asyncio
async def test_like_twice_counts_once(services, repos, published):
    first = await services.social.like(READER, published.id)
    second = await services.social.like(READER, published.id)

    assert first.active and second.active
    assert first.count == second.count == 1
    assert repos.articles.articles[published.id].like_count == 1


@pytest.mark.asyncio
async def test_unlike_without_like_keeps_counter(services, repos, published):
    await services.social.like(READER, published.id)
    await services.social.unlike(READER, published.id)
    again = await services.social.unlike(READER, published.id)

    assert again.active is False
    assert again.count == 0
    assert repos.articles.articles[published.id].like_count == 0


@pytest.mark.asyncio
async def test_save_and_unsave(services, published):
    saved = await services.social.save(READER, published.id)
    assert saved.count == 1
    unsaved = await services.social.unsave(READER, published.id)
    assert unsaved.count == 0


@pytest.mark.asyncio
async def test_viewer_flags_on_published_article(services, published):
    await services.social.like(READER, published.id)

    seen = await services.articles.get_article_by_slug(published.slug, viewer=READER)
    anonymous = await services.articles.get_article_by_slug(published.slug)

    assert seen.item.has_liked is True
    assert seen.item.has_saved is False
    assert anonymous.item.has_liked is None


@pytest.mark.asyncio
async def test_cannot_like_unpublished_article(services, author, system_category, article_input):
    draft = await services.revisions.create_article_with_draft(author, article_input([system_category.id]))
    with pytest.raises(EntityNotFoundError):
        await services.social.like(READER, draft.article_id)


@pytest.mark.asyncio
async def test_banned_reader_cannot_like(services, published):
    with pytest.raises(ForbiddenError):
        await services.social.like(AuthContext(user_id="reader-2", is_banned=True), published.id)


@pytest.mark.asyncio
async def test_follow_rules(services, author, admin):
    followed = await services.social.follow(READER, author.user_id)
    assert followed.count == 1
    assert (await services.social.follow(READER, author.user_id)).count == 1

    with pytest.raises(ConflictError):
        await services.social.follow(READER, READER.user_id)

    await services.moderation.ban_user(admin, "troll-1", "spam")
    with pytest.raises(ForbiddenError):
        await services.social.follow(READER, "troll-1")

    assert (await services.social.unfollow(READER, author.user_id)).count == 0


@pytest.mark.asyncio
async def test_views_count_once_per_viewer_per_day(services, repos, published):
    day = date(2024, 3, 1)
    assert await services.social.track_view(published.id, "viewer-a", day) is True
    assert await services.social.track_view(published.id, "viewer-a", day) is False
    assert await services.social.track_view(published.id, "viewer-b", day) is True
    assert await services.social.track_view(published.id, "viewer-a", date(2024, 3, 2)) is True

    assert repos.articles.articles[published.id].view_count == 3


@pytest.mark.asyncio
async def test_removed_article_is_restricted(services, repos, admin, published):
    removed = await services.moderation.remove_article(admin, published.id, "plagiarism")
    assert removed.status == ArticleStatus.REMOVED

    with pytest.raises(ContentRestrictedError):
        await services.articles.get_article_by_slug(published.slug)
    with pytest.raises(ContentRestrictedError):
        await services.social.like(READER, published.id)

    with pytest.raises(ConflictError):
        await services.moderation.remove_article(admin, published.id, "again")

    restored = await services.moderation.restore_article(admin, published.id)
    assert restored.status == ArticleStatus.PUBLISHED
    assert (await services.articles.get_article_by_slug(published.slug)).item.id == published.id

    removal = [e for e in repos.audit.entries if e.action == AuditAction.ARTICLE_REMOVED]
    assert removal[0].reason == "plagiarism"
    assert AuditAction.ARTICLE_RESTORED.value in repos.audit.actions()


@pytest.mark.asyncio
async def test_restore_requires_removed_article(services, admin, published):
    with pytest.raises(ConflictError):
        await services.moderation.restore_article(admin, published.id)


@pytest.mark.asyncio
async def test_banned_author_content_is_restricted(services, author, admin, published):
    await services.moderation.ban_user(admin, author.user_id, "harassment")

    with pytest.raises(ContentRestrictedError):
        await services.articles.get_article_by_slug(published.slug)

    await services.moderation.unban_user(admin, author.user_id)
    assert (await services.articles.get_article_by_slug(published.slug)).item.id == published.id


@pytest.mark.asyncio
async def test_ban_rules(services, repos, admin, reviewer):
    with pytest.raises(ValidationError):
        await services.moderation.ban_user(admin, admin.user_id, "oops")
    with pytest.raises(ForbiddenError):
        await services.moderation.ban_user(reviewer, "troll-1", "spam")

    await services.moderation.ban_user(admin, "troll-1", "spam")
    assert await services.moderation.is_banned("troll-1")
    with pytest.raises(ConflictError):
        await services.moderation.ban_user(admin, "troll-1", "spam again")

    await services.moderation.unban_user(admin, "troll-1")
    with pytest.raises(ConflictError):
        await services.moderation.unban_user(admin, "troll-1")

    assert repos.audit.actions() == [AuditAction.USER_BANNED.value, AuditAction.USER_UNBANNED.value]


@pytest.mark.asyncio
async def test_follower_list_pages_most_recent_first(services, author):
    for n in range(5):
        await services.social.follow(AuthContext(user_id=f"reader-{n}"), author.user_id)

    first = await services.social.list_followers(author.user_id, limit=2)
    second = await services.social.list_followers(author.user_id, first.next_cursor, limit=2)
    third = await services.social.list_followers(author.user_id, second.next_cursor, limit=2)

    ids = [e.user_id for page in (first, second, third) for e in page.items]
    assert ids == ["reader-4", "reader-3", "reader-2", "reader-1", "reader-0"]
    assert third.has_more is False
    assert third.next_cursor is None


@pytest.mark.asyncio
async def test_following_list_marks_whom_the_viewer_follows(services, author):
    await services.social.follow(READER, "writer-1")
    await services.social.follow(READER, "writer-2")
    await services.social.follow(author, "writer-2")

    page = await services.social.list_following(READER.user_id, viewer=author)
    assert [(e.user_id, e.viewer_follows) for e in page.items] == [("writer-2", True), ("writer-1", False)]

    anonymous = await services.social.list_following(READER.user_id)
    assert [e.viewer_follows for e in anonymous.items] == [None, None]


@pytest.mark.asyncio
async def test_follow_lists_of_banned_user_are_empty(services, author, admin):
    await services.social.follow(READER, author.user_id)
    await services.social.follow(author, "writer-1")
    await services.moderation.ban_user(admin, author.user_id, "repeated plagiarism")

    followers = await services.social.list_followers(author.user_id)
    following = await services.social.list_following(author.user_id)
    assert followers.items == [] and followers.has_more is False and followers.next_cursor is None
    assert following.items == []


@pytest.mark.asyncio
async def test_follow_list_rejects_malformed_cursor(services, author):
    with pytest.raises(ValidationError):
        await services.social.list_followers(author.user_id, "%%%")


@pytest.mark.asyncio
async def test_is_following_tracks_toggles(services, author):
    assert await services.social.is_following(READER, author.user_id) is False
    await services.social.follow(READER, author.user_id)
    assert await services.social.is_following(READER, author.user_id) is True
    await services.social.unfollow(READER, author.user_id)
    assert await services.social.is_following(READER, author.user_id) is False


@pytest_asyncio.fixture
async def second_published(services, author, reviewer, admin, system_category, article_input):
    draft = await services.revisions.create_article_with_draft(
        author, article_input([system_category.id], title="Isnad Analysis Across the Collections")
    )
    await services.revisions.submit_to_review(author, draft.id)
    await services.reviews.approve(reviewer, draft.id)
    return await services.publishing.publish(admin, draft.id)


@pytest.mark.asyncio
async def test_admin_article_list_includes_removed_articles(
    services, author, admin, system_category, article_input, published, second_published
):
    await services.revisions.create_article_with_draft(
        author, article_input([system_category.id], title="A Draft Nobody Has Seen")
    )
    await services.moderation.remove_article(admin, published.id, "copied without citation")

    everything = await services.moderation.list_articles(admin, AdminArticleFilter())
    assert {a.id: a.status for a in everything.items} == {
        published.id: ArticleStatus.REMOVED,
        second_published.id: ArticleStatus.PUBLISHED,
    }

    removed = await services.moderation.list_articles(admin, AdminArticleFilter(status=ArticleStatus.REMOVED))
    assert [a.id for a in removed.items] == [published.id]

    by_text = await services.moderation.list_articles(admin, AdminArticleFilter(text="isnad"))
    assert [a.title for a in by_text.items] == ["Isnad Analysis Across the Collections"]

    by_other_author = await services.moderation.list_articles(admin, AdminArticleFilter(author_id="author-2"))
    assert by_other_author.items == []


@pytest.mark.asyncio
async def test_admin_article_list_pages_and_flags_banned_authors(
    services, author, admin, published, second_published
):
    await services.moderation.ban_user(admin, author.user_id, "repeated plagiarism")

    first = await services.moderation.list_articles(admin, AdminArticleFilter(), limit=1)
    rest = await services.moderation.list_articles(admin, AdminArticleFilter(), first.next_cursor, limit=1)

    assert first.has_more is True and rest.has_more is False
    assert {first.items[0].id, rest.items[0].id} == {published.id, second_published.id}
    assert first.items[0].author_banned and rest.items[0].author_banned


@pytest.mark.asyncio
async def test_admin_article_list_requires_admin(services, reviewer):
    with pytest.raises(ForbiddenError):
        await services.moderation.list_articles(reviewer, AdminArticleFilter())
