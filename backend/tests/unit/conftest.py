"""In-memory fake repositories and service fixtures for unit tests."""

from collections.abc import Iterable
from copy import deepcopy
from datetime import date, datetime, timedelta, timezone

import pytest
import pytest_asyncio

from editorial.application.interfaces import (
    ArticleRepository,
    AuditLogRepository,
    CategoryRepository,
    Counter,
    FeedRepository,
    ModerationRepository,
    RevisionRepository,
    SocialRepository,
)
from editorial.application.pagination import CursorPosition
from editorial.application.schemas import ArticleCreate
from editorial.application.services import (
    ArticleService,
    AuditService,
    CategoryService,
    FeedService,
    ModerationService,
    PublishService,
    ReviewService,
    RevisionService,
    SlugService,
    SocialService,
)
from editorial.domain.auth import AuthContext, Role
from editorial.domain.entities import (
    AdminArticleFilter,
    AdminArticleItem,
    Article,
    ArticleStatus,
    AuditLogEntry,
    AuditLogFilter,
    Category,
    CategoryRef,
    CategoryStats,
    ClosureRow,
    FeedAnchor,
    FeedFilter,
    FeedItem,
    FeedSort,
    FollowEdge,
    QueueSort,
    ReviewAction,
    ReviewEvent,
    Revision,
    RevisionListRow,
    RevisionQueueFilter,
    RevisionStatus,
    SavedFeedItem,
    UserBan,
)
from editorial.domain.state_machine import LIVE_STATUSES, PENDING_STATUSES

ARTICLE_BODY = (
    "The chains of transmission were compared across the major collections, "
    "and every narrator was checked against the biographical dictionaries."
)

FOLLOW_EPOCH = datetime(2024, 3, 1, tzinfo=timezone.utc)


def _after_desc(key: tuple, after: CursorPosition | None) -> bool:
    return after is None or key < (after.timestamp, after.id)


class FakeArticleRepository(ArticleRepository):
    """In-memory fake repository for unit testing."""

    def __init__(self):
        self.articles: dict[str, Article] = {}
        # Wired by Repos so the admin listing can read titles and bans.
        self.revision_store: dict[str, Revision] = {}
        self.ban_store: dict[str, UserBan] = {}

    async def get_by_id(self, article_id: str) -> Article | None:
        article = self.articles.get(article_id)
        return deepcopy(article) if article else None

    async def get_by_slug(self, slug: str) -> Article | None:
        for article in self.articles.values():
            if article.slug == slug:
                return deepcopy(article)
        return None

    async def slug_exists(self, slug: str) -> bool:
        return any(a.slug == slug for a in self.articles.values())

    async def create(self, article: Article) -> Article:
        if await self.slug_exists(article.slug):
            raise ValueError(f"duplicate slug {article.slug}")
        self.articles[article.id] = deepcopy(article)
        return deepcopy(article)

    async def save_publication(self, article: Article) -> Article:
        stored = self.articles[article.id]
        stored.published_revision_id = article.published_revision_id
        stored.first_published_at = article.first_published_at
        stored.last_published_at = article.last_published_at
        return deepcopy(stored)

    async def set_status(self, article_id: str, expected: ArticleStatus, target: ArticleStatus) -> bool:
        stored = self.articles.get(article_id)
        if stored is None or stored.status != expected:
            return False
        stored.status = target
        return True

    async def list_for_admin(
        self, article_filter: AdminArticleFilter, after: CursorPosition | None, limit: int
    ) -> list[AdminArticleItem]:
        rows = []
        for article in self.articles.values():
            revision = self.revision_store.get(article.published_revision_id or "")
            if revision is None:
                continue
            if article_filter.status is not None and article.status != article_filter.status:
                continue
            if article_filter.author_id and article.author_id != article_filter.author_id:
                continue
            text = (article_filter.text or "").lower()
            if text and text not in revision.title.lower() and text not in revision.summary.lower():
                continue
            if not _after_desc((article.created_at, article.id), after):
                continue
            rows.append(
                AdminArticleItem(
                    id=article.id,
                    slug=article.slug,
                    author_id=article.author_id,
                    status=article.status,
                    title=revision.title,
                    summary=revision.summary,
                    like_count=article.like_count,
                    save_count=article.save_count,
                    view_count=article.view_count,
                    created_at=article.created_at,
                    last_published_at=article.last_published_at,
                    author_banned=article.author_id in self.ban_store,
                )
            )
        rows.sort(key=lambda r: (r.created_at, r.id), reverse=True)
        return rows[:limit]


class FakeCategoryRepository(CategoryRepository):
    def __init__(self):
        self.categories: dict[str, Category] = {}
        self.closure: set[ClosureRow] = set()
        # revision id → category ids, shared with FakeRevisionRepository
        self.revision_categories: dict[str, list[str]] = {}

    def _placed(self, category: Category) -> Category:
        placed = deepcopy(category)
        placed.parent_id = None
        placed.depth = 0
        for row in self.closure:
            if row.descendant_id != category.id or row.depth == 0:
                continue
            if row.depth == 1:
                placed.parent_id = row.ancestor_id
            placed.depth = max(placed.depth, row.depth)
        return placed

    async def get_by_id(self, category_id: str) -> Category | None:
        category = self.categories.get(category_id)
        return self._placed(category) if category else None

    async def get_by_slug(self, slug: str) -> Category | None:
        for category in self.categories.values():
            if category.slug == slug:
                return self._placed(category)
        return None

    async def get_all(self) -> list[Category]:
        return sorted((self._placed(c) for c in self.categories.values()), key=lambda c: c.name)

    async def existing_ids(self, category_ids: Iterable[str]) -> set[str]:
        return {cid for cid in category_ids if cid in self.categories}

    async def get_refs(self, category_ids: Iterable[str]) -> list[CategoryRef]:
        refs = [
            CategoryRef(id=c.id, name=c.name, slug=c.slug)
            for cid in set(category_ids)
            if (c := self.categories.get(cid)) is not None
        ]
        return sorted(refs, key=lambda r: r.name)

    async def get_stats(self) -> list[CategoryStats]:
        categories = await self.get_all()
        names = {c.id: c.name for c in categories}
        return [
            CategoryStats(
                category=c,
                parent_name=names.get(c.parent_id) if c.parent_id else None,
                descendant_count=sum(1 for r in self.closure if r.ancestor_id == c.id and r.depth > 0),
                revision_count=sum(1 for ids in self.revision_categories.values() if c.id in ids),
            )
            for c in categories
        ]

    async def create(self, category: Category) -> Category:
        self.categories[category.id] = deepcopy(category)
        return deepcopy(category)

    async def update(self, category: Category) -> Category:
        stored = self.categories[category.id]
        stored.name, stored.slug, stored.updated_at = category.name, category.slug, category.updated_at
        return category

    async def ancestors_of(self, category_id: str) -> list[ClosureRow]:
        return sorted((r for r in self.closure if r.descendant_id == category_id), key=lambda r: r.depth)

    async def subtree_of(self, category_id: str) -> list[ClosureRow]:
        return sorted((r for r in self.closure if r.ancestor_id == category_id), key=lambda r: r.depth)

    async def add_closure_rows(self, rows: Iterable[ClosureRow]) -> None:
        self.closure.update(rows)

    async def detach_subtree(self, subtree_ids: set[str]) -> int:
        doomed = {r for r in self.closure if r.descendant_id in subtree_ids and r.ancestor_id not in subtree_ids}
        self.closure -= doomed
        return len(doomed)

    async def reassign_revisions(self, category_ids: set[str], fallback_id: str) -> int:
        orphaned = 0
        for revision_id, ids in self.revision_categories.items():
            if not set(ids) & category_ids:
                continue
            remaining = [cid for cid in ids if cid not in category_ids]
            if not remaining:
                remaining = [fallback_id]
                orphaned += 1
            self.revision_categories[revision_id] = remaining
        return orphaned

    async def delete_many(self, category_ids: set[str]) -> int:
        self.closure = {
            r for r in self.closure
            if r.ancestor_id not in category_ids and r.descendant_id not in category_ids
        }
        deleted = [cid for cid in category_ids if self.categories.pop(cid, None) is not None]
        return len(deleted)


class FakeRevisionRepository(RevisionRepository):
    def __init__(self, articles: FakeArticleRepository, categories: FakeCategoryRepository):
        self.revisions: dict[str, Revision] = {}
        self.events: list[ReviewEvent] = []
        self._articles = articles
        self._categories = categories

    def _load(self, revision: Revision) -> Revision:
        loaded = deepcopy(revision)
        loaded.category_ids = sorted(self._categories.revision_categories.get(revision.id, []))
        return loaded

    async def get_by_id(self, revision_id: str) -> Revision | None:
        revision = self.revisions.get(revision_id)
        return self._load(revision) if revision else None

    async def get_latest_for_article(self, article_id: str) -> Revision | None:
        mine = [r for r in self.revisions.values() if r.article_id == article_id]
        if not mine:
            return None
        return self._load(max(mine, key=lambda r: (r.created_at, r.id)))

    async def find_live_for_article(self, article_id: str) -> Revision | None:
        for revision in self.revisions.values():
            if revision.article_id == article_id and revision.status in LIVE_STATUSES:
                return self._load(revision)
        return None

    async def list_for_article(self, article_id: str) -> list[Revision]:
        mine = [r for r in self.revisions.values() if r.article_id == article_id]
        return [self._load(r) for r in sorted(mine, key=lambda r: (r.created_at, r.id), reverse=True)]

    async def has_pending(self, article_id: str) -> bool:
        return any(
            r.article_id == article_id and r.status in PENDING_STATUSES for r in self.revisions.values()
        )

    async def insert_live(self, revision: Revision) -> bool:
        if await self.find_live_for_article(revision.article_id) is not None:
            return False
        self.revisions[revision.id] = deepcopy(revision)
        await self.replace_categories(revision.id, revision.category_ids)
        return True

    async def update_content(self, revision: Revision) -> Revision:
        stored = self.revisions[revision.id]
        stored.title, stored.summary = revision.title, revision.summary
        stored.content, stored.bibliography = revision.content, revision.bibliography
        stored.updated_at = revision.updated_at
        return self._load(stored)

    async def replace_categories(self, revision_id: str, category_ids: list[str]) -> None:
        self._categories.revision_categories[revision_id] = list(dict.fromkeys(category_ids))

    async def delete(self, revision_id: str) -> bool:
        self._categories.revision_categories.pop(revision_id, None)
        self.events = [e for e in self.events if e.revision_id != revision_id]
        return self.revisions.pop(revision_id, None) is not None

    async def transition(
        self, revision_id: str, expected: RevisionStatus, target: RevisionStatus, at: datetime
    ) -> bool:
        stored = self.revisions.get(revision_id)
        if stored is None or stored.status != expected:
            return False
        stored.status = target
        stored.status_changed_at = at
        return True

    async def add_review_event(self, event: ReviewEvent) -> ReviewEvent:
        self.events.append(deepcopy(event))
        return event

    async def list_review_events(self, revision_id: str) -> list[ReviewEvent]:
        mine = [e for e in self.events if e.revision_id == revision_id]
        return sorted(mine, key=lambda e: (e.created_at, e.id), reverse=True)

    async def _row(self, revision: Revision) -> RevisionListRow:
        article = self._articles.articles[revision.article_id]
        events = await self.list_review_events(revision.id)
        approvals = [e for e in events if e.action == ReviewAction.APPROVE]
        loaded = self._load(revision)
        return RevisionListRow(
            id=revision.id,
            article_id=article.id,
            article_slug=article.slug,
            author_id=article.author_id,
            title=revision.title,
            summary=revision.summary,
            status=revision.status,
            categories=await self._categories.get_refs(loaded.category_ids),
            article_is_published=article.published_revision_id is not None,
            created_at=revision.created_at,
            updated_at=revision.updated_at,
            status_changed_at=revision.status_changed_at,
            feedback_count=sum(1 for e in events if e.action == ReviewAction.FEEDBACK),
            latest_review=events[0] if events else None,
            latest_approval=approvals[0] if approvals else None,
        )

    async def list_queue(
        self,
        queue_filter: RevisionQueueFilter,
        sort: QueueSort,
        after: CursorPosition | None,
        limit: int,
    ) -> list[RevisionListRow]:
        candidates = []
        for revision in self.revisions.values():
            article = self._articles.articles[revision.article_id]
            if revision.status not in queue_filter.statuses:
                continue
            if queue_filter.author_id and article.author_id != queue_filter.author_id:
                continue
            categories = self._categories.revision_categories.get(revision.id, [])
            if queue_filter.category_id and queue_filter.category_id not in categories:
                continue
            key = (revision.status_changed_at, revision.id)
            if sort == QueueSort.OLDEST:
                if after is not None and not key > (after.timestamp, after.id):
                    continue
            elif not _after_desc(key, after):
                continue
            candidates.append((key, revision))
        candidates.sort(key=lambda pair: pair[0], reverse=sort != QueueSort.OLDEST)
        return [await self._row(r) for _, r in candidates[:limit]]

    async def list_by_author(
        self,
        author_id: str,
        status: RevisionStatus | None,
        after: CursorPosition | None,
        limit: int,
    ) -> list[RevisionListRow]:
        candidates = [
            r for r in self.revisions.values()
            if self._articles.articles[r.article_id].author_id == author_id
            and (status is None or r.status == status)
            and _after_desc((r.updated_at, r.id), after)
        ]
        candidates.sort(key=lambda r: (r.updated_at, r.id), reverse=True)
        return [await self._row(r) for r in candidates[:limit]]


class FakeAuditLogRepository(AuditLogRepository):
    def __init__(self):
        self.entries: list[AuditLogEntry] = []

    async def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        self.entries.append(entry)
        return entry

    async def query(
        self, log_filter: AuditLogFilter, after: CursorPosition | None, limit: int
    ) -> list[AuditLogEntry]:
        def matches(e: AuditLogEntry) -> bool:
            return (
                (log_filter.action is None or e.action == log_filter.action)
                and (log_filter.target_type is None or e.target_type == log_filter.target_type)
                and (log_filter.target_id is None or e.target_id == log_filter.target_id)
                and (log_filter.actor_id is None or e.actor_id == log_filter.actor_id)
                and (log_filter.start is None or e.created_at >= log_filter.start)
                and (log_filter.end is None or e.created_at <= log_filter.end)
                and _after_desc((e.created_at, e.id), after)
            )

        rows = sorted(filter(matches, self.entries), key=lambda e: (e.created_at, e.id), reverse=True)
        return rows[:limit]

    def actions(self) -> list[str]:
        return [e.action.value for e in self.entries]


class FakeModerationRepository(ModerationRepository):
    def __init__(self):
        self.bans: dict[str, UserBan] = {}

    async def get_ban(self, user_id: str) -> UserBan | None:
        return self.bans.get(user_id)

    async def add_ban(self, ban: UserBan) -> bool:
        if ban.user_id in self.bans:
            return False
        self.bans[ban.user_id] = ban
        return True

    async def remove_ban(self, user_id: str) -> bool:
        return self.bans.pop(user_id, None) is not None


class FakeSocialRepository(SocialRepository):
    def __init__(self, articles: FakeArticleRepository):
        self._articles = articles
        self.likes: set[tuple[str, str]] = set()
        self.saves: set[tuple[str, str]] = set()
        self.follows: dict[tuple[str, str], datetime] = {}
        self._follow_seq = 0
        self.views: set[tuple[str, str, date]] = set()

    @staticmethod
    def _add(rows: set, key: tuple) -> bool:
        if key in rows:
            return False
        rows.add(key)
        return True

    @staticmethod
    def _remove(rows: set, key: tuple) -> bool:
        if key not in rows:
            return False
        rows.discard(key)
        return True

    async def add_like(self, user_id: str, article_id: str) -> bool:
        return self._add(self.likes, (user_id, article_id))

    async def remove_like(self, user_id: str, article_id: str) -> bool:
        return self._remove(self.likes, (user_id, article_id))

    async def has_liked(self, user_id: str, article_id: str) -> bool:
        return (user_id, article_id) in self.likes

    async def add_save(self, user_id: str, article_id: str) -> bool:
        return self._add(self.saves, (user_id, article_id))

    async def remove_save(self, user_id: str, article_id: str) -> bool:
        return self._remove(self.saves, (user_id, article_id))

    async def has_saved(self, user_id: str, article_id: str) -> bool:
        return (user_id, article_id) in self.saves

    async def add_follow(self, follower_id: str, followed_id: str) -> bool:
        if (follower_id, followed_id) in self.follows:
            return False
        self._follow_seq += 1
        self.follows[(follower_id, followed_id)] = FOLLOW_EPOCH + timedelta(seconds=self._follow_seq)
        return True

    async def remove_follow(self, follower_id: str, followed_id: str) -> bool:
        return self.follows.pop((follower_id, followed_id), None) is not None

    async def is_following(self, follower_id: str, followed_id: str) -> bool:
        return (follower_id, followed_id) in self.follows

    async def following_among(self, follower_id: str, user_ids: list[str]) -> set[str]:
        return {uid for uid in user_ids if (follower_id, uid) in self.follows}

    def _edges(self, pairs, after: CursorPosition | None, limit: int) -> list[FollowEdge]:
        keyed = sorted(((at, uid) for uid, at in pairs), reverse=True)
        return [FollowEdge(user_id=uid, followed_at=at) for at, uid in keyed if _after_desc((at, uid), after)][:limit]

    async def list_followers(self, user_id: str, after: CursorPosition | None, limit: int) -> list[FollowEdge]:
        pairs = [(follower, at) for (follower, followed), at in self.follows.items() if followed == user_id]
        return self._edges(pairs, after, limit)

    async def list_following(self, user_id: str, after: CursorPosition | None, limit: int) -> list[FollowEdge]:
        pairs = [(followed, at) for (follower, followed), at in self.follows.items() if follower == user_id]
        return self._edges(pairs, after, limit)

    async def follower_count(self, user_id: str) -> int:
        return sum(1 for _, followed in self.follows if followed == user_id)

    async def add_view(self, article_id: str, viewer_key: str, day: date) -> bool:
        return self._add(self.views, (article_id, viewer_key, day))

    async def adjust_counter(self, article_id: str, counter: Counter, delta: int) -> int:
        article = self._articles.articles[article_id]
        current = getattr(article, counter.value)
        if current + delta >= 0:
            setattr(article, counter.value, current + delta)
        return getattr(article, counter.value)


class FakeFeedRepository(FeedRepository):
    """Feed over a fixed list of items; category membership is given per item."""

    def __init__(self):
        self.items: list[FeedItem] = []
        self.item_categories: dict[str, set[str]] = {}
        self.saved: list[SavedFeedItem] = []

    def add(self, item: FeedItem, category_ids: set[str] | None = None) -> None:
        self.items.append(item)
        self.item_categories[item.id] = category_ids or set()

    async def list_feed(
        self,
        feed_filter: FeedFilter,
        sort: FeedSort,
        after: FeedAnchor | None,
        limit: int,
        viewer_id: str | None = None,
    ) -> list[FeedItem]:
        def key(item: FeedItem) -> tuple:
            if sort == FeedSort.POPULAR:
                return (item.like_count, item.last_published_at, item.id)
            return (item.last_published_at, item.id)

        anchor = None
        if after is not None:
            anchor = (
                (after.like_count, after.last_published_at, after.id)
                if sort == FeedSort.POPULAR
                else (after.last_published_at, after.id)
            )

        rows = []
        for item in self.items:
            if feed_filter.text and feed_filter.text.lower() not in (item.title + " " + item.summary).lower():
                continue
            if feed_filter.category_ids is not None and not (
                self.item_categories[item.id] & feed_filter.category_ids
            ):
                continue
            if feed_filter.author_id and item.author_id != feed_filter.author_id:
                continue
            if anchor is not None and not key(item) < anchor:
                continue
            rows.append(item)
        return sorted(rows, key=key, reverse=True)[:limit]

    async def current_like_count(self, article_id: str) -> int | None:
        for item in self.items:
            if item.id == article_id:
                return item.like_count
        return None

    async def list_saved(
        self, user_id: str, after: CursorPosition | None, limit: int
    ) -> list[SavedFeedItem]:
        rows = [s for s in self.saved if _after_desc((s.saved_at, s.item.id), after)]
        return sorted(rows, key=lambda s: (s.saved_at, s.item.id), reverse=True)[:limit]


# ── Fixtures ────────────────────────────────────────────────────────


class Repos:
    def __init__(self):
        self.articles = FakeArticleRepository()
        self.categories = FakeCategoryRepository()
        self.revisions = FakeRevisionRepository(self.articles, self.categories)
        self.audit = FakeAuditLogRepository()
        self.moderation = FakeModerationRepository()
        self.social = FakeSocialRepository(self.articles)
        self.articles.revision_store = self.revisions.revisions
        self.articles.ban_store = self.moderation.bans


class Services:
    def __init__(self, repos: Repos):
        self.audit = AuditService(repos.audit)
        self.categories = CategoryService(repos.categories, self.audit, max_depth=3)
        self.revisions = RevisionService(
            repos.articles,
            repos.revisions,
            repos.categories,
            self.audit,
            SlugService(repos.articles),
        )
        self.reviews = ReviewService(repos.articles, repos.revisions, self.revisions, self.audit)
        self.publishing = PublishService(repos.articles, repos.revisions, self.audit)
        self.articles = ArticleService(
            repos.articles, repos.revisions, repos.categories, repos.social, repos.moderation
        )
        self.social = SocialService(repos.social, repos.moderation, self.articles)
        self.moderation = ModerationService(repos.articles, repos.moderation, self.audit)


@pytest.fixture
def repos() -> Repos:
    return Repos()


@pytest.fixture
def services(repos: Repos) -> Services:
    return Services(repos)


@pytest.fixture
def author() -> AuthContext:
    return AuthContext(user_id="author-1")


@pytest.fixture
def reviewer() -> AuthContext:
    return AuthContext(user_id="reviewer-1", roles=frozenset({Role.USER, Role.REVIEWER}))


@pytest.fixture
def admin() -> AuthContext:
    return AuthContext(user_id="admin-1", roles=frozenset({Role.USER, Role.ADMIN}))


@pytest_asyncio.fixture
async def system_category(services: Services) -> Category:
    return await services.categories.ensure_system_category()


@pytest.fixture
def article_input():
    """Factory for valid ArticleCreate payloads."""

    def _make(category_ids: list[str], title: str = "Narrator Criticism in Early Collections", **overrides):
        fields = {"summary": "How narrators were graded.", "content": ARTICLE_BODY, **overrides}
        return ArticleCreate(title=title, category_ids=category_ids, **fields)

    return _make


@pytest.fixture
def feed_repo() -> FakeFeedRepository:
    return FakeFeedRepository()
