"""Fixtures that run the SQLAlchemy repositories against a throwaway SQLite file."""

import pytest
import pytest_asyncio

from editorial.application.schemas import ArticleCreate, CategoryCreate
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
from editorial.config import Settings
from editorial.domain.auth import AuthContext, Role
from editorial.infrastructure.database import Base, build_engine, build_session_factory, session_scope
from editorial.infrastructure.database.repositories import (
    SQLAlchemyArticleRepository,
    SQLAlchemyAuditLogRepository,
    SQLAlchemyCategoryRepository,
    SQLAlchemyFeedRepository,
    SQLAlchemyModerationRepository,
    SQLAlchemyRevisionRepository,
    SQLAlchemySocialRepository,
)

AUTHOR = AuthContext(user_id="author-1")
REVIEWER = AuthContext(user_id="reviewer-1", roles=frozenset({Role.USER, Role.REVIEWER}))
ADMIN = AuthContext(user_id="admin-1", roles=frozenset({Role.USER, Role.ADMIN}))

ARTICLE_BODY = (
    "Each report was traced through its chain of narrators, and the gradings "
    "of the classical critics were collected alongside the primary sources."
)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite:///{tmp_path / 'editorial.db'}", app_env="test")


@pytest_asyncio.fixture
async def engine(settings):
    engine = build_engine(settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    async with session_scope(build_session_factory(engine)) as session:
        yield session


class Stack:
    """All services wired onto one session, as a single request would see them."""

    def __init__(self, session, settings: Settings):
        self.session = session
        articles = SQLAlchemyArticleRepository(session)
        revisions = SQLAlchemyRevisionRepository(session)
        categories = SQLAlchemyCategoryRepository(session)
        social = SQLAlchemySocialRepository(session)
        moderation = SQLAlchemyModerationRepository(session)

        self.audit = AuditService(SQLAlchemyAuditLogRepository(session))
        self.categories = CategoryService(
            categories, self.audit, max_depth=settings.max_category_depth
        )
        self.revisions = RevisionService(
            articles, revisions, categories, self.audit, SlugService(articles)
        )
        self.reviews = ReviewService(articles, revisions, self.revisions, self.audit)
        self.publishing = PublishService(articles, revisions, self.audit)
        self.articles = ArticleService(articles, revisions, categories, social, moderation)
        self.social = SocialService(social, moderation, self.articles)
        self.moderation = ModerationService(articles, moderation, self.audit)
        self.feed = FeedService(SQLAlchemyFeedRepository(session), self.categories)

        self.article_repo = articles
        self.revision_repo = revisions
        self.category_repo = categories
        self.social_repo = social

    async def category(self, name: str, parent=None):
        return await self.categories.create_category(
            ADMIN, CategoryCreate(name=name, parent_id=parent.id if parent else None)
        )

    async def draft(self, title: str, category_ids: list[str], author: AuthContext = AUTHOR):
        return await self.revisions.create_article_with_draft(
            author,
            ArticleCreate(title=title, summary="", content=ARTICLE_BODY, category_ids=category_ids),
        )

    async def publish_new(self, title: str, category_ids: list[str], author: AuthContext = AUTHOR):
        draft = await self.draft(title, category_ids, author)
        await self.revisions.submit_to_review(author, draft.id)
        await self.reviews.approve(REVIEWER, draft.id)
        return await self.publishing.publish(ADMIN, draft.id)


@pytest_asyncio.fixture
async def stack(session, settings) -> Stack:
    stack = Stack(session, settings)
    stack.system_category = await stack.categories.ensure_system_category()
    return stack


@pytest.fixture
def admin() -> AuthContext:
    return ADMIN
