from .article_repository import SQLAlchemyArticleRepository
from .revision_repository import SQLAlchemyRevisionRepository
from .category_repository import SQLAlchemyCategoryRepository
from .audit_log_repository import SQLAlchemyAuditLogRepository
from .feed_repository import SQLAlchemyFeedRepository
from .social_repository import SQLAlchemySocialRepository
from .moderation_repository import SQLAlchemyModerationRepository

__all__ = [
    "SQLAlchemyArticleRepository",
    "SQLAlchemyRevisionRepository",
    "SQLAlchemyCategoryRepository",
    "SQLAlchemyAuditLogRepository",
    "SQLAlchemyFeedRepository",
    "SQLAlchemySocialRepository",
    "SQLAlchemyModerationRepository",
]
