from .article_repository import ArticleRepository
from .revision_repository import RevisionRepository
from .category_repository import CategoryRepository
from .audit_log_repository import AuditLogRepository
from .feed_repository import FeedRepository
from .social_repository import Counter, SocialRepository
from .moderation_repository import ModerationRepository

__all__ = [
    "ArticleRepository",
    "RevisionRepository",
    "CategoryRepository",
    "AuditLogRepository",
    "FeedRepository",
    "Counter",
    "SocialRepository",
    "ModerationRepository",
]
