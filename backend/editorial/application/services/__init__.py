from .slug_service import SlugService, slugify
from .audit_service import AuditService
from .category_service import CategoryService
from .revision_service import RevisionService
from .review_service import ReviewService
from .publish_service import PublishService
from .feed_service import FeedService
from .article_service import ArticleService
from .social_service import SocialService
from .moderation_service import ModerationService

__all__ = [
    "SlugService",
    "slugify",
    "AuditService",
    "CategoryService",
    "RevisionService",
    "ReviewService",
    "PublishService",
    "FeedService",
    "ArticleService",
    "SocialService",
    "ModerationService",
]
