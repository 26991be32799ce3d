from .article import AdminArticleFilter, AdminArticleItem, Article, ArticleStatus
from .revision import Revision, RevisionStatus, ReviewEvent, ReviewAction
from .category import Category, CategoryNode, CategoryStats, ClosureRow, SubtreeDeletion
from .audit_log import AuditAction, AuditLogEntry, AuditLogFilter, AuditTargetType
from .feed import (
    CategoryRef,
    FeedAnchor,
    FeedFilter,
    FeedItem,
    FeedSort,
    PublishedArticle,
    SavedFeedItem,
)
from .queue import (
    MyRevisionItem,
    PublishQueueItem,
    QueueSort,
    ReviewQueueItem,
    RevisionDetail,
    RevisionHistoryItem,
    RevisionListRow,
    RevisionQueueFilter,
)
from .social import FollowEdge, ToggleResult, UserBan

__all__ = [
    "AdminArticleFilter",
    "AdminArticleItem",
    "Article",
    "ArticleStatus",
    "Revision",
    "RevisionStatus",
    "ReviewEvent",
    "ReviewAction",
    "Category",
    "CategoryNode",
    "CategoryStats",
    "ClosureRow",
    "SubtreeDeletion",
    "AuditAction",
    "AuditLogEntry",
    "AuditLogFilter",
    "AuditTargetType",
    "CategoryRef",
    "FeedAnchor",
    "FeedFilter",
    "FeedItem",
    "FeedSort",
    "PublishedArticle",
    "SavedFeedItem",
    "MyRevisionItem",
    "PublishQueueItem",
    "QueueSort",
    "ReviewQueueItem",
    "RevisionDetail",
    "RevisionHistoryItem",
    "RevisionListRow",
    "RevisionQueueFilter",
    "FollowEdge",
    "ToggleResult",
    "UserBan",
]
