from .common import CategoryRefResponse, ErrorResponse, PageResponse, ToggleResponse
from .revision import (
    ArticleCreate,
    MyRevisionResponse,
    PublishQueueItemResponse,
    PublishResponse,
    ReviewEventResponse,
    ReviewFeedback,
    ReviewQueueItemResponse,
    RevisionDetailResponse,
    RevisionHistoryResponse,
    RevisionUpdate,
)
from .category import (
    CategoryAdminResponse,
    CategoryCreate,
    CategoryDetailResponse,
    CategoryReparent,
    CategoryResponse,
    CategoryTreeNode,
    CategoryUpdate,
    SubtreeDeletionResponse,
)
from .feed import (
    FeedItemResponse,
    FeedQuery,
    PublishedArticleResponse,
    SavedItemResponse,
    ViewRequest,
)
from .moderation import (
    AdminArticleQuery,
    AdminArticleResponse,
    ArticleStatusResponse,
    AuditLogEntryResponse,
    AuditLogQuery,
    BanRequest,
    RemovalRequest,
    UserBanResponse,
)
from .social import FollowListQuery, FollowResponse, FollowStatusResponse

__all__ = [
    "CategoryRefResponse",
    "ErrorResponse",
    "PageResponse",
    "ToggleResponse",
    "ArticleCreate",
    "MyRevisionResponse",
    "PublishQueueItemResponse",
    "PublishResponse",
    "ReviewEventResponse",
    "ReviewFeedback",
    "ReviewQueueItemResponse",
    "RevisionDetailResponse",
    "RevisionHistoryResponse",
    "RevisionUpdate",
    "CategoryAdminResponse",
    "CategoryCreate",
    "CategoryDetailResponse",
    "CategoryReparent",
    "CategoryResponse",
    "CategoryTreeNode",
    "CategoryUpdate",
    "SubtreeDeletionResponse",
    "FeedItemResponse",
    "FeedQuery",
    "PublishedArticleResponse",
    "SavedItemResponse",
    "ViewRequest",
    "AdminArticleQuery",
    "AdminArticleResponse",
    "ArticleStatusResponse",
    "AuditLogEntryResponse",
    "AuditLogQuery",
    "BanRequest",
    "RemovalRequest",
    "UserBanResponse",
    "FollowListQuery",
    "FollowResponse",
    "FollowStatusResponse",
]
