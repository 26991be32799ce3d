from .article import ArticleModel
from .revision import ReviewEventModel, RevisionCategoryModel, RevisionModel
from .category import CategoryClosureModel, CategoryModel
from .audit_log import AuditLogModel
from .social import (
    ArticleLikeModel,
    ArticleSaveModel,
    ArticleViewModel,
    FollowModel,
    UserBanModel,
)

__all__ = [
    "ArticleModel",
    "RevisionModel",
    "RevisionCategoryModel",
    "ReviewEventModel",
    "CategoryModel",
    "CategoryClosureModel",
    "AuditLogModel",
    "ArticleLikeModel",
    "ArticleSaveModel",
    "ArticleViewModel",
    "FollowModel",
    "UserBanModel",
]
