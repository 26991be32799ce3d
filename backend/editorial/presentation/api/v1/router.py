"""V1 API router: aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from editorial.presentation.api.v1.endpoints.health import router as health_router
from editorial.presentation.api.v1.endpoints.articles import router as articles_router
from editorial.presentation.api.v1.endpoints.revisions import router as revisions_router
from editorial.presentation.api.v1.endpoints.reviews import router as reviews_router
from editorial.presentation.api.v1.endpoints.publishing import router as publishing_router
from editorial.presentation.api.v1.endpoints.categories import router as categories_router
from editorial.presentation.api.v1.endpoints.feed import router as feed_router
from editorial.presentation.api.v1.endpoints.users import router as users_router
from editorial.presentation.api.v1.endpoints.moderation import router as moderation_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(articles_router)
router.include_router(revisions_router)
router.include_router(reviews_router)
router.include_router(publishing_router)
router.include_router(categories_router)
router.include_router(feed_router)
router.include_router(users_router)
router.include_router(moderation_router)
