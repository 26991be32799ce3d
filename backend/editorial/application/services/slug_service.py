"""URL slug derivation and collision resolution for articles."""

import logging
from datetime import datetime, timezone

from slugify import slugify as _slugify

from editorial.application.interfaces import ArticleRepository

logger = logging.getLogger(__name__)

# Applied before transliteration so dotless/dotted i and friends map to plain ASCII.
TRANSLITERATIONS: list[tuple[str, str]] = [
    ("ç", "c"), ("Ç", "c"),
    ("ğ", "g"), ("Ğ", "g"),
    ("ı", "i"), ("İ", "i"),
    ("ö", "o"), ("Ö", "o"),
    ("ş", "s"), ("Ş", "s"),
    ("ü", "u"), ("Ü", "u"),
]

FALLBACK_SLUG = "article"


def slugify(text: str) -> str:
    """Lowercase ASCII slug: diacritics stripped, non-alphanumeric runs become one hyphen."""
    return _slugify(text or "", replacements=TRANSLITERATIONS, lowercase=True)


class SlugService:
    """Generates article slugs that are unique at the time of the check.

    The slug column is also unique in storage, so a lost race surfaces as a
    failed insert rather than a duplicate.
    """

    def __init__(
        self,
        article_repository: ArticleRepository,
        max_length: int = 200,
        max_attempts: int = 1000,
    ):
        self._articles = article_repository
        self._max_length = max_length
        self._max_attempts = max_attempts

    async def generate_unique_slug(self, title: str) -> str:
        # Leave room for "-<attempt>" without exceeding max_length.
        room = len(str(self._max_attempts)) + 1
        base = slugify(title)[: self._max_length - room].strip("-") or FALLBACK_SLUG

        if not await self._articles.slug_exists(base):
            return base

        for attempt in range(1, self._max_attempts + 1):
            candidate = f"{base}-{attempt}"
            if not await self._articles.slug_exists(candidate):
                return candidate

        stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")
        logger.warning("Slug probing exhausted for '%s'; using timestamp suffix", base)
        trimmed = base[: self._max_length - len(stamp) - 1].strip("-") or FALLBACK_SLUG
        return f"{trimmed}-{stamp}"
