"""Category taxonomy entities."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4


@dataclass
class Category:
    """A named node in the category forest.

    ``parent_id`` and ``depth`` are derived from the closure relation when
    the category is loaded; they are not stored on the category row.
    """

    name: str
    slug: str
    is_system: bool = False
    parent_id: str | None = None
    depth: int = 0
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ClosureRow:
    """One (ancestor, descendant) pair of the closure relation; depth 0 is self."""

    ancestor_id: str
    descendant_id: str
    depth: int


@dataclass
class CategoryNode:
    """Nested view of a category used for tree display."""

    id: str
    name: str
    slug: str
    is_system: bool
    depth: int
    children: list["CategoryNode"] = field(default_factory=list)


@dataclass
class CategoryStats:
    """Admin listing row: a category plus derived counts."""

    category: Category
    parent_name: str | None
    descendant_count: int
    revision_count: int


@dataclass(frozen=True)
class SubtreeDeletion:
    """Outcome of deleting a category subtree."""

    deleted_count: int
    reassigned_count: int
