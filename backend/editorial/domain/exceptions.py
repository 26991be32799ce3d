"""Domain-specific exceptions: framework-independent.

Every rejected operation surfaces as one of these. The API layer maps
``code`` to an HTTP status; nothing in the core converts them to strings.
"""

from typing import Any


class EditorialError(Exception):
    """Base class for all errors raised by the editorial core."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(EditorialError):
    """Raised when the caller supplied malformed input."""

    code = "VALIDATION_ERROR"


class InvalidCursorError(ValidationError):
    """Raised when a pagination cursor cannot be decoded."""

    def __init__(self, reason: str = "malformed cursor"):
        super().__init__(f"Invalid pagination cursor: {reason}")


class EntityNotFoundError(EditorialError):
    """Raised when a requested entity does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"{entity_type} with id '{entity_id}' not found",
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class AuthenticationError(EditorialError):
    """Raised when an operation needs a caller identity and none was supplied."""

    code = "UNAUTHENTICATED"


class ForbiddenError(EditorialError):
    """Raised when the actor is authenticated but not entitled."""

    code = "FORBIDDEN"


class TransitionForbiddenError(ForbiddenError):
    """Raised when a revision cannot move from its current status to the target."""

    def __init__(self, current_status: str, target_status: str, action: str | None = None):
        self.current_status = current_status
        self.target_status = target_status
        verb = action or f"move revision to {target_status}"
        super().__init__(
            f"Cannot {verb}: revision is in {current_status} status",
            {"current_status": current_status, "target_status": target_status},
        )


class ContentRestrictedError(ForbiddenError):
    """Raised when content exists but is hidden (removed article or banned author)."""

    code = "CONTENT_RESTRICTED"


class ConflictError(EditorialError):
    """Raised when the current state contradicts the request."""

    code = "CONFLICT"


class DuplicateEntityError(ConflictError):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(
            f"{entity_type} with {field}='{value}' already exists",
            {"entity_type": entity_type, "field": field, "value": value},
        )


class LiveRevisionConflictError(ConflictError):
    """Raised when an article already has a draft or pending revision."""

    def __init__(self, article_id: str, existing_revision_id: str):
        self.article_id = article_id
        self.existing_revision_id = existing_revision_id
        super().__init__(
            "This article already has a pending revision. "
            "Complete or delete it before starting a new one.",
            {"article_id": article_id, "existing_revision_id": existing_revision_id},
        )
