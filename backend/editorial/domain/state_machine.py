"""Revision lifecycle transition table.

States:
    DRAFT → IN_REVIEW → CHANGES_REQUESTED → IN_REVIEW → ...
                     ↘ APPROVED → PUBLISHED
                     ↘ WITHDRAWN

PUBLISHED and WITHDRAWN are terminal. Any transition not listed is rejected.
"""

from editorial.domain.entities.revision import RevisionStatus
from editorial.domain.exceptions import TransitionForbiddenError

VALID_TRANSITIONS: dict[RevisionStatus, frozenset[RevisionStatus]] = {
    RevisionStatus.DRAFT: frozenset({RevisionStatus.IN_REVIEW}),
    RevisionStatus.IN_REVIEW: frozenset({
        RevisionStatus.CHANGES_REQUESTED,
        RevisionStatus.APPROVED,
        RevisionStatus.WITHDRAWN,
    }),
    RevisionStatus.CHANGES_REQUESTED: frozenset({RevisionStatus.IN_REVIEW}),
    RevisionStatus.APPROVED: frozenset({RevisionStatus.PUBLISHED}),
    RevisionStatus.WITHDRAWN: frozenset(),  # Terminal
    RevisionStatus.PUBLISHED: frozenset(),  # Terminal
}

LIVE_STATUSES: frozenset[RevisionStatus] = frozenset(
    s for s in RevisionStatus if s.is_live
)

EDITABLE_STATUSES: frozenset[RevisionStatus] = frozenset({
    RevisionStatus.DRAFT,
    RevisionStatus.CHANGES_REQUESTED,
})

# Revisions a reviewer may open in the review detail view.
REVIEWABLE_STATUSES: frozenset[RevisionStatus] = frozenset({
    RevisionStatus.IN_REVIEW,
    RevisionStatus.CHANGES_REQUESTED,
    RevisionStatus.APPROVED,
})

# Revisions that count as a pending update of an already-published article.
PENDING_STATUSES: frozenset[RevisionStatus] = frozenset({
    RevisionStatus.IN_REVIEW,
    RevisionStatus.APPROVED,
})


def can_transition(current: RevisionStatus, target: RevisionStatus) -> bool:
    """Check if the transition table allows current → target."""
    return target in VALID_TRANSITIONS.get(current, frozenset())


def ensure_transition(
    current: RevisionStatus,
    target: RevisionStatus,
    action: str | None = None,
) -> None:
    """Raise TransitionForbiddenError unless current → target is allowed."""
    if not can_transition(current, target):
        raise TransitionForbiddenError(current.value, target.value, action)
