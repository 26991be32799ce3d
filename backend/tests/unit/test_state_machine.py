"""Unit tests for the revision transition table and caller roles."""

import pytest

from editorial.domain.auth import AuthContext, Role
from editorial.domain.entities import RevisionStatus
from editorial.domain.exceptions import ForbiddenError, TransitionForbiddenError
from editorial.domain.state_machine import (
    LIVE_STATUSES,
    VALID_TRANSITIONS,
    can_transition,
    ensure_transition,
)


@pytest.mark.parametrize(
    "current, target",
    [
        (RevisionStatus.DRAFT, RevisionStatus.IN_REVIEW),
        (RevisionStatus.IN_REVIEW, RevisionStatus.CHANGES_REQUESTED),
        (RevisionStatus.IN_REVIEW, RevisionStatus.APPROVED),
        (RevisionStatus.IN_REVIEW, RevisionStatus.WITHDRAWN),
        (RevisionStatus.CHANGES_REQUESTED, RevisionStatus.IN_REVIEW),
        (RevisionStatus.APPROVED, RevisionStatus.PUBLISHED),
    ],
)
def test_allowed_transitions(current, target):
    assert can_transition(current, target)
    ensure_transition(current, target)


@pytest.mark.parametrize(
    "current, target",
    [
        (RevisionStatus.DRAFT, RevisionStatus.APPROVED),
        (RevisionStatus.DRAFT, RevisionStatus.PUBLISHED),
        (RevisionStatus.CHANGES_REQUESTED, RevisionStatus.WITHDRAWN),
        (RevisionStatus.APPROVED, RevisionStatus.IN_REVIEW),
        (RevisionStatus.PUBLISHED, RevisionStatus.PUBLISHED),
        (RevisionStatus.WITHDRAWN, RevisionStatus.IN_REVIEW),
    ],
)
def test_rejected_transitions_carry_both_statuses(current, target):
    assert not can_transition(current, target)
    with pytest.raises(TransitionForbiddenError) as exc_info:
        ensure_transition(current, target, "publish")
    assert exc_info.value.current_status == current.value
    assert exc_info.value.target_status == target.value
    assert exc_info.value.details == {"current_status": current.value, "target_status": target.value}


def test_terminal_states_have_no_exits():
    assert VALID_TRANSITIONS[RevisionStatus.PUBLISHED] == frozenset()
    assert VALID_TRANSITIONS[RevisionStatus.WITHDRAWN] == frozenset()
    assert LIVE_STATUSES == {
        RevisionStatus.DRAFT,
        RevisionStatus.IN_REVIEW,
        RevisionStatus.CHANGES_REQUESTED,
        RevisionStatus.APPROVED,
    }


def test_every_status_has_a_table_entry():
    assert set(VALID_TRANSITIONS) == set(RevisionStatus)


def test_admin_counts_as_reviewer():
    admin = AuthContext(user_id="a", roles=frozenset({Role.ADMIN}))
    admin.require_reviewer()
    admin.require_admin()


def test_banned_reviewer_is_rejected():
    banned = AuthContext(user_id="r", roles=frozenset({Role.REVIEWER}), is_banned=True)
    with pytest.raises(ForbiddenError):
        banned.require_reviewer()


def test_plain_user_is_not_admin():
    with pytest.raises(ForbiddenError):
        AuthContext(user_id="u").require_admin()
