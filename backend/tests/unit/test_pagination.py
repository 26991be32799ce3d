"""Unit tests for the cursor codec and page builder."""

import base64
from datetime import datetime, timedelta, timezone

import pytest

from editorial.application.pagination import (
    CursorPosition,
    build_page,
    decode_cursor,
    encode_cursor,
)
from editorial.domain.exceptions import InvalidCursorError, ValidationError

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_cursor_round_trip_preserves_timestamp_and_id():
    position = CursorPosition(T0 + timedelta(microseconds=123), "article-42")
    decoded = decode_cursor(encode_cursor(position))
    assert decoded == position
    assert decoded.timestamp.tzinfo is not None


def test_cursor_is_url_safe():
    token = encode_cursor(CursorPosition(T0, "x" * 40))
    assert all(c.isalnum() or c in "-_=" for c in token)


@pytest.mark.parametrize(
    "token",
    [
        "",
        "not base64 at all!",
        base64.urlsafe_b64encode(b"9|2024-01-01T00:00:00+00:00|id").decode(),
        base64.urlsafe_b64encode(b"1|yesterday|id").decode(),
        base64.urlsafe_b64encode(b"1|2024-01-01T00:00:00+00:00|").decode(),
        base64.urlsafe_b64encode(b"1|2024-01-01T00:00:00+00:00|a|b").decode(),
        base64.urlsafe_b64encode(b"\xff\xfe").decode(),
        "A" * 600,
    ],
)
def test_tampered_cursors_are_rejected(token):
    with pytest.raises(InvalidCursorError):
        decode_cursor(token)


def test_invalid_cursor_is_a_validation_error():
    assert issubclass(InvalidCursorError, ValidationError)


def test_encode_rejects_ids_with_separator():
    with pytest.raises(ValueError):
        encode_cursor(CursorPosition(T0, "a|b"))


def test_build_page_uses_extra_row_as_more_signal():
    rows = list(range(4))
    page = build_page(rows, 3, lambda r: CursorPosition(T0, f"id-{r}"))
    assert page.items == [0, 1, 2]
    assert page.has_more is True
    assert decode_cursor(page.next_cursor).id == "id-2"


def test_build_page_last_page_has_no_cursor():
    page = build_page([1, 2], 3, lambda r: CursorPosition(T0, f"id-{r}"))
    assert page.items == [1, 2]
    assert page.has_more is False
    assert page.next_cursor is None
