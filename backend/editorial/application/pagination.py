"""Keyset pagination helpers: the opaque cursor codec and the page container.

Cursor tokens are URL-safe base64 of ``<version>|<iso timestamp>|<id>``.
Decoding dispatches on the version field so the payload can change without
invalidating tokens already handed to clients.
"""

import base64
import binascii
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Generic, TypeVar

from editorial.domain.exceptions import InvalidCursorError

T = TypeVar("T")

CURSOR_VERSION = "1"
_SEPARATOR = "|"


@dataclass(frozen=True)
class CursorPosition:
    """Decoded cursor: the sort timestamp and id of the last row seen."""

    timestamp: datetime
    id: str


@dataclass
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False


def encode_cursor(position: CursorPosition) -> str:
    if not position.id or _SEPARATOR in position.id:
        raise ValueError(f"Cursor id must be non-empty and must not contain '{_SEPARATOR}'")
    raw = _SEPARATOR.join((CURSOR_VERSION, position.timestamp.isoformat(), position.id))
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def _decode_v1(payload: list[str]) -> CursorPosition:
    if len(payload) != 2:
        raise InvalidCursorError("unexpected field count")
    raw_ts, raw_id = payload
    if not raw_id:
        raise InvalidCursorError("missing id")
    try:
        timestamp = datetime.fromisoformat(raw_ts)
    except ValueError:
        raise InvalidCursorError("bad timestamp") from None
    return CursorPosition(timestamp=timestamp, id=raw_id)


_DECODERS: dict[str, Callable[[list[str]], CursorPosition]] = {
    "1": _decode_v1,
}


def decode_cursor(token: str) -> CursorPosition:
    """Decode a token produced by encode_cursor; raise InvalidCursorError otherwise."""
    if not token or len(token) > 512:
        raise InvalidCursorError("empty or oversized token")
    try:
        raw = base64.b64decode(token.encode("ascii"), altchars=b"-_", validate=True)
        text = raw.decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        raise InvalidCursorError("not a valid token") from None

    version, _, rest = text.partition(_SEPARATOR)
    decoder = _DECODERS.get(version)
    if decoder is None:
        raise InvalidCursorError(f"unsupported version '{version}'")
    return decoder(rest.split(_SEPARATOR))


def build_page(
    rows: list[T],
    limit: int,
    position_of: Callable[[T], CursorPosition],
) -> Page[T]:
    """Turn ``limit + 1`` fetched rows into a page; the extra row signals more."""
    has_more = len(rows) > limit
    items = rows[:limit]
    next_cursor = encode_cursor(position_of(items[-1])) if has_more and items else None
    return Page(items=items, next_cursor=next_cursor, has_more=has_more)
