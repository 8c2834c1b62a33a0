"""
Validation rules a play must pass before it is cached.

We only weed out obviously bad data here. Last.fm's own spam prevention
(e.g. how far in the future a timestamp may be) is stricter and may change,
so the server gets the final word.
"""

from __future__ import annotations
import calendar
from datetime import datetime, timezone
from enum import Enum

from scrobble_cache.scrobble_point import MIN_SCROBBLE_LENGTH
from scrobble_cache.track import Track

# Last.fm started accepting scrobbles in 2003
SERVICE_INCEPTION = datetime(2003, 1, 1, tzinfo=timezone.utc)

INVALID_ARTIST_NAMES = frozenset({"unknown artist", "unknown", "[unknown]", "[unknown artist]"})


class Invalidity(Enum):
    TOO_SHORT = "TooShort"
    NO_TIMESTAMP = "NoTimestamp"
    FROM_THE_FUTURE = "FromTheFuture"
    FROM_THE_DISTANT_PAST = "FromTheDistantPast"
    ARTIST_NAME_MISSING = "ArtistNameMissing"
    TRACK_NAME_MISSING = "TrackNameMissing"
    ARTIST_INVALID = "ArtistInvalid"

    def __str__(self) -> str:
        return self.value


def add_months(when: datetime, months: int) -> datetime:
    """Calendar month arithmetic; the day is clamped to the target month's end."""
    index = when.month - 1 + months
    year, month = when.year + index // 12, index % 12 + 1
    day = min(when.day, calendar.monthrange(year, month)[1])
    return when.replace(year=year, month=month, day=day)


def is_valid(track: Track, now: datetime | None = None) -> tuple[bool, Invalidity | None]:
    """Return (True, None) for a cacheable track, else (False, first failed rule)."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    if track.duration < MIN_SCROBBLE_LENGTH:
        return False, Invalidity.TOO_SHORT
    if track.timestamp is None:
        return False, Invalidity.NO_TIMESTAMP
    if track.timestamp > add_months(now, 1):
        return False, Invalidity.FROM_THE_FUTURE
    if track.timestamp < SERVICE_INCEPTION:
        return False, Invalidity.FROM_THE_DISTANT_PAST
    if not track.artist:
        return False, Invalidity.ARTIST_NAME_MISSING
    if not track.title:
        return False, Invalidity.TRACK_NAME_MISSING
    if track.artist_name.lower() in INVALID_ARTIST_NAMES:
        return False, Invalidity.ARTIST_INVALID
    return True, None
