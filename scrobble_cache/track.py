from __future__ import annotations
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime, timezone

# Anything outside the XML 1.0 Char production makes the cache file unreadable
_NOT_XML_CHAR = re.compile(r"[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")

def xml_safe(value: str) -> str:
    # parsers turn \r and \r\n into \n, so store it that way up front
    value = value.replace("\r\n", "\n").replace("\r", "\n")
    return _NOT_XML_CHAR.sub("", value)

# -------------------------
# A single play, as queued for Last.fm
# -------------------------
@dataclass(frozen=True)
class Track:
    """One play of a track. Equality is by value, so duplicates compare equal.

    `timestamp` is when playback started. It is kept timezone-aware (UTC) and
    truncated to whole seconds, which is all the cache file can hold.
    """
    artist: str | None = None
    title: str = ""
    album: str | None = None
    duration: int = 0            # seconds
    timestamp: datetime | None = None
    mbid: str | None = None
    source: str = "P"            # Audioscrobbler source code, P = chosen by user
    null: bool = False

    def __post_init__(self):
        ts = self.timestamp
        if ts is not None:
            if ts.tzinfo is None:
                ts = ts.replace(tzinfo=timezone.utc)
            object.__setattr__(self, "timestamp", ts.astimezone(timezone.utc).replace(microsecond=0))
        if self.title is None:
            object.__setattr__(self, "title", "")
        for name in ("artist", "title", "album", "mbid", "source"):
            value = getattr(self, name)
            if value:
                object.__setattr__(self, name, xml_safe(value))
        # the file format cannot tell an empty field from a missing one
        for name in ("artist", "album", "mbid"):
            if getattr(self, name) == "":
                object.__setattr__(self, name, None)
        if not self.source:
            object.__setattr__(self, "source", "P")

    @classmethod
    def empty(cls) -> "Track":
        return cls(null=True)

    @property
    def is_null(self) -> bool:
        return self.null

    @property
    def artist_name(self) -> str:
        return self.artist or ""

    # -------- xml --------
    def to_element(self) -> ET.Element:
        el = ET.Element("track")
        _sub(el, "artist", self.artist)
        _sub(el, "album", self.album)
        _sub(el, "title", self.title)
        _sub(el, "duration", str(int(self.duration)))
        if self.timestamp is not None:
            _sub(el, "timestamp", str(int(self.timestamp.timestamp())))
        _sub(el, "mbid", self.mbid)
        _sub(el, "source", self.source)
        return el

    @classmethod
    def from_element(cls, el: ET.Element) -> "Track":
        ts = _to_int(el.findtext("timestamp"))
        try:
            when = datetime.fromtimestamp(ts, tz=timezone.utc) if ts is not None else None
        except (OverflowError, OSError, ValueError):
            when = None
        return cls(
            artist=_text(el, "artist"),
            title=_text(el, "title") or "",
            album=_text(el, "album"),
            duration=_to_int(el.findtext("duration")) or 0,
            timestamp=when,
            mbid=_text(el, "mbid"),
            source=_text(el, "source") or "P",
        )

    def as_scrobble(self) -> dict:
        """Keyword arguments for pylast's scrobble/scrobble_many."""
        return dict(
            artist=self.artist_name,
            title=self.title,
            timestamp=int(self.timestamp.timestamp()) if self.timestamp else None,
            album=self.album,
            duration=self.duration or None,
            mbid=self.mbid,
        )


def _sub(parent: ET.Element, tag: str, value: str | None):
    if value:
        ET.SubElement(parent, tag).text = xml_safe(value)

def _text(el: ET.Element, tag: str) -> str | None:
    value = el.findtext(tag)
    return value if value else None

def _to_int(s):
    if s is None: return None
    try:
        return int(float(s))
    except (ValueError, OverflowError):
        return None
