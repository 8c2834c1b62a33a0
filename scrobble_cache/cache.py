"""
Per-user queue of plays waiting to be submitted to Last.fm.

Plays are validated on the way in, kept in insertion order, and the whole
queue is rewritten to <data_dir>/<username>_subs_cache.xml after every
add() and remove(). Single process, single owner: there is no locking.
"""

from __future__ import annotations
import copy
import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List

from scrobble_cache import config, persistence
from scrobble_cache.diagnostics import Diagnostics, LoggingDiagnostics
from scrobble_cache.track import Track
from scrobble_cache.validator import is_valid

log = logging.getLogger("scrobble_cache")


def cache_path(username: str, data_dir: str) -> str:
    return os.path.join(data_dir, f"{username}_subs_cache.xml")


@dataclass
class _CacheState:
    username: str
    path: str
    tracks: List[Track] = field(default_factory=list)

    def copy(self) -> "_CacheState":
        return _CacheState(self.username, self.path, list(self.tracks))


class ScrobbleCache:
    def __init__(self, username: str, data_dir: str | None = None,
                 product: str | None = None, diagnostics: Diagnostics | None = None):
        if not username:
            raise ValueError("ScrobbleCache needs a username")
        self.product = product if product is not None else config.product_name()
        self.diagnostics = diagnostics or LoggingDiagnostics()
        path = cache_path(username, data_dir if data_dir is not None else config.runtime_data_dir())
        self._d = _CacheState(username, path)
        self._d.tracks = persistence.load(path, self.diagnostics)
        log.debug("Loaded %s cached scrobbles for %s from %s", len(self._d.tracks), username, path)

    # -------- value semantics --------
    def copy(self) -> "ScrobbleCache":
        """An independent handle on the same user and file, with its own track list."""
        other = object.__new__(ScrobbleCache)
        other.product = self.product
        other.diagnostics = self.diagnostics
        other._d = self._d.copy()
        return other

    __copy__ = copy

    def __deepcopy__(self, memo) -> "ScrobbleCache":
        other = self.copy()
        other._d.tracks = copy.deepcopy(self._d.tracks, memo)
        return other

    def assign(self, other: "ScrobbleCache") -> "ScrobbleCache":
        """Take over username, path and tracks of `other`. Nothing is written."""
        self._d = other._d.copy()
        return self

    # -------- public API --------
    def add(self, tracks: Iterable[Track]) -> None:
        for track in tracks:
            ok, reason = is_valid(track)
            if not ok:
                self.diagnostics.rejected(track, reason)
            elif track.is_null:
                self.diagnostics.skipped_null(track)
            else:
                self._d.tracks.append(track)
        self._save()

    def remove(self, tracks: Iterable[Track]) -> int:
        """Drop every cached track equal to one of `tracks`.

        Returns the number of tracks *remaining* in the cache, not the number
        removed. Callers depend on this.
        """
        targets = list(tracks)
        self._d.tracks = [t for t in self._d.tracks if not any(t == x for x in targets)]
        self._save()
        return len(self._d.tracks)

    def tracks(self) -> List[Track]:
        return list(self._d.tracks)

    def path(self) -> str:
        return self._d.path

    def username(self) -> str:
        return self._d.username

    def __len__(self) -> int:
        return len(self._d.tracks)

    def __iter__(self) -> Iterator[Track]:
        return iter(self.tracks())

    def __repr__(self) -> str:
        return f"ScrobbleCache(username={self._d.username!r}, size={len(self._d.tracks)})"

    # -------- persistence --------
    def _save(self) -> None:
        persistence.save(self._d.path, self._d.tracks, self.product, self.diagnostics)
