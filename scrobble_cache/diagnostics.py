"""
Diagnostics sinks for the scrobble cache.

The cache never fails a call because of bad data; it reports what it dropped
to a sink instead. The default sink just logs.
"""

from __future__ import annotations
import logging
from typing import Protocol

from scrobble_cache.track import Track
from scrobble_cache.validator import Invalidity

log = logging.getLogger("scrobble_cache")


class Diagnostics(Protocol):
    def rejected(self, track: Track, reason: Invalidity) -> None: ...
    def skipped_null(self, track: Track) -> None: ...
    def load_failed(self, path: str, error: Exception) -> None: ...
    def save_failed(self, path: str, error: Exception) -> None: ...


class LoggingDiagnostics:
    def __init__(self, logger: logging.Logger | None = None):
        self.log = logger or log

    def rejected(self, track: Track, reason: Invalidity) -> None:
        self.log.warning("Not caching %s — %s: %s", track.artist_name, track.title, reason)

    def skipped_null(self, track: Track) -> None:
        self.log.debug("Will not cache an empty track")

    def load_failed(self, path: str, error: Exception) -> None:
        self.log.warning("Could not read scrobble cache %s, starting empty: %s", path, error)

    def save_failed(self, path: str, error: Exception) -> None:
        self.log.error("Could not write scrobble cache %s: %s", path, error)
