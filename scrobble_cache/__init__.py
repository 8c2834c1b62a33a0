from scrobble_cache.cache import ScrobbleCache
from scrobble_cache.errors import CacheWriteError, ScrobbleCacheError
from scrobble_cache.scrobble_point import MIN_SCROBBLE_LENGTH, ScrobblePoint
from scrobble_cache.track import Track
from scrobble_cache.validator import Invalidity, is_valid

__all__ = [
    "ScrobbleCache", "Track", "Invalidity", "is_valid",
    "MIN_SCROBBLE_LENGTH", "ScrobblePoint", "CacheWriteError", "ScrobbleCacheError",
]
