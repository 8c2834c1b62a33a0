import pylast
import logging

from scrobble_cache.cache import ScrobbleCache
from scrobble_cache.track import Track

log = logging.getLogger("lastfm")

# Last.fm accepts at most 50 scrobbles per request
MAX_BATCH = 50

# Custom error classes so callers can branch
class LastFMAuthError(Exception): ...
class LastFMRateLimitError(Exception): ...
class LastFMNetworkError(Exception): ...
class LastFMUnknownError(Exception): ...

def _error_code(e: pylast.WSError) -> int | None:
    try:
        return int(e.get_id())
    except (TypeError, ValueError):
        return None

class LastFMSubmitter:
    """Thin wrapper over pylast that drains a ScrobbleCache into Last.fm."""

    def __init__(self, network: pylast.LastFMNetwork):
        self.network = network

    @classmethod
    def from_credentials(cls, api_key: str, api_secret: str, session_key: str | None,
                         username: str | None, password_md5: str | None) -> "LastFMSubmitter":
        if session_key:
            log.info("Using Last.fm session key auth")
            network = pylast.LastFMNetwork(
                api_key=api_key,
                api_secret=api_secret,
                session_key=session_key,
            )
        elif username and password_md5:
            log.info("Using Last.fm username + MD5 password auth")
            network = pylast.LastFMNetwork(
                api_key=api_key,
                api_secret=api_secret,
                username=username,
                password_hash=password_md5,
            )
        else:
            raise ValueError("Missing Last.fm credentials")
        return cls(network)

    def scrobble_batch(self, tracks: list[Track]) -> None:
        """Submit up to 50 plays in one request."""
        try:
            self.network.scrobble_many([t.as_scrobble() for t in tracks])
        except pylast.WSError as e:
            code = _error_code(e)
            msg = str(e)
            # Map common Last.fm error codes
            if code in (9, 4, 14):  # 9=Invalid session, 4=Auth failed, 14=Token expired
                raise LastFMAuthError(msg) from e
            elif code in (29,):  # 29=Rate limit exceeded
                raise LastFMRateLimitError(msg) from e
            else:
                raise LastFMUnknownError(f"Last.fm API error {code}: {msg}") from e
        except Exception as e:
            raise LastFMNetworkError(str(e)) from e

    def submit(self, cache: ScrobbleCache, batch_size: int = MAX_BATCH) -> int:
        """
        Sends cached plays oldest-first and removes each batch from the cache
        once Last.fm accepted it, so progress survives a failure halfway.
        Removal is by value: an identical duplicate waiting in a later batch
        goes with the first copy and is not sent again.
        Returns the number of plays still cached.
        """
        batch_size = max(1, min(batch_size, MAX_BATCH))
        remaining = len(cache)
        while remaining:
            # each remove() shrinks the cache by at least the batch itself
            batch = cache.tracks()[:batch_size]
            self.scrobble_batch(batch)
            remaining = cache.remove(batch)
            log.info("Submitted %s cached scrobbles. Cache size now %s", len(batch), remaining)
        return remaining
