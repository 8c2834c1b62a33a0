# Last.fm guideline: a play counts at halfway or 240s (4min), whichever comes
# first, and tracks shorter than 31s never count.
MIN_SCROBBLE_LENGTH = 31
MAX_SCROBBLE_POINT = 240


class ScrobblePoint(int):
    """Seconds of playback after which a track may be scrobbled."""

    def __new__(cls, duration: int | None = None):
        # Unknown duration: fall back to the 240s cap
        if not duration:
            return super().__new__(cls, MAX_SCROBBLE_POINT)
        point = min(MAX_SCROBBLE_POINT, int(duration) // 2)
        return super().__new__(cls, max(MIN_SCROBBLE_LENGTH, point))

    def reached(self, elapsed: int | None) -> bool:
        return elapsed is not None and int(elapsed) >= self
