# Custom error classes so callers can branch
class ScrobbleCacheError(Exception): ...

class CacheWriteError(ScrobbleCacheError):
    """The cache file could not be written or removed. The in-memory state is kept."""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"could not write scrobble cache {path}: {cause}")
        self.path = path
        self.cause = cause
