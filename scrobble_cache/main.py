import sys
import logging

from scrobble_cache.cache import ScrobbleCache
from scrobble_cache.config import Settings, setup_logging
from scrobble_cache.lastfm_client import (
    LastFMSubmitter, LastFMAuthError, LastFMNetworkError,
    LastFMRateLimitError, LastFMUnknownError
)
from scrobble_cache.notifier import from_settings as notifier_from_settings

log = logging.getLogger("scrobble-cache")

def main(argv: list[str] | None = None) -> int:
    """Flush a user's cached scrobbles to Last.fm. Returns the process exit code."""
    argv = sys.argv[1:] if argv is None else argv
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    username = argv[0] if argv else settings.lastfm_username
    if not username:
        raise SystemExit("Pass a username or set LASTFM_USERNAME")

    # Validate Last.fm configuration up-front for clear errors
    if not settings.lastfm_api_key or not settings.lastfm_api_secret:
        raise SystemExit("LASTFM_API_KEY and LASTFM_API_SECRET are required")

    if not (settings.lastfm_session_key or (settings.lastfm_username and settings.lastfm_password_md5)):
        raise SystemExit("Provide LASTFM_SESSION_KEY or LASTFM_USERNAME + LASTFM_PASSWORD_MD5")

    # Plays must go to the account they were cached for
    if settings.lastfm_username and username != settings.lastfm_username:
        if not settings.lastfm_session_key:
            raise SystemExit(f"Cache user {username!r} does not match LASTFM_USERNAME "
                             f"{settings.lastfm_username!r}; refusing to submit under another account")
        log.warning("Cache user %s differs from LASTFM_USERNAME %s; submitting with the session key",
                    username, settings.lastfm_username)

    notifier = notifier_from_settings(settings)
    cache = ScrobbleCache(username, data_dir=settings.data_dir,
                          product=settings.product, diagnostics=notifier)
    log.info("Cache: %s (size=%s)", cache.path(), len(cache))
    if not cache:
        return 0

    submitter = LastFMSubmitter.from_credentials(
        api_key=settings.lastfm_api_key,
        api_secret=settings.lastfm_api_secret,
        session_key=settings.lastfm_session_key,
        username=settings.lastfm_username,
        password_md5=settings.lastfm_password_md5,
    )
    try:
        remaining = submitter.submit(cache)
    except LastFMAuthError as e:
        # Auth issue — user must fix config
        log.error("Submission failed (auth): %s", e)
        notifier.send("ERROR", "Last.fm authentication failed", str(e),
                      {"pending_queue_size": len(cache)})
        return 1
    except (LastFMNetworkError, LastFMRateLimitError, LastFMUnknownError) as e:
        # Left in the cache; try later
        log.warning("Submission paused due to error: %s; cache size=%s", e, len(cache))
        return 1

    log.info("Done. Cache size now %s", remaining)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        log.info("Shutting down…")
