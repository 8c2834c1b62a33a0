import os
import logging
from dataclasses import dataclass

DEFAULT_APP_TAG = "scrobble-cache"

# -------------------------
# Configuration via ENV VARS
# -------------------------
def runtime_data_dir() -> str:
    """Directory holding the per-user cache files."""
    explicit = os.getenv("SCROBBLE_CACHE_DIR")
    if explicit:
        return explicit
    base = os.getenv("XDG_DATA_HOME") or os.path.join(os.path.expanduser("~"), ".local", "share")
    return os.path.join(base, DEFAULT_APP_TAG)

def product_name() -> str:
    """Identifier written into the cache file's `product` attribute."""
    return os.getenv("APP_TAG", DEFAULT_APP_TAG)


@dataclass
class Settings:
    data_dir: str
    product: str
    log_level: str
    lastfm_api_key: str | None
    lastfm_api_secret: str | None
    lastfm_session_key: str | None
    lastfm_username: str | None
    lastfm_password_md5: str | None
    notify_webhook_url: str | None
    notify_min_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_dir=runtime_data_dir(),
            product=product_name(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            lastfm_api_key=os.getenv("LASTFM_API_KEY"),
            lastfm_api_secret=os.getenv("LASTFM_API_SECRET"),
            lastfm_session_key=os.getenv("LASTFM_SESSION_KEY"),
            lastfm_username=os.getenv("LASTFM_USERNAME"),
            lastfm_password_md5=os.getenv("LASTFM_PASSWORD_MD5"),
            notify_webhook_url=os.getenv("NOTIFY_WEBHOOK_URL"),
            notify_min_level=os.getenv("NOTIFY_MIN_LEVEL", "WARNING"),
        )


# -------------------------
# Logging setup
# -------------------------
def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        force=True,  # ensure our config is used even if libs pre-configure logging
    )
