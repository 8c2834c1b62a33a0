"""
Webhook diagnostics sink.

- Logs everything like LoggingDiagnostics.
- Additionally POSTs a JSON body to NOTIFY_WEBHOOK_URL for events at or above
  NOTIFY_MIN_LEVEL (rejected plays are WARNING, cache file problems ERROR).
- Best-effort: failures are logged but never reach the cache.
"""

from __future__ import annotations
import logging
import requests

from scrobble_cache.config import Settings
from scrobble_cache.diagnostics import LoggingDiagnostics
from scrobble_cache.track import Track
from scrobble_cache.validator import Invalidity

_LEVELS = {
    "DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40, "CRITICAL": 50
}

class WebhookDiagnostics(LoggingDiagnostics):
    def __init__(self, webhook_url: str | None, min_level: str = "WARNING", app_tag: str = "scrobble-cache"):
        super().__init__()
        self.webhook_url = webhook_url.strip() if webhook_url else None
        self.min_level = _LEVELS.get(min_level.upper(), 30)
        self.app_tag = app_tag

    def send(self, level: str, title: str, message: str, extra: dict | None = None):
        if not self.webhook_url:
            return
        lvl = _LEVELS.get(level.upper(), 30)
        if lvl < self.min_level:
            return

        payload = {
            "level": level.upper(),
            "title": f"{self.app_tag}: {title}",
            "message": message,
            "extra": extra or {},
        }
        try:
            # Most webhooks accept JSON; Slack/Discord-compatible webhooks also work.
            requests.post(self.webhook_url, json=payload, timeout=5)
        except requests.RequestException as e:
            logging.getLogger("notifier").debug("Notification send failed: %s", e)

    def rejected(self, track: Track, reason: Invalidity) -> None:
        super().rejected(track, reason)
        self.send("WARNING", "Play not cached", str(reason),
                  {"artist": track.artist, "title": track.title})

    def load_failed(self, path: str, error: Exception) -> None:
        super().load_failed(path, error)
        self.send("ERROR", "Scrobble cache unreadable", str(error), {"path": path})

    def save_failed(self, path: str, error: Exception) -> None:
        super().save_failed(path, error)
        self.send("ERROR", "Scrobble cache not saved", str(error), {"path": path})

def from_settings(settings: Settings) -> WebhookDiagnostics:
    return WebhookDiagnostics(
        webhook_url=settings.notify_webhook_url,
        min_level=settings.notify_min_level,
        app_tag=settings.product,
    )
