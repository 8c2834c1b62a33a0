"""
Shared fixtures for scrobble-cache tests.
"""
from datetime import datetime, timedelta, timezone

import pytest

from scrobble_cache.track import Track


class RecordingDiagnostics:
    """Diagnostics sink that remembers what it was told."""

    def __init__(self):
        self.rejections = []
        self.null_tracks = []
        self.load_failures = []
        self.save_failures = []

    def rejected(self, track, reason):
        self.rejections.append((track, reason))

    def skipped_null(self, track):
        self.null_tracks.append(track)

    def load_failed(self, path, error):
        self.load_failures.append((path, error))

    def save_failed(self, path, error):
        self.save_failures.append((path, error))


@pytest.fixture
def diagnostics():
    return RecordingDiagnostics()


@pytest.fixture
def data_dir(tmp_path):
    return str(tmp_path / "runtime")


@pytest.fixture
def make_track():
    """Build a valid track played an hour ago; override any field."""
    played_at = datetime.now(timezone.utc).replace(microsecond=0) - timedelta(hours=1)

    def _make(title="Karma Police", **overrides):
        fields = dict(
            artist="Radiohead",
            title=title,
            album="OK Computer",
            duration=264,
            timestamp=played_at,
        )
        fields.update(overrides)
        return Track(**fields)

    return _make
