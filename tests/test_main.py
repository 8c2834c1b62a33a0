from unittest.mock import MagicMock, patch

import pytest

from scrobble_cache.cache import ScrobbleCache
from scrobble_cache.lastfm_client import LastFMNetworkError
from scrobble_cache.main import main


@pytest.fixture
def env(monkeypatch, data_dir):
    monkeypatch.setenv("SCROBBLE_CACHE_DIR", data_dir)
    monkeypatch.setenv("LASTFM_API_KEY", "key")
    monkeypatch.setenv("LASTFM_API_SECRET", "secret")
    monkeypatch.setenv("LASTFM_SESSION_KEY", "session")
    monkeypatch.delenv("NOTIFY_WEBHOOK_URL", raising=False)
    monkeypatch.delenv("LASTFM_USERNAME", raising=False)
    monkeypatch.delenv("LASTFM_PASSWORD_MD5", raising=False)
    return monkeypatch


def test_requires_credentials(env):
    env.delenv("LASTFM_API_KEY")
    with pytest.raises(SystemExit):
        main(["alice"])


def test_requires_username(env):
    env.delenv("LASTFM_USERNAME", raising=False)
    with pytest.raises(SystemExit):
        main([])


def test_empty_cache_does_not_connect(env):
    with patch("scrobble_cache.main.LastFMSubmitter.from_credentials") as factory:
        assert main(["alice"]) == 0
    factory.assert_not_called()


def test_flushes_cache(env, data_dir, make_track):
    ScrobbleCache("alice", data_dir=data_dir).add([make_track("A"), make_track("B")])
    network = MagicMock()
    with patch("scrobble_cache.lastfm_client.pylast.LastFMNetwork", return_value=network):
        assert main(["alice"]) == 0
    assert network.scrobble_many.call_count == 1
    assert ScrobbleCache("alice", data_dir=data_dir).tracks() == []


def test_network_failure_keeps_cache(env, data_dir, make_track):
    ScrobbleCache("alice", data_dir=data_dir).add([make_track()])
    submitter = MagicMock()
    submitter.submit.side_effect = LastFMNetworkError("offline")
    with patch("scrobble_cache.main.LastFMSubmitter.from_credentials", return_value=submitter):
        assert main(["alice"]) == 1
    assert len(ScrobbleCache("alice", data_dir=data_dir)) == 1


def test_password_auth_refuses_other_users_cache(env, data_dir, make_track):
    env.delenv("LASTFM_SESSION_KEY")
    env.setenv("LASTFM_USERNAME", "bob")
    env.setenv("LASTFM_PASSWORD_MD5", "0" * 32)
    ScrobbleCache("alice", data_dir=data_dir).add([make_track()])
    with patch("scrobble_cache.main.LastFMSubmitter.from_credentials") as factory:
        with pytest.raises(SystemExit):
            main(["alice"])
    factory.assert_not_called()
    assert len(ScrobbleCache("alice", data_dir=data_dir)) == 1


def test_session_auth_warns_on_other_users_cache(env, data_dir, make_track, caplog):
    env.setenv("LASTFM_USERNAME", "bob")
    ScrobbleCache("alice", data_dir=data_dir).add([make_track()])
    submitter = MagicMock()
    submitter.submit.return_value = 0
    with patch("scrobble_cache.main.LastFMSubmitter.from_credentials", return_value=submitter), \
            patch("scrobble_cache.main.setup_logging"):
        with caplog.at_level("WARNING", logger="scrobble-cache"):
            assert main(["alice"]) == 0
    assert "differs from LASTFM_USERNAME" in caplog.text
