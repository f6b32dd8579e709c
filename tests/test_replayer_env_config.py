import pytest

from handreplay.utils.config import load_replayer_env

ENV_NAMES = (
    "TESTING",
    "HANDREPLAY_AUTOPLAY_INTERVAL_MS",
    "HANDREPLAY_RANGE_BASE",
    "HANDREPLAY_RANGE_PROBE",
    "HANDREPLAY_PROBE_TIMEOUT_S",
    "HANDREPLAY_API_HOST",
    "HANDREPLAY_API_PORT",
    "HANDREPLAY_CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_load_replayer_env_defaults():
    cfg = load_replayer_env()
    assert cfg.autoplay_interval_ms == 800
    assert cfg.autoplay_interval_s == pytest.approx(0.8)
    assert cfg.range_base == "ranges/Main/7max/open"
    assert cfg.range_probe is False
    assert cfg.api_host == "127.0.0.1"
    assert cfg.api_port == 8000
    assert cfg.cors_origins == ["*"]


def test_load_replayer_env_reads_overrides(monkeypatch):
    monkeypatch.setenv("HANDREPLAY_AUTOPLAY_INTERVAL_MS", "250")
    monkeypatch.setenv("HANDREPLAY_RANGE_PROBE", "yes")
    monkeypatch.setenv("HANDREPLAY_CORS_ORIGINS", "http://a.test, http://b.test,")

    cfg = load_replayer_env()
    assert cfg.autoplay_interval_ms == 250
    assert cfg.range_probe is True
    assert cfg.cors_origins == ["http://a.test", "http://b.test"]


def test_load_replayer_env_test_override_wins_when_testing(monkeypatch):
    monkeypatch.setenv("HANDREPLAY_API_PORT", "9000")
    monkeypatch.setenv("TEST_HANDREPLAY_API_PORT", "9100")
    assert load_replayer_env().api_port == 9000

    monkeypatch.setenv("TESTING", "true")
    assert load_replayer_env().api_port == 9100


@pytest.mark.parametrize(
    "name,value",
    [
        ("HANDREPLAY_AUTOPLAY_INTERVAL_MS", "0"),
        ("HANDREPLAY_AUTOPLAY_INTERVAL_MS", "fast"),
        ("HANDREPLAY_PROBE_TIMEOUT_S", "-1"),
        ("HANDREPLAY_API_PORT", "70000"),
    ],
)
def test_load_replayer_env_rejects_bad_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(SystemExit):
        load_replayer_env()
