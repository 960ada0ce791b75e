import pytest

from rolling_token import config
from rolling_token.errors import InvalidInterval, InvalidTolerance


def test_defaults_without_env(monkeypatch: pytest.MonkeyPatch):
    for name in (config.ENV_INTERVAL, config.ENV_TOLERANCE, config.ENV_SECRET):
        monkeypatch.delenv(name, raising=False)
    s = config.get_settings()
    assert s.interval == 30
    assert s.tolerance == 1
    assert s.secret is None


def test_env_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("RT_INTERVAL", "60")
    monkeypatch.setenv("RT_TOLERANCE", " 2 ")
    monkeypatch.setenv("RT_SECRET", "hunter2")
    s = config.get_settings()
    assert (s.interval, s.tolerance, s.secret) == (60, 2, "hunter2")
    # secret never shows up in repr
    assert "hunter2" not in repr(s)


@pytest.mark.parametrize("value", ["0", "-5", "abc"])
def test_bad_interval_env(monkeypatch: pytest.MonkeyPatch, value: str):
    monkeypatch.setenv("RT_INTERVAL", value)
    with pytest.raises(InvalidInterval):
        config.get_settings()


@pytest.mark.parametrize("value", ["-1", "1.5"])
def test_bad_tolerance_env(monkeypatch: pytest.MonkeyPatch, value: str):
    monkeypatch.delenv("RT_INTERVAL", raising=False)
    monkeypatch.setenv("RT_TOLERANCE", value)
    with pytest.raises(InvalidTolerance):
        config.get_settings()
