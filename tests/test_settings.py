import pytest

from settings import Settings


def test_defaults(monkeypatch):
    for name in ("TRC_ENCODING", "TRC_EXPORT_SEPARATOR", "TRC_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    assert Settings.from_env() == Settings(
        encoding="utf-8-sig",
        export_separator=",",
        log_level="WARNING",
    )


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TRC_ENCODING", "latin-1")
    monkeypatch.setenv("TRC_EXPORT_SEPARATOR", ";")
    monkeypatch.setenv("TRC_LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.encoding == "latin-1"
    assert settings.export_separator == ";"
    assert settings.log_level == "DEBUG"


def test_unknown_log_level_is_rejected(monkeypatch):
    monkeypatch.setenv("TRC_LOG_LEVEL", "loud")

    with pytest.raises(ValueError, match="TRC_LOG_LEVEL"):
        Settings.from_env()


def test_warn_alias_is_accepted(monkeypatch):
    monkeypatch.setenv("TRC_LOG_LEVEL", "warn")

    assert Settings.from_env().log_level == "WARN"
