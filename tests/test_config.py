"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from truenas2gatus import main as main_module
from truenas2gatus.config import Settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for key in list(Settings.model_fields):
        monkeypatch.delenv(key, raising=False)


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.setenv("TRUENAS_HOST", "nas.example.com")
        monkeypatch.setenv("TRUENAS_API_KEY", "secret")
        settings = Settings()
        assert settings.TRUENAS_INTERVAL == 60
        assert settings.TRUENAS_RESULTS_TO_KEEP == 20
        assert settings.TRUENAS_RESULT_STORE == "/data/results.json"
        assert settings.TRUENAS_TLS_TRUST_ALL is False
        assert settings.TRUENAS_PROBE_ON_START is False
        assert settings.HTTP_PORT == 8989
        assert settings.truenas_base_url == "https://nas.example.com"

    def test_env_file(self, tmp_path) -> None:
        (tmp_path / ".env").write_text(
            "TRUENAS_HOST=http://10.0.0.5\nTRUENAS_API_KEY=k\nTRUENAS_TLS_TRUST_ALL=true\nTRUENAS_INTERVAL=30s\n"
        )
        settings = Settings()
        assert settings.truenas_base_url == "http://10.0.0.5"
        assert settings.TRUENAS_TLS_TRUST_ALL is True
        assert settings.TRUENAS_INTERVAL == 30

    @pytest.mark.parametrize(
        ("raw", "seconds"),
        [
            ("30s", 30),
            ("1m", 60),
            ("5m", 300),
            ("1h30m", 5400),
            ("1.5m", 90),
            ("500ms", 0.5),
            ("90", 90),
        ],
    )
    def test_go_style_interval(self, monkeypatch, raw, seconds) -> None:
        monkeypatch.setenv("TRUENAS_HOST", "nas")
        monkeypatch.setenv("TRUENAS_API_KEY", "secret")
        monkeypatch.setenv("TRUENAS_INTERVAL", raw)
        assert Settings().TRUENAS_INTERVAL == pytest.approx(seconds)

    @pytest.mark.parametrize("raw", ["", "5 minutes", "1x", "m", "-1m", "0s", "1m30"])
    def test_invalid_interval(self, monkeypatch, raw) -> None:
        monkeypatch.setenv("TRUENAS_HOST", "nas")
        monkeypatch.setenv("TRUENAS_API_KEY", "secret")
        monkeypatch.setenv("TRUENAS_INTERVAL", raw)
        with pytest.raises(ValidationError):
            Settings()

    def test_missing_host(self, monkeypatch) -> None:
        monkeypatch.setenv("TRUENAS_API_KEY", "secret")
        with pytest.raises(ValidationError):
            Settings()

    def test_non_positive_capacity(self, monkeypatch) -> None:
        monkeypatch.setenv("TRUENAS_HOST", "nas")
        monkeypatch.setenv("TRUENAS_API_KEY", "secret")
        monkeypatch.setenv("TRUENAS_RESULTS_TO_KEEP", "0")
        with pytest.raises(ValidationError):
            Settings()


class TestMain:
    def test_invalid_settings_exit_code(self) -> None:
        assert main_module.main() == 1

    def test_corrupt_store_exit_code(self, monkeypatch, tmp_path) -> None:
        store = tmp_path / "results.json"
        store.write_text("not json")
        monkeypatch.setenv("TRUENAS_HOST", "nas")
        monkeypatch.setenv("TRUENAS_API_KEY", "secret")
        monkeypatch.setenv("TRUENAS_RESULT_STORE", str(store))
        assert main_module.main() == 1
