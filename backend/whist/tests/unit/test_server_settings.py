import pytest
from pydantic import ValidationError

from whist.server.settings import WhistServerSettings


class TestWhistServerSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("WHIST_DATA_FILE", raising=False)
        monkeypatch.delenv("WHIST_LOG_DIR", raising=False)
        settings = WhistServerSettings()
        assert settings.data_file == "data/whist.json"
        assert settings.log_dir == "logs/whist"
        assert settings.cors_origins == []

    def test_tests_default_to_temporary_data_file(self, tmp_path):
        assert WhistServerSettings().data_file == str(tmp_path / "whist.json")

    def test_data_file_from_env(self, monkeypatch):
        monkeypatch.setenv("WHIST_DATA_FILE", "/var/lib/whist/state.json")
        assert WhistServerSettings().data_file == "/var/lib/whist/state.json"

    def test_cors_origins_comma_separated(self, monkeypatch):
        monkeypatch.setenv("WHIST_CORS_ORIGINS", "http://localhost:3000, http://example.test")
        assert WhistServerSettings().cors_origins == ["http://localhost:3000", "http://example.test"]

    def test_cors_origins_json_array(self, monkeypatch):
        monkeypatch.setenv("WHIST_CORS_ORIGINS", '["http://a.test"]')
        assert WhistServerSettings().cors_origins == ["http://a.test"]

    def test_blank_cors_origins_rejected(self, monkeypatch):
        monkeypatch.setenv("WHIST_CORS_ORIGINS", "  ")
        with pytest.raises(ValidationError):
            WhistServerSettings()
