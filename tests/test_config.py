"""Tests for configuration loading."""

import pytest

from notesjson.config import Config, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove NOTESJSON_* variables from the environment."""
    for key in (
        "DB_PATH",
        "EXPORT_DIR",
        "EXPORT_INDENT",
        "IMPORT_MODE",
        "DASHBOARD_HOST",
        "DASHBOARD_PORT",
    ):
        monkeypatch.delenv(f"NOTESJSON_{key}", raising=False)


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self):
        config = load_config()

        assert config == Config()
        assert config.store.db_path == "~/.notesjson/notes.db"
        assert config.export.indent == 2
        assert config.importing.default_mode == "merge"

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == Config()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "store:\n"
            "  db_path: /data/notes.db\n"
            "export:\n"
            "  directory: /backups\n"
            "  indent: null\n"
            "import:\n"
            "  default_mode: Replace\n"
            "dashboard:\n"
            "  port: 9000\n"
        )

        config = load_config(path)

        assert config.store.db_path == "/data/notes.db"
        assert config.export.directory == "/backups"
        assert config.export.indent is None
        assert config.importing.default_mode == "replace"
        assert config.dashboard.port == 9000
        assert config.dashboard.host == "127.0.0.1"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(path) == Config()

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("store:\n  db_path: /data/notes.db\n")
        monkeypatch.setenv("NOTESJSON_DB_PATH", "/env/notes.db")
        monkeypatch.setenv("NOTESJSON_EXPORT_INDENT", "none")
        monkeypatch.setenv("NOTESJSON_IMPORT_MODE", "replace")
        monkeypatch.setenv("NOTESJSON_DASHBOARD_PORT", "8181")

        config = load_config(path)

        assert config.store.db_path == "/env/notes.db"
        assert config.export.indent is None
        assert config.importing.default_mode == "replace"
        assert config.dashboard.port == 8181

    def test_invalid_import_mode(self, monkeypatch):
        monkeypatch.setenv("NOTESJSON_IMPORT_MODE", "upsert")

        with pytest.raises(ValueError):
            load_config()
