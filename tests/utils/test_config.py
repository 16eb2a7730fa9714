"""Tests for configuration management."""

import json

from file_namer.utils.config import Config, DEFAULT_TEMPLATE, get_data_dir


class TestDataDir:
    def test_environment_override(self, data_dir):
        assert get_data_dir() == data_dir

    def test_default_location(self, monkeypatch, tmp_path):
        monkeypatch.delenv("FILE_NAMER_HOME", raising=False)
        monkeypatch.setattr("file_namer.utils.config.Path.home", lambda: tmp_path)

        assert get_data_dir() == tmp_path / ".file_namer"


class TestConfig:
    """Test loading and saving configuration."""

    def test_defaults(self, tmp_path):
        config = Config(tmp_path / "config.json")

        assert config.author == ""
        assert config.naming_template == DEFAULT_TEMPLATE
        assert config.get("default_save_path") == ""

    def test_save_and_reload(self, tmp_path):
        config_file = tmp_path / "nested" / "config.json"
        config = Config(config_file)
        config.set("author", "Zoë")
        config.save()

        reloaded = Config(config_file)
        assert reloaded.author == "Zoë"
        assert "Zoë" in config_file.read_text(encoding="utf-8")

    def test_partial_file_keeps_defaults(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"author": "Jane"}))

        config = Config(config_file)

        assert config.author == "Jane"
        assert config.naming_template == DEFAULT_TEMPLATE

    def test_empty_template_falls_back(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"naming_template": ""}))

        assert Config(config_file).naming_template == DEFAULT_TEMPLATE

    def test_corrupt_file_ignored(self, tmp_path, caplog):
        config_file = tmp_path / "config.json"
        config_file.write_text("{oops")

        config = Config(config_file)

        assert config.author == ""
        assert "unreadable config file" in caplog.text

    def test_invalid_utf8_ignored(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_bytes(b'{"author": "\xff\xfe"}')

        config = Config(config_file)

        assert config.author == ""
        assert config.naming_template == DEFAULT_TEMPLATE

    def test_non_object_ignored(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("[1, 2]")

        assert Config(config_file).as_dict()["naming_template"] == DEFAULT_TEMPLATE

    def test_replace(self, tmp_path):
        config = Config(tmp_path / "config.json")
        config.set("author", "Jane")

        config.replace({"default_save_path": "/work"})

        assert config.author == ""
        assert config.get("default_save_path") == "/work"

    def test_as_dict_is_a_copy(self, tmp_path):
        config = Config(tmp_path / "config.json")
        config.as_dict()["author"] = "Mallory"
        assert config.author == ""
