"""Tests for the command line interface."""

import json
from unittest.mock import patch

import click
import pytest
from click.testing import CliRunner

from file_namer.cli import main, parse_values, build_request
from file_namer.core.audit_log import AuditLog
from file_namer.core.models import CreateRequest
from file_namer.core.store import SettingsStore
from file_namer.ui.prompts import UserCancelledError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def store(data_dir):
    """Settings store with an author configured."""
    store = SettingsStore(data_dir)
    config = store.load_config()
    config.set("author", "Jane")
    config.save()
    return store


def create_args(save_dir, *extra):
    return [
        "create",
        "--non-interactive",
        "-d", str(save_dir),
        "-e", ".md",
        "-t", "{category}_{project}_{version}",
        "-s", "category=Design",
        "-s", "project=Alpha",
        *extra,
    ]


class TestHelpers:
    def test_parse_values(self):
        assert parse_values(("category=Design", "{client}=Acme", "note=a=b")) == {
            "category": "Design",
            "client": "Acme",
            "note": "a=b",
        }

    @pytest.mark.parametrize("pair", ["category", "=value"])
    def test_parse_values_rejects_bad_pairs(self, pair):
        with pytest.raises(click.BadParameter):
            parse_values((pair,))

    def test_build_request_precedence(self, store):
        store.add_preset(
            "Weekly",
            save_dir="/preset",
            template="{category}_{version}",
            values={"category": "Design", "extension": ".md"},
        )
        config = store.load_config()

        request, preset_id = build_request(
            store, config, "Weekly", extension=".docx", pairs=("category=Research",)
        )

        assert preset_id == store.find_preset("Weekly").id
        assert request.save_dir == "/preset"
        assert request.extension == ".docx"
        assert request.template == "{category}_{version}"
        assert request.values == {"category": "Research"}

    def test_build_request_defaults(self, store):
        config = store.load_config()
        config.set("default_save_path", "/work")

        request, preset_id = build_request(store, config)

        assert preset_id is None
        assert request.save_dir == "/work"
        assert request.template == "{date}_{category}_{project}_{version}"

    def test_unknown_preset(self, store):
        with pytest.raises(click.BadParameter):
            build_request(store, store.load_config(), "missing")


class TestCreateCommand:
    """Test the create command."""

    def test_non_interactive_create(self, runner, store, save_dir):
        result = runner.invoke(main, create_args(save_dir, "-m", "first draft"))

        assert result.exit_code == 0
        assert (save_dir / "Design_Alpha_v0001.md").exists()
        assert "Created" in result.output

        entries = AuditLog(store.log_file).read_entries()
        assert entries[0]["Filename"] == "Design_Alpha_v0001.md"
        assert entries[0]["Description"] == "first draft"
        assert "Recent files" in runner.invoke(main, ["log"]).output

    def test_second_create_bumps_version(self, runner, store, save_dir):
        runner.invoke(main, create_args(save_dir))
        result = runner.invoke(main, create_args(save_dir))

        assert result.exit_code == 0
        assert (save_dir / "Design_Alpha_v0002.md").exists()

    def test_missing_author(self, runner, data_dir, save_dir):
        result = runner.invoke(main, create_args(save_dir))

        assert result.exit_code == 1
        assert "No author is configured" in result.output
        assert list(save_dir.iterdir()) == []

    def test_relative_directory(self, runner, store):
        result = runner.invoke(main, create_args("relative/out"))

        assert result.exit_code == 1
        assert "valid absolute path" in result.output

    def test_bad_set_option(self, runner, store, save_dir):
        result = runner.invoke(main, create_args(save_dir, "-s", "oops"))

        assert result.exit_code == 2

    def test_records_last_used_preset(self, runner, store, save_dir):
        store.add_preset(
            "Weekly",
            save_dir=str(save_dir),
            template="{category}_{version}",
            values={"category": "Design", "extension": ".md"},
        )

        result = runner.invoke(main, ["create", "--non-interactive", "-p", "Weekly"])

        assert result.exit_code == 0
        assert (save_dir / "Design_v0001.md").exists()
        assert store.load_config().get("last_used_preset_id") == store.find_preset("Weekly").id

    def test_interactive_create(self, runner, store, save_dir):
        def fill(request, preview=None):
            return CreateRequest(
                save_dir=str(save_dir),
                extension=".md",
                template=request.template,
                values={"category": "Design", "project": "Alpha"},
            )

        with patch("file_namer.cli.RequestPrompter") as prompter_cls:
            prompter = prompter_cls.return_value
            prompter.choose_preset.return_value = None
            prompter.collect.side_effect = fill
            prompter.confirm.return_value = True

            result = runner.invoke(main, ["create"])

        assert result.exit_code == 0
        assert "Preview:" in result.output
        files = list(save_dir.iterdir())
        assert len(files) == 1
        assert files[0].name.endswith("_Design_Alpha_v0001.md")
        prompter.confirm.assert_called_once()

    def test_interactive_decline(self, runner, store, save_dir):
        with patch("file_namer.cli.RequestPrompter") as prompter_cls:
            prompter = prompter_cls.return_value
            prompter.choose_preset.return_value = None
            prompter.collect.side_effect = lambda request, preview=None: request
            prompter.confirm.return_value = False

            result = runner.invoke(main, ["create"])

        assert result.exit_code == 0
        assert "cancelled" in result.output
        assert list(save_dir.iterdir()) == []

    def test_interactive_cancel(self, runner, store):
        with patch("file_namer.cli.RequestPrompter") as prompter_cls:
            prompter_cls.return_value.choose_preset.side_effect = UserCancelledError("User cancelled")

            result = runner.invoke(main, ["create"])

        assert result.exit_code == 1
        assert "cancelled by user" in result.output


class TestPreviewCommand:
    def test_preview(self, runner, store, save_dir):
        (save_dir / "Design_Alpha_v0004.md").write_text("")

        result = runner.invoke(main, [
            "preview",
            "-d", str(save_dir),
            "-e", ".md",
            "-t", "{category}_{project}_{version}",
            "-s", "category=Design",
            "-s", "project=Alpha",
        ])

        assert result.exit_code == 0
        assert "Design_Alpha_v0005.md" in result.output
        assert not (save_dir / "Design_Alpha_v0005.md").exists()

    def test_preview_without_author(self, runner, data_dir):
        result = runner.invoke(main, ["preview", "-d", "/tmp", "-e", ".md"])

        assert result.exit_code == 0
        assert "Register an author" in result.output


class TestSettingsCommands:
    """Test config, list, token and preset management."""

    def test_config_set_and_show(self, runner, data_dir):
        result = runner.invoke(main, ["config", "set", "author", "Jane"])
        assert result.exit_code == 0

        result = runner.invoke(main, ["config", "show"])
        assert "Jane" in result.output

    def test_config_show_with_corrupt_file(self, runner, data_dir):
        data_dir.mkdir(parents=True, exist_ok=True)
        (data_dir / "config.json").write_bytes(b'{"author": "\xff"}')

        result = runner.invoke(main, ["config", "show"])

        assert result.exit_code == 0
        assert "Configuration" in result.output

    def test_config_rejects_unknown_key(self, runner, data_dir):
        result = runner.invoke(main, ["config", "set", "colour", "blue"])
        assert result.exit_code == 2

    def test_category_list(self, runner, data_dir):
        assert runner.invoke(main, ["categories", "add", "Design"]).exit_code == 0
        assert runner.invoke(main, ["categories", "add", "Design"]).exit_code == 1

        result = runner.invoke(main, ["categories", "list"])
        assert "Design" in result.output

        assert runner.invoke(main, ["categories", "remove", "Design"]).exit_code == 0
        assert "No categories" in runner.invoke(main, ["categories", "list"]).output

    def test_tokens(self, runner, data_dir):
        assert runner.invoke(main, ["tokens", "add", "{client}", "Client"]).exit_code == 0
        assert runner.invoke(main, ["tokens", "add", "client", "Client"]).exit_code == 1
        assert "{client}" in runner.invoke(main, ["tokens", "list"]).output
        assert runner.invoke(main, ["tokens", "remove", "{client}"]).exit_code == 0

    def test_presets(self, runner, data_dir):
        result = runner.invoke(main, ["presets", "add", "Wk", "-t", "{category}_{version}", "-e", ".md"])
        assert result.exit_code == 0

        assert "Wk" in runner.invoke(main, ["presets", "list"]).output
        assert runner.invoke(main, ["presets", "remove", "Wk"]).exit_code == 0
        assert runner.invoke(main, ["presets", "remove", "Wk"]).exit_code == 1

    def test_export_and_import(self, runner, store, tmp_path):
        runner.invoke(main, ["projects", "add", "Alpha"])
        backup = tmp_path / "backup.json"

        assert runner.invoke(main, ["export", str(backup)]).exit_code == 0
        assert json.loads(backup.read_text(encoding="utf-8"))["projects"] == ["Alpha"]

        runner.invoke(main, ["projects", "remove", "Alpha"])
        result = runner.invoke(main, ["import", str(backup), "--yes"])

        assert result.exit_code == 0
        assert store.get_list("projects") == ["Alpha"]

    def test_import_declined(self, runner, store, tmp_path):
        backup = tmp_path / "backup.json"
        store.export_settings(backup)

        result = runner.invoke(main, ["import", str(backup)], input="n\n")

        assert result.exit_code == 0
        assert "Import cancelled" in result.output

    def test_empty_log(self, runner, data_dir):
        result = runner.invoke(main, ["log"])
        assert "No files in the creation log" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert "0.1.0" in result.output
