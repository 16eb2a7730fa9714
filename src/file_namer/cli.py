"""Main CLI entry point for File Namer."""

import asyncio
import os
import sys
import logging
from pathlib import Path
from typing import Optional, Tuple, Dict, List

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from file_namer import __version__
from file_namer.core.audit_log import AuditLog
from file_namer.core.creator import FileCreator
from file_namer.core.models import CreateRequest, PreviewResult
from file_namer.core.store import SettingsStore, SIMPLE_LISTS
from file_namer.ui.prompts import RequestPrompter, UserCancelledError, format_preview
from file_namer.utils.config import Config

# Configure logging
logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

console = Console()

CONFIG_KEYS = ("author", "default_save_path", "naming_template", "last_used_preset_id")


def get_store() -> SettingsStore:
    """Return the settings store for the current data directory."""
    return SettingsStore()


def parse_values(pairs: Tuple[str, ...]) -> Dict[str, str]:
    """Parse ``key=value`` pairs into a value bag.

    Args:
        pairs: Raw ``--set`` arguments

    Returns:
        Mapping of token name to value

    Raises:
        click.BadParameter: If a pair has no ``=`` or an empty key
    """
    values = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip().strip("{}")
        if not sep or not key:
            raise click.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--set")
        values[key] = value
    return values


def build_request(
    store: SettingsStore,
    config: Config,
    preset_name: Optional[str] = None,
    save_dir: Optional[str] = None,
    extension: Optional[str] = None,
    template: Optional[str] = None,
    pairs: Tuple[str, ...] = (),
    description: str = "",
) -> Tuple[CreateRequest, Optional[str]]:
    """Combine command-line options, a preset and configuration defaults.

    Explicit options win over preset values, which win over configuration
    defaults.

    Returns:
        Tuple of (request, preset id or None)
    """
    preset = None
    if preset_name:
        preset = store.find_preset(preset_name)
        if preset is None:
            raise click.BadParameter(f"Preset '{preset_name}' not found", param_hint="--preset")

    values: Dict[str, str] = preset.token_values() if preset else {}
    values.update(parse_values(pairs))

    resolved_dir = save_dir or (preset.save_dir if preset else "") or config.get("default_save_path") or ""

    request = CreateRequest(
        save_dir=os.path.expanduser(resolved_dir) if resolved_dir else "",
        extension=extension or (preset.extension if preset else "") or "",
        template=template or (preset.template if preset else "") or config.naming_template,
        values=values,
        description=description or "",
    )
    return request, preset.id if preset else None


def print_result(success: bool, message: str) -> None:
    """Print a green or red result line without wrapping."""
    style = "green" if success else "red"
    mark = "✓" if success else "✗"
    console.print(f"[{style}]{mark} {escape(message)}[/{style}]", soft_wrap=True)


def run_preview(creator: FileCreator, request: CreateRequest, author: str) -> PreviewResult:
    """Compute a preview synchronously."""
    return asyncio.run(creator.preview(request, author))


request_options = [
    click.option("--preset", "-p", "preset_name", help="Preset name or id to start from"),
    click.option("--dir", "-d", "save_dir", help="Absolute path of the folder to save into"),
    click.option("--ext", "-e", "extension", help="File extension including the dot, e.g. .docx"),
    click.option("--template", "-t", help="Naming template, e.g. {date}_{category}_{version}"),
    click.option("--set", "-s", "pairs", multiple=True, help="Token value as key=value (repeatable)"),
]


def with_request_options(func):
    for option in reversed(request_options):
        func = option(func)
    return func


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def main(verbose: bool) -> None:
    """File Namer - create consistently named, versioned files from templates."""
    if verbose:
        console.print(f"[bold green]File Namer v{__version__}[/bold green]")
        console.print("Verbose mode enabled")
        logging.getLogger().setLevel(logging.INFO)


@main.command("create")
@with_request_options
@click.option("--description", "-m", default="", help="Description recorded in the creation log")
@click.option("--non-interactive", is_flag=True, help="Do not prompt for missing values")
def create_command(
    preset_name: Optional[str],
    save_dir: Optional[str],
    extension: Optional[str],
    template: Optional[str],
    pairs: Tuple[str, ...],
    description: str,
    non_interactive: bool
) -> None:
    """Create a new file named from the active template.

    Examples:

        # Fully specified
        file-namer create -d ~/Documents -e .docx -s category=Design -s project=Alpha

        # Start from a saved preset and fill the rest interactively
        file-namer create --preset weekly-report
    """
    try:
        store = get_store()
        config = store.load_config()
        creator = FileCreator.from_store(store)

        request, preset_id = build_request(
            store, config, preset_name, save_dir, extension, template, pairs, description
        )

        if not non_interactive:
            prompter = RequestPrompter(
                categories=store.get_list("categories"),
                projects=store.get_list("projects"),
                extensions=store.get_list("extensions"),
                custom_tokens=store.get_custom_tokens(),
            )

            if preset_id is None and not (save_dir or extension or template or pairs):
                preset = prompter.choose_preset(store.get_presets(), default=config.get("last_used_preset_id"))
                if preset is not None:
                    request, preset_id = build_request(store, config, preset.id, description=description)

            def show_preview(partial: CreateRequest) -> None:
                console.print(f"Preview: {format_preview(run_preview(creator, partial, config.author))}", soft_wrap=True)

            request = prompter.collect(request, preview=show_preview)
            preview = run_preview(creator, request, config.author)
            console.print(f"Preview: {format_preview(preview)}", soft_wrap=True)
            if not prompter.confirm(preview.preview):
                console.print("[yellow]Creation cancelled.[/yellow]")
                return

        result = asyncio.run(creator.create(request, config.author))
        print_result(result.success, result.message)

        if not result.success:
            sys.exit(1)

        if preset_id is not None and config.get("last_used_preset_id") != preset_id:
            config.set("last_used_preset_id", preset_id)
            config.save()

    except UserCancelledError:
        console.print("\n[yellow]Operation cancelled by user.[/yellow]")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user.[/yellow]")
        sys.exit(1)
    except click.ClickException:
        raise
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        logger.exception("Creation failed")
        sys.exit(1)


@main.command("preview")
@with_request_options
def preview_command(
    preset_name: Optional[str],
    save_dir: Optional[str],
    extension: Optional[str],
    template: Optional[str],
    pairs: Tuple[str, ...]
) -> None:
    """Show the filename that 'create' would use, without creating it."""
    try:
        store = get_store()
        config = store.load_config()
        creator = FileCreator.from_store(store)

        request, _ = build_request(store, config, preset_name, save_dir, extension, template, pairs)
        result = run_preview(creator, request, config.author)
        console.print(format_preview(result), soft_wrap=True)

    except click.ClickException:
        raise
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


@main.group("config")
def config_group() -> None:
    """Show or change configuration."""


@config_group.command("show")
def config_show_command() -> None:
    """Show the current configuration."""
    store = get_store()
    config = store.load_config()

    panel_content = "\n".join(
        f"[bold cyan]{key}:[/bold cyan] {escape(str(config.get(key) or '-'))}"
        for key in CONFIG_KEYS
    )
    console.print(Panel(panel_content, title="Configuration", border_style="blue"))
    console.print(f"Data directory: {escape(str(store.data_dir))}", soft_wrap=True)


@config_group.command("set")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
@click.argument("value")
def config_set_command(key: str, value: str) -> None:
    """Set a configuration value."""
    try:
        config = get_store().load_config()
        config.set(key, value)
        config.save()
        print_result(True, f"{key} = {value}")
    except OSError as e:
        print_result(False, f"Could not save configuration: {e}")
        sys.exit(1)


def _register_list_group(kind: str) -> None:
    """Add list/add/remove commands for one simple pick list."""

    @main.group(kind, help=f"Manage {kind}.")
    def group() -> None:
        pass

    @group.command("list")
    def list_items() -> None:
        items = get_store().get_list(kind)
        if not items:
            console.print(f"[yellow]No {kind} defined.[/yellow]")
            return
        for item in items:
            console.print(f"• {escape(item)}", soft_wrap=True)

    @group.command("add")
    @click.argument("value")
    def add_item(value: str) -> None:
        result = get_store().add_item(kind, value)
        print_result(result.success, result.message or f"Added '{value}'")
        if not result.success:
            sys.exit(1)

    @group.command("remove")
    @click.argument("value")
    def remove_item(value: str) -> None:
        result = get_store().remove_item(kind, value)
        print_result(result.success, result.message or f"Removed '{value}'")
        if not result.success:
            sys.exit(1)


for _kind in SIMPLE_LISTS:
    _register_list_group(_kind)


@main.group("tokens")
def tokens_group() -> None:
    """Manage custom template tokens."""


@tokens_group.command("list")
def tokens_list_command() -> None:
    """List custom tokens."""
    tokens = get_store().get_custom_tokens()
    if not tokens:
        console.print("[yellow]No custom tokens defined.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Token", style="cyan")
    table.add_column("Label")
    for token in tokens:
        table.add_row(escape(token.token_name), escape(token.label))
    console.print(table)


@tokens_group.command("add")
@click.argument("token_name")
@click.argument("label")
def tokens_add_command(token_name: str, label: str) -> None:
    """Add a custom token such as {client}."""
    result = get_store().add_custom_token(token_name, label)
    print_result(result.success, result.message or f"Added token {token_name}")
    if not result.success:
        sys.exit(1)


@tokens_group.command("remove")
@click.argument("token_name")
def tokens_remove_command(token_name: str) -> None:
    """Remove a custom token by name or id."""
    result = get_store().remove_custom_token(token_name)
    print_result(result.success, result.message or f"Removed token {token_name}")
    if not result.success:
        sys.exit(1)


@main.group("presets")
def presets_group() -> None:
    """Manage saved presets."""


@presets_group.command("list")
def presets_list_command() -> None:
    """List presets."""
    presets = get_store().get_presets()
    if not presets:
        console.print("[yellow]No presets defined.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Template")
    table.add_column("Folder", no_wrap=False, max_width=40)
    table.add_column("Values")
    for preset in presets:
        values = ", ".join(f"{key}={value}" for key, value in preset.values.items())
        table.add_row(
            escape(preset.name),
            escape(preset.template or "-"),
            escape(preset.save_dir or "-"),
            escape(values or "-"),
        )
    console.print(table)


@presets_group.command("add")
@click.argument("name")
@click.option("--dir", "-d", "save_dir", default="", help="Folder to save into")
@click.option("--template", "-t", default="", help="Naming template")
@click.option("--ext", "-e", "extension", default="", help="File extension")
@click.option("--set", "-s", "pairs", multiple=True, help="Token value as key=value (repeatable)")
def presets_add_command(name: str, save_dir: str, template: str, extension: str, pairs: Tuple[str, ...]) -> None:
    """Save a preset."""
    values = parse_values(pairs)
    if extension:
        values["extension"] = extension
    result = get_store().add_preset(name, save_dir=save_dir, template=template, values=values)
    print_result(result.success, result.message or f"Saved preset '{name}'")
    if not result.success:
        sys.exit(1)


@presets_group.command("remove")
@click.argument("name")
def presets_remove_command(name: str) -> None:
    """Remove a preset by name or id."""
    result = get_store().remove_preset(name)
    print_result(result.success, result.message or f"Removed preset '{name}'")
    if not result.success:
        sys.exit(1)


@main.command("export")
@click.argument("output", type=click.Path(dir_okay=False))
def export_command(output: str) -> None:
    """Export all settings to a JSON file."""
    result = get_store().export_settings(Path(output))
    print_result(result.success, result.message)
    if not result.success:
        sys.exit(1)


@main.command("import")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def import_command(input_file: str, yes: bool) -> None:
    """Replace all settings with a previously exported JSON file."""
    if not yes and not click.confirm("This overwrites all current settings. Continue?"):
        console.print("[yellow]Import cancelled.[/yellow]")
        return

    result = get_store().import_settings(Path(input_file))
    print_result(result.success, result.message)
    if not result.success:
        sys.exit(1)


@main.command("log")
@click.option("--limit", default=20, help="Number of recent entries to show")
def log_command(limit: int) -> None:
    """Show recently created files from the creation log."""
    entries: List[dict] = AuditLog(get_store().log_file).read_entries(limit=limit)
    if not entries:
        console.print("[yellow]No files in the creation log.[/yellow]")
        return

    console.print(f"\n[bold blue]Recent files (last {len(entries)}):[/bold blue]")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Date", justify="center")
    table.add_column("Filename", style="cyan", no_wrap=False, max_width=40)
    table.add_column("Author")
    table.add_column("Category")
    table.add_column("Project")
    table.add_column("Description", no_wrap=False, max_width=30)

    for entry in entries:
        table.add_row(
            (entry.get("Timestamp") or "")[:16].replace("T", " ") or "Unknown",
            escape(entry.get("Filename") or "-"),
            escape(entry.get("Author") or "-"),
            escape(entry.get("Category") or "-"),
            escape(entry.get("Project") or "-"),
            escape(entry.get("Description") or "-"),
        )

    console.print(table)


if __name__ == "__main__":
    main()
