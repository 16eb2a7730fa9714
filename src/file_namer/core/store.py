"""JSON-backed settings: pick lists, custom tokens, presets and backups."""

import json
import logging
import time
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import List, Dict, Any, Optional, Union

from .audit_log import LOG_FILENAME
from .models import TemplateParseError
from .template import Token, parse_template
from ..utils.config import Config, get_data_dir

# Configure logging
logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

SIMPLE_LISTS = {
    "categories": "categories.json",
    "projects": "projects.json",
    "extensions": "extensions.json",
}
PRESETS_FILE = "presets.json"
CUSTOM_TOKENS_FILE = "custom_tokens.json"
CONFIG_FILE = "config.json"
TEMPLATES_DIRNAME = "content_templates"

BACKUP_LIST_KEYS = ("categories", "projects", "extensions", "presets", "custom_tokens")


@dataclass
class StoreResult:
    """Outcome of a settings write."""
    success: bool
    message: str = ""


@dataclass
class CustomToken:
    """A user-defined ``{name}`` token with a display label."""
    id: str
    token_name: str
    label: str

    @property
    def key(self) -> str:
        """Token name without braces, as used in the value bag."""
        return self.token_name.strip("{}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomToken":
        return cls(
            id=str(data.get("id", "")),
            token_name=data.get("token_name", ""),
            label=data.get("label", ""),
        )


@dataclass
class Preset:
    """A saved combination of directory, template and token values."""
    id: str
    name: str
    save_dir: str = ""
    template: str = ""
    values: Dict[str, str] = field(default_factory=dict)

    @property
    def extension(self) -> str:
        return self.values.get("extension", "")

    def token_values(self) -> Dict[str, str]:
        """Preset values without the extension entry."""
        return {key: value for key, value in self.values.items() if key != "extension"}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Preset":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            save_dir=data.get("save_dir", "") or "",
            template=data.get("template", "") or "",
            values=dict(data.get("values") or {}),
        )


def validate_custom_token_name(token_name: str) -> Optional[str]:
    """Return an error message if a custom token name is malformed."""
    if len(token_name) < 3 or not token_name.startswith("{") or not token_name.endswith("}"):
        return "Token names must have the form {name}"
    try:
        segments = parse_template(token_name)
    except TemplateParseError:
        return "Token names must have the form {name}"
    if len(segments) != 1 or not isinstance(segments[0], Token):
        return "Token names must have the form {name}"
    return None


def is_valid_backup(data: Any) -> bool:
    """Check the shape of an imported settings backup."""
    if not isinstance(data, dict):
        return False
    for key in BACKUP_LIST_KEYS:
        if not isinstance(data.get(key), list):
            return False
    return isinstance(data.get("config"), dict)


class SettingsStore:
    """Reads and writes the JSON settings files in the data directory."""

    def __init__(self, data_dir: Optional[Path] = None):
        """Initialize the settings store.

        Args:
            data_dir: Directory holding the JSON files
        """
        self.data_dir = Path(data_dir) if data_dir else get_data_dir()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def templates_dir(self) -> Path:
        """Directory holding per-category content templates."""
        path = self.data_dir / TEMPLATES_DIRNAME
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def log_file(self) -> Path:
        return self.data_dir / LOG_FILENAME

    def load_config(self) -> Config:
        return Config(self.data_dir / CONFIG_FILE)

    def _read_json(self, filename: str, default: Any) -> Any:
        """Load a JSON file, returning ``default`` on any problem."""
        file_path = self.data_dir / filename
        if not file_path.exists():
            return default

        try:
            if file_path.stat().st_size > MAX_FILE_SIZE:
                logger.error(f"Failed to load {filename}: file is larger than 10MB")
                return default
            with open(file_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.error(f"Failed to load {filename}: {e}")
            return default

    def _write_json(self, filename: str, data: Any) -> StoreResult:
        """Write a JSON file, reporting failure instead of raising."""
        file_path = self.data_dir / filename
        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            return StoreResult(success=True)
        except (OSError, TypeError) as e:
            logger.error(f"Failed to write {filename}: {e}")
            return StoreResult(success=False, message=str(e))

    @staticmethod
    def _new_id(existing: List[str]) -> str:
        new_id = int(time.time() * 1000)
        while str(new_id) in existing:
            new_id += 1
        return str(new_id)

    # Simple pick lists

    def get_list(self, kind: str) -> List[str]:
        """Return the categories, projects or extensions list."""
        items = self._read_json(SIMPLE_LISTS[kind], [])
        if not isinstance(items, list):
            logger.warning(f"Ignoring {SIMPLE_LISTS[kind]}: expected a list")
            return []
        return [item for item in items if isinstance(item, str)]

    def set_list(self, kind: str, items: List[str]) -> StoreResult:
        return self._write_json(SIMPLE_LISTS[kind], list(items))

    def add_item(self, kind: str, value: str) -> StoreResult:
        """Add a value to a pick list, rejecting blanks and duplicates."""
        value = value.strip()
        if not value:
            return StoreResult(success=False, message="Value must not be empty")

        items = self.get_list(kind)
        if value in items:
            return StoreResult(success=False, message=f"'{value}' is already in {kind}")

        items.append(value)
        return self.set_list(kind, items)

    def remove_item(self, kind: str, value: str) -> StoreResult:
        items = self.get_list(kind)
        if value not in items:
            return StoreResult(success=False, message=f"'{value}' is not in {kind}")

        items.remove(value)
        return self.set_list(kind, items)

    # Custom tokens

    def get_custom_tokens(self) -> List[CustomToken]:
        items = self._read_json(CUSTOM_TOKENS_FILE, [])
        if not isinstance(items, list):
            return []
        return [CustomToken.from_dict(item) for item in items if isinstance(item, dict)]

    def _save_custom_tokens(self, tokens: List[CustomToken]) -> StoreResult:
        return self._write_json(CUSTOM_TOKENS_FILE, [asdict(token) for token in tokens])

    def add_custom_token(self, token_name: str, label: str) -> StoreResult:
        """Register a custom token.

        Args:
            token_name: Token including braces, e.g. ``{client}``
            label: Human-readable label used when prompting

        Returns:
            StoreResult describing the outcome
        """
        token_name = token_name.strip()
        label = label.strip()
        if not token_name or not label:
            return StoreResult(success=False, message="Both a token name and a label are required")

        error = validate_custom_token_name(token_name)
        if error:
            return StoreResult(success=False, message=error)

        tokens = self.get_custom_tokens()
        if any(token.token_name == token_name for token in tokens):
            return StoreResult(success=False, message=f"Token {token_name} already exists")

        tokens.append(CustomToken(
            id=self._new_id([token.id for token in tokens]),
            token_name=token_name,
            label=label,
        ))
        return self._save_custom_tokens(tokens)

    def remove_custom_token(self, token_name: str) -> StoreResult:
        tokens = self.get_custom_tokens()
        remaining = [token for token in tokens if token.token_name != token_name and token.id != token_name]
        if len(remaining) == len(tokens):
            return StoreResult(success=False, message=f"Token {token_name} not found")
        return self._save_custom_tokens(remaining)

    # Presets

    def get_presets(self) -> List[Preset]:
        items = self._read_json(PRESETS_FILE, [])
        if not isinstance(items, list):
            return []
        return [Preset.from_dict(item) for item in items if isinstance(item, dict)]

    def find_preset(self, id_or_name: str) -> Optional[Preset]:
        """Look up a preset by id first, then by name."""
        presets = self.get_presets()
        for preset in presets:
            if preset.id == id_or_name:
                return preset
        for preset in presets:
            if preset.name == id_or_name:
                return preset
        return None

    def add_preset(
        self,
        name: str,
        save_dir: str = "",
        template: str = "",
        values: Optional[Dict[str, str]] = None,
    ) -> StoreResult:
        """Save a new preset; names must be unique."""
        name = name.strip()
        if not name:
            return StoreResult(success=False, message="Preset name must not be empty")

        presets = self.get_presets()
        if any(preset.name == name for preset in presets):
            return StoreResult(success=False, message=f"Preset '{name}' already exists")

        presets.append(Preset(
            id=self._new_id([preset.id for preset in presets]),
            name=name,
            save_dir=save_dir,
            template=template,
            values={key: value for key, value in (values or {}).items() if value},
        ))
        return self._write_json(PRESETS_FILE, [asdict(preset) for preset in presets])

    def remove_preset(self, id_or_name: str) -> StoreResult:
        target = self.find_preset(id_or_name)
        if target is None:
            return StoreResult(success=False, message=f"Preset '{id_or_name}' not found")

        presets = [preset for preset in self.get_presets() if preset.id != target.id]
        return self._write_json(PRESETS_FILE, [asdict(preset) for preset in presets])

    # Backup

    def export_settings(self, output_path: Union[str, Path]) -> StoreResult:
        """Write every settings file into one JSON backup."""
        backup = {kind: self.get_list(kind) for kind in SIMPLE_LISTS}
        backup["presets"] = [asdict(preset) for preset in self.get_presets()]
        backup["custom_tokens"] = [asdict(token) for token in self.get_custom_tokens()]
        backup["config"] = self.load_config().as_dict()

        try:
            Path(output_path).write_text(
                json.dumps(backup, indent=2, ensure_ascii=False), encoding='utf-8'
            )
        except OSError as e:
            logger.error(f"Export failed: {e}")
            return StoreResult(success=False, message=f"Export failed: {e}")

        return StoreResult(success=True, message=f"Settings saved to {output_path}")

    def import_settings(self, input_path: Union[str, Path]) -> StoreResult:
        """Replace every settings file with the contents of a backup.

        The backup is size-checked and shape-checked before anything is
        overwritten.
        """
        input_path = Path(input_path)
        try:
            if input_path.stat().st_size > MAX_FILE_SIZE:
                return StoreResult(success=False, message="Import failed: file is larger than 10MB")
            backup = json.loads(input_path.read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Import failed: {e}")
            return StoreResult(success=False, message=f"Import failed: {e}")

        if not is_valid_backup(backup):
            return StoreResult(
                success=False,
                message="Import failed: the file is missing required keys or has wrong data types",
            )

        results = [self.set_list(kind, backup[kind]) for kind in SIMPLE_LISTS]
        results.append(self._write_json(PRESETS_FILE, backup["presets"]))
        results.append(self._write_json(CUSTOM_TOKENS_FILE, backup["custom_tokens"]))

        config = self.load_config()
        config.replace(backup["config"])
        try:
            config.save()
        except OSError as e:
            results.append(StoreResult(success=False, message=str(e)))

        failures = [result.message for result in results if not result.success]
        if failures:
            return StoreResult(success=False, message=f"Import failed: {'; '.join(failures)}")

        return StoreResult(success=True, message="Settings imported")
