"""Interactive prompts for building a creation request."""

import logging
import os
from dataclasses import replace
from typing import List, Dict, Any, Optional, Callable

import questionary
from rich.markup import escape

from ..core.models import CreateRequest, PreviewResult, TemplateParseError, TokenClass
from ..core.store import CustomToken, Preset
from ..core.template import FREE_FORM_TOKENS, template_tokens

# Configure logging
logger = logging.getLogger(__name__)

NO_PRESET = "(no preset)"
OTHER_VALUE = "(type a value...)"

TOKEN_LABELS = {
    "category": "Category",
    "project": "Project",
    "free_text": "Free text",
    "freetext": "Free text",
}


class PromptError(Exception):
    """Base exception for interactive prompts."""
    pass


class UserCancelledError(PromptError):
    """Raised when the user cancels a prompt."""
    pass


def _ask(question: Any) -> Any:
    """Run a questionary question, turning cancellation into an exception."""
    try:
        answer = question.ask()
    except KeyboardInterrupt:
        logger.info("User cancelled prompt with keyboard interrupt")
        raise UserCancelledError("User cancelled")

    if answer is None:
        logger.info("User cancelled prompt")
        raise UserCancelledError("User cancelled")
    return answer


def prompted_tokens(template: str) -> List[str]:
    """Return the tokens a user has to fill for a template.

    Derived tokens are skipped and every name appears once, in template
    order.
    """
    names: List[str] = []
    try:
        tokens = template_tokens(template)
    except TemplateParseError:
        return names

    for token in tokens:
        if token.token_class is TokenClass.DERIVED or token.name in names:
            continue
        names.append(token.name)
    return names


def format_preset_choice(preset: Preset) -> str:
    """Format a preset for display in a selection list."""
    template = preset.template or "no template"
    return f"{preset.name} ({template})"


def format_preview(result: PreviewResult) -> str:
    """Format a preview result as rich markup."""
    style = "green" if result.success else "red"
    return f"[{style}]{escape(result.preview)}[/{style}]"


class RequestPrompter:
    """Asks the user for everything a creation request still lacks."""

    def __init__(
        self,
        categories: Optional[List[str]] = None,
        projects: Optional[List[str]] = None,
        extensions: Optional[List[str]] = None,
        custom_tokens: Optional[List[CustomToken]] = None,
    ):
        """Initialize the prompter.

        Args:
            categories: Known categories offered for ``{category}``
            projects: Known projects offered for ``{project}``
            extensions: Known extensions offered when none is given
            custom_tokens: Custom tokens providing prompt labels
        """
        self.choices = {
            "category": list(categories or []),
            "project": list(projects or []),
        }
        self.extensions = list(extensions or [])
        self.labels = dict(TOKEN_LABELS)
        for token in custom_tokens or []:
            self.labels[token.key] = token.label

    def choose_preset(self, presets: List[Preset], default: Optional[str] = None) -> Optional[Preset]:
        """Let the user pick a preset.

        Args:
            presets: Available presets
            default: Id of the preset to preselect

        Returns:
            The chosen preset, or None for no preset

        Raises:
            UserCancelledError: If the user cancels
        """
        if not presets:
            return None

        preset_map = {format_preset_choice(preset): preset for preset in presets}
        choices = [NO_PRESET] + list(preset_map)
        default_choice = next(
            (display for display, preset in preset_map.items() if preset.id == default),
            NO_PRESET,
        )

        answer = _ask(questionary.select(
            "Preset:",
            choices=choices,
            default=default_choice,
        ))
        return preset_map.get(answer)

    def _choose_or_type(self, label: str, options: List[str], required: bool) -> str:
        if options:
            answer = _ask(questionary.select(f"{label}:", choices=options + [OTHER_VALUE]))
            if answer != OTHER_VALUE:
                return answer

        validate = (lambda text: bool(text.strip()) or f"{label} is required") if required else None
        return _ask(questionary.text(f"{label}:", validate=validate)).strip()

    def collect(
        self,
        request: CreateRequest,
        preview: Optional[Callable[[CreateRequest], None]] = None,
    ) -> CreateRequest:
        """Fill in the missing parts of a request.

        Only tokens referenced by the template are asked for, and values
        already present in the request are kept.

        Args:
            request: Partially filled request
            preview: Callback rendering a preview after each answer

        Returns:
            Completed request

        Raises:
            UserCancelledError: If the user cancels
        """
        save_dir = request.save_dir
        if not save_dir:
            save_dir = os.path.expanduser(_ask(questionary.path("Save folder:", only_directories=True)).strip())

        extension = request.extension
        if not extension:
            extension = self._choose_or_type("Extension", self.extensions, required=True)

        values: Dict[str, Any] = dict(request.values)
        for name in prompted_tokens(request.template):
            if values.get(name):
                continue
            label = self.labels.get(name, name)
            required = name not in FREE_FORM_TOKENS
            values[name] = self._choose_or_type(label, self.choices.get(name, []), required)
            if preview:
                preview(replace(request, save_dir=save_dir, extension=extension, values=values))

        description = request.description
        if not description:
            description = _ask(questionary.text("Description (optional):"))

        return replace(
            request,
            save_dir=save_dir,
            extension=extension,
            values=values,
            description=description,
        )

    def confirm(self, filename: str) -> bool:
        """Ask for confirmation before creating a file."""
        return _ask(questionary.confirm(f"Create {filename}?", default=True))
