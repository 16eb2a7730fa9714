"""Naming template tokenizer.

A template is plain text with ``{name}`` tokens. Parsing turns it into a
tuple of ``Literal`` and ``Token`` segments; anything that is not a clean
sequence of those (stray or nested braces, empty ``{}``) is rejected.
"""

from dataclasses import dataclass
from typing import Tuple, Union, List

from .models import TemplateParseError, TokenClass

VERSION_TOKEN = "version"

DERIVED_TOKENS = frozenset({"date", "datetime", "author", VERSION_TOKEN})
FREE_FORM_TOKENS = frozenset({"free_text", "freetext"})


@dataclass(frozen=True)
class Literal:
    """Plain template text."""
    text: str


@dataclass(frozen=True)
class Token:
    """A ``{name}`` placeholder."""
    name: str

    @property
    def placeholder(self) -> str:
        """Token as written in the template."""
        return f"{{{self.name}}}"

    @property
    def token_class(self) -> TokenClass:
        return classify_token(self.name)


Segment = Union[Literal, Token]


def classify_token(name: str) -> TokenClass:
    """Return the class of a token name."""
    if name in DERIVED_TOKENS:
        return TokenClass.DERIVED
    if name in FREE_FORM_TOKENS:
        return TokenClass.FREE_FORM
    return TokenClass.USER_SUPPLIED


def parse_template(template: str) -> Tuple[Segment, ...]:
    """Split a template into literal and token segments.

    Args:
        template: Naming template, e.g. ``{date}_{category}_{version}``

    Returns:
        Tuple of segments in template order

    Raises:
        TemplateParseError: If the template is not a string, has an empty
            token, a nested or unclosed ``{``, or a stray ``}``
    """
    if not isinstance(template, str):
        raise TemplateParseError("Template must be a string")

    segments: List[Segment] = []
    buffer: List[str] = []
    position = 0
    length = len(template)

    while position < length:
        char = template[position]

        if char == "}":
            raise TemplateParseError(f"Unexpected '}}' at position {position}", position)

        if char != "{":
            buffer.append(char)
            position += 1
            continue

        end = position + 1
        while end < length and template[end] not in "{}":
            end += 1

        if end >= length:
            raise TemplateParseError(f"Unclosed '{{' at position {position}", position)
        if template[end] == "{":
            raise TemplateParseError(f"Nested '{{' at position {end}", end)

        name = template[position + 1:end]
        if not name:
            raise TemplateParseError(f"Empty token at position {position}", position)

        if buffer:
            segments.append(Literal("".join(buffer)))
            buffer = []
        segments.append(Token(name))
        position = end + 1

    if buffer:
        segments.append(Literal("".join(buffer)))

    return tuple(segments)


def template_tokens(template: str) -> List[Token]:
    """Return every token in a template, in order (duplicates kept)."""
    return [segment for segment in parse_template(template) if isinstance(segment, Token)]


def has_version_token(template: str) -> bool:
    """Check whether a template contains ``{version}``."""
    return any(token.name == VERSION_TOKEN for token in template_tokens(template))


def required_tokens(template: str) -> List[str]:
    """Return user-supplied token names, de-duplicated, in template order."""
    names: List[str] = []
    for token in template_tokens(template):
        if token.token_class is TokenClass.USER_SUPPLIED and token.name not in names:
            names.append(token.name)
    return names
