"""Naming templates that decide the names of the generated machine's parts."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from phytofsm.errors import InvalidFileError, NamingTemplateError

REQUIRED_KEYS = (
    "fsm",
    "module",
    "event_params_trait",
    "action_trait",
    "state_id_enum",
)

_DEFAULT_TEMPLATE = """\
fsm = {name}
module = {name}
event_params_trait = I{name}EventParams
action_trait = I{name}Actions
state_id_enum = {name}State
"""

_LOWER = "lower"
_UPPER = "upper"
_BOUNDARY = "boundary"


class MalformedLineError(NamingTemplateError):
    """A template line is not of the form ``key = value``."""

    def __init__(self, line: str) -> None:
        super().__init__(f"Malformed line (expected 'key = value'): {line}")
        self.line = line


class MissingKeyError(NamingTemplateError):
    """A required key is absent from the template."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Missing required key: {key}")
        self.key = key


class UnknownKeyError(NamingTemplateError):
    """The template holds a key that is not understood."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown key: {key}")
        self.key = key


class RenderError(NamingTemplateError):
    """A template value could not be rendered."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Template rendering failed: {message}")
        self.message = message


def _split_words(text: str) -> list[str]:
    words: list[str] = []
    chunks = "".join(c if c.isalnum() else " " for c in text).split()
    for chunk in chunks:
        start = 0
        mode = _BOUNDARY
        for i, (current, following) in enumerate(zip(chunk, chunk[1:])):
            if current.islower():
                next_mode = _LOWER
            elif current.isupper():
                next_mode = _UPPER
            else:
                next_mode = mode
            if next_mode == _LOWER and following.isupper():
                words.append(chunk[start : i + 1])
                start = i + 1
                mode = _BOUNDARY
            elif mode == _UPPER and current.isupper() and following.islower():
                words.append(chunk[start:i])
                start = i
                mode = _BOUNDARY
            else:
                mode = next_mode
        words.append(chunk[start:])
    return [word for word in words if word]


def to_snake_case(text: str) -> str:
    """Convert text to ``snake_case``."""
    return "_".join(word.lower() for word in _split_words(text))


def to_upper_camel_case(text: str) -> str:
    """Convert text to ``UpperCamelCase``."""
    return "".join(word[0].upper() + word[1:].lower() for word in _split_words(text))


def _render_value(template: str, context: dict[str, str]) -> str:
    out: list[str] = []
    i = 0
    while i < len(template):
        char = template[i]
        if char == "\\" and i + 1 < len(template):
            out.append(template[i + 1])
            i += 2
            continue
        if char == "{":
            if template.startswith("{{", i):
                raise RenderError(f"Unsupported block in template: {template!r}")
            end = template.find("}", i + 1)
            if end == -1:
                raise RenderError(f"Unclosed '{{' in template: {template!r}")
            key = template[i + 1 : end].strip()
            if key not in context:
                raise RenderError(f"Unknown variable '{key}' in template: {template!r}")
            out.append(context[key])
            i = end + 1
            continue
        out.append(char)
        i += 1
    return "".join(out)


@dataclass(frozen=True)
class RenderedNames:
    """The names chosen for the generated machine and its parts."""

    fsm: str
    module: str
    event_params_trait: str
    action_trait: str
    state_id_enum: str


@dataclass(frozen=True)
class NamingTemplate:
    """Lines of ``key = value``, where values may use ``{name}``."""

    content: str

    @classmethod
    def default(cls) -> NamingTemplate:
        """The built-in naming scheme."""
        return cls(_DEFAULT_TEMPLATE)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> NamingTemplate:
        """Load a template from a file."""
        try:
            content = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise InvalidFileError(str(path), str(exc)) from exc
        return cls(content)

    def render(self, name: str) -> RenderedNames:
        """Render every name for the machine called ``name``."""
        context = {"name": to_upper_camel_case(name)}
        entries = self._parse_entries()
        self._validate_keys(entries)
        rendered = {key: _render_value(value, context) for key, value in entries.items()}
        return RenderedNames(
            fsm=rendered["fsm"],
            module=to_snake_case(rendered["module"]),
            event_params_trait=rendered["event_params_trait"],
            action_trait=rendered["action_trait"],
            state_id_enum=rendered["state_id_enum"],
        )

    def _parse_entries(self) -> dict[str, str]:
        entries: dict[str, str] = {}
        for line in self.content.splitlines():
            stripped = line.strip()
            if not stripped:
                continue
            key, sep, value = stripped.partition("=")
            if not sep:
                raise MalformedLineError(stripped)
            entries[key.strip()] = value.strip()
        return entries

    @staticmethod
    def _validate_keys(entries: dict[str, str]) -> None:
        for key in entries:
            if key not in REQUIRED_KEYS:
                raise UnknownKeyError(key)
        for required in REQUIRED_KEYS:
            if required not in entries:
                raise MissingKeyError(required)