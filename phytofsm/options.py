"""Options that select the definition file, naming template and log level."""

from __future__ import annotations

import enum
import logging
import re
from collections import deque
from dataclasses import dataclass
from typing import NamedTuple, Optional

from phytofsm.errors import InvalidInputError


class LogLevel(enum.Enum):
    """Level at which state transitions are logged."""

    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"
    TRACE = "trace"

    @property
    def logging_level(self) -> int:
        """The matching level of the ``logging`` module."""
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.TRACE: logging.DEBUG - 5,
}


@dataclass(frozen=True)
class Options:
    """Generator options."""

    file_path: str
    naming_path: Optional[str] = None
    log_level: Optional[LogLevel] = None


def parse_log_level(level: str) -> LogLevel:
    """Parse a log level name, ignoring case."""
    try:
        return LogLevel(level.lower())
    except ValueError:
        raise InvalidInputError(
            "Invalid log level. Expected one of: error, warn, info, debug, trace"
        ) from None


class _Lexeme(NamedTuple):
    kind: str
    value: str


_WHITESPACE = re.compile(r"\s*")
_LEXEME_PATTERN = re.compile(
    r'(?P<string>"(?:[^"\\]|\\.)*")'
    r"|(?P<ident>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<punct>[=,])",
    re.DOTALL,
)
_ESCAPE = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", '"': '"', "'": "'"}


def _unescape(body: str) -> str:
    def replace(match: re.Match) -> str:
        char = match.group(1)
        if char not in _ESCAPES:
            raise InvalidInputError(f"unknown character escape: \\{char}")
        return _ESCAPES[char]

    return _ESCAPE.sub(replace, body)


def _lex(text: str) -> list[_Lexeme]:
    lexemes: list[_Lexeme] = []
    pos = _WHITESPACE.match(text).end()
    while pos < len(text):
        match = _LEXEME_PATTERN.match(text, pos)
        if match is None:
            raise InvalidInputError(f"unexpected input: {text[pos:pos + 20]!r}")
        kind = match.lastgroup
        value = match.group(kind)
        if kind == "string":
            value = _unescape(value[1:-1])
        lexemes.append(_Lexeme(kind, value))
        pos = _WHITESPACE.match(text, match.end()).end()
    return lexemes


def _expect(
    queue: deque[_Lexeme], kind: str, message: str, value: Optional[str] = None
) -> str:
    if not queue:
        raise InvalidInputError(f"unexpected end of input, {message}")
    lexeme = queue.popleft()
    if lexeme.kind != kind or (value is not None and lexeme.value != value):
        raise InvalidInputError(f"{message}, found {lexeme.value!r}")
    return lexeme.value


def _parse_value(key: str, queue: deque[_Lexeme]) -> tuple[str, object]:
    if key not in ("file_path", "log_level", "naming"):
        raise InvalidInputError(
            "Unknown option key. Expected 'file_path', 'log_level', or 'naming'"
        )
    literal = _expect(queue, "string", "expected string literal")
    if key == "file_path":
        if not literal.strip():
            raise InvalidInputError("File path cannot be empty")
        return key, literal
    if key == "log_level":
        return key, parse_log_level(literal)
    if not literal.strip():
        raise InvalidInputError("Naming template path cannot be empty")
    return key, literal


def _parse_pairs(lexemes: list[_Lexeme]) -> list[tuple[str, object]]:
    queue = deque(lexemes)
    pairs: list[tuple[str, object]] = []
    while queue:
        key = _expect(queue, "ident", "expected identifier")
        _expect(queue, "punct", "expected `=`", "=")
        pairs.append(_parse_value(key, queue))
        if queue:
            _expect(queue, "punct", "expected `,`", ",")
    return pairs


def _values(pairs: list[tuple[str, object]], key: str) -> list:
    return [value for name, value in pairs if name == key]


def parse_options(text: str) -> Options:
    """Parse either a quoted file path or ``key = "value"`` pairs."""
    lexemes = _lex(text)
    if not lexemes:
        raise InvalidInputError("Expected macro input")

    first = lexemes[0]
    if first.kind == "string":
        if len(lexemes) > 1:
            raise InvalidInputError(f"unexpected input {lexemes[1].value!r}")
        if not first.value.strip():
            raise InvalidInputError("File path cannot be empty")
        return Options(file_path=first.value)

    pairs = _parse_pairs(lexemes)
    file_paths = _values(pairs, "file_path")
    if len(file_paths) != 1:
        raise InvalidInputError("Expected exactly one 'file_path' key in options")
    log_levels = _values(pairs, "log_level")
    if len(log_levels) > 1:
        raise InvalidInputError("Expected at most one 'log_level' key in options")
    namings = _values(pairs, "naming")
    if len(namings) > 1:
        raise InvalidInputError("Expected at most one 'naming' key in options")

    return Options(
        file_path=file_paths[0],
        naming_path=namings[0] if namings else None,
        log_level=log_levels[0] if log_levels else None,
    )