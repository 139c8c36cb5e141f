"""Exceptions raised while loading, building and generating state machines."""

from __future__ import annotations

from typing import Any


class FsmError(Exception):
    """Base class for every error reported by this package."""

    kind = "Error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.kind}: {self.detail}"


class InvalidInputError(FsmError):
    """The generator options could not be understood."""

    kind = "Invalid macro input"


class InvalidFileError(FsmError):
    """A definition or template file could not be read."""

    kind = "Failed to open file"

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.kind} {self.path}: {self.reason}"


class ParseError(FsmError):
    """The state diagram text could not be parsed."""

    kind = "Parse error"


class BuildError(FsmError):
    """The parsed diagram does not describe a valid state machine."""

    kind = "Build error"


class EmptyNameError(BuildError):
    """The state machine has a blank name."""

    def __init__(self) -> None:
        super().__init__("FSM name cannot be empty")


class InvalidEnterStatesError(BuildError):
    """There is not exactly one top-level enter state."""

    def __init__(self, names: str) -> None:
        super().__init__(f"FSM must have exactly one enter state, found {names}")
        self.names = names


class MultipleEventsPerActionError(BuildError):
    """One action is bound to transitions triggered by different events."""

    def __init__(self, action: Any, events: str) -> None:
        super().__init__(
            f"Action {action} is associated with multiple events: {events}"
        )
        self.action = action
        self.events = events


class ConflictingTransitionsError(BuildError):
    """A state has several unguarded transitions for the same event."""

    def __init__(self, state: str, event: Any) -> None:
        super().__init__(
            f"State '{state}' has multiple transitions for event {event!r}"
        )
        self.state = state
        self.event = event


class DuplicateGuardError(BuildError):
    """The same guard protects several transitions for one event."""

    def __init__(self, event: Any) -> None:
        super().__init__(f"Duplicate guard for event {event!r}")
        self.event = event


class NamingTemplateError(FsmError):
    """A naming template is malformed or could not be rendered."""

    kind = "Naming template error"