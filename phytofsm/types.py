"""Basic value types of a state machine: events, actions and state kinds."""

from __future__ import annotations

import enum
from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Event:
    """An event that triggers transitions."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, order=True)
class Action:
    """A named action or guard called on the user's action object."""

    name: str

    def __str__(self) -> str:
        return self.name


class StateType(enum.Enum):
    """Whether a state is an ordinary state or the enter state of its scope."""

    SIMPLE = "simple"
    ENTER = "enter"