"""Collect the distinct events, actions and guards used by a machine."""

from __future__ import annotations

from typing import Iterable, TypeVar

from phytofsm.model import UmlFsm
from phytofsm.types import Action, Event

T = TypeVar("T")


def _unique(items: Iterable[T]) -> list[T]:
    return list(dict.fromkeys(items))


def events(fsm: UmlFsm) -> list[Event]:
    """Events that trigger at least one transition."""
    return _unique(t.event for t in fsm.transitions() if t.event is not None)


def actions(fsm: UmlFsm) -> list[tuple[Action, Event]]:
    """Actions of event-triggered transitions, each with its event."""
    return _unique(
        (t.action, t.event)
        for t in fsm.transitions()
        if t.event is not None and t.action is not None
    )


def guards(fsm: UmlFsm) -> list[tuple[Action, Event]]:
    """Guards of event-triggered transitions, each with its event."""
    return _unique(
        (t.guard, t.event)
        for t in fsm.transitions()
        if t.event is not None and t.guard is not None
    )


def direct_transition_actions(fsm: UmlFsm) -> list[Action]:
    """Actions of transitions taken without an event."""
    return _unique(
        t.action for t in fsm.transitions() if t.event is None and t.action is not None
    )


def direct_transition_guards(fsm: UmlFsm) -> list[Action]:
    """Guards of transitions taken without an event."""
    return _unique(
        t.guard for t in fsm.transitions() if t.event is None and t.guard is not None
    )


def enter_actions(fsm: UmlFsm) -> list[Action]:
    """Actions run when states are entered."""
    return _unique(s.enter_action for s in fsm.states() if s.enter_action is not None)


def exit_actions(fsm: UmlFsm) -> list[Action]:
    """Actions run when states are left."""
    return _unique(s.exit_action for s in fsm.states() if s.exit_action is not None)