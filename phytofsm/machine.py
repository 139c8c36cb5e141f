"""Run a built state machine against a user-supplied actions object."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from phytofsm import extract
from phytofsm.idents import action_method_name, event_method_name
from phytofsm.model import UmlFsm
from phytofsm.naming import NamingTemplate, RenderedNames
from phytofsm.options import LogLevel
from phytofsm.states import EventCall, InitialNode, Node, RealState, StateId
from phytofsm.types import Event

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class MachineOptions:
    """How a machine is named and whether its transitions are logged."""

    log_level: Optional[LogLevel] = None
    naming: NamingTemplate = field(default_factory=NamingTemplate.default)


def required_actions(fsm: UmlFsm) -> list[str]:
    """Method names the actions object must provide, without duplicates.

    Event actions come first, then direct transition actions, enter and exit
    actions, event guards and direct transition guards.
    """
    groups = [
        (action for action, _ in extract.actions(fsm)),
        extract.direct_transition_actions(fsm),
        extract.enter_actions(fsm),
        extract.exit_actions(fsm),
        (guard for guard, _ in extract.guards(fsm)),
        extract.direct_transition_guards(fsm),
    ]
    return list(
        dict.fromkeys(action_method_name(action) for group in groups for action in group)
    )


class StateMachine:
    """A running state machine.

    Each event can be fired through ``fire`` or by calling the method named
    after it, for example ``machine.go_to_b(params)``.
    """

    def __init__(
        self, fsm: UmlFsm, actions: Any, options: Optional[MachineOptions] = None
    ) -> None:
        options = options if options is not None else MachineOptions()
        self._names = options.naming.render(fsm.name)
        missing = [
            name
            for name in required_actions(fsm)
            if not callable(getattr(actions, name, None))
        ]
        if missing:
            raise TypeError(
                f"Actions object is missing required methods: {', '.join(missing)}"
            )
        self._fsm = fsm
        self._actions = actions
        self._log_level = options.log_level
        self._events = {event_method_name(e): e for e in extract.events(fsm)}
        self._defer_enabled = any(
            next(state.deferred_events(), None) is not None for state in fsm.states()
        )
        self._deferred: deque[EventCall] = deque()
        self._current: Node = InitialNode(fsm)
        self._try_direct_transition()

    def names(self) -> RenderedNames:
        """The names rendered for this machine by its naming template."""
        return self._names

    def active_state(self) -> Optional[StateId]:
        """The identifier of the active state, or None before the first state."""
        return self._current.id()

    def fire(self, event: Union[Event, str], params: Any = None) -> None:
        """Fire an event, given as an Event or by its name, with its parameters."""
        if isinstance(event, str):
            event = Event(event)
        if event not in self._events.values():
            raise ValueError(f"Unknown event: {event.name}")
        call = EventCall(event, params)
        if self._defer_enabled:
            self._run_event_loop(call)
        else:
            self._try_event_based_transition(call)
            self._try_direct_transition()

    def __getattr__(self, name: str) -> Callable[..., None]:
        if name.startswith("_"):
            raise AttributeError(name)
        event = self.__dict__.get("_events", {}).get(name)
        if event is None:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            )

        def fire_event(params: Any = None) -> None:
            self.fire(event, params)

        return fire_event

    def _run_event_loop(self, call: EventCall) -> None:
        pending = self._deferred
        self._deferred = deque()
        for item in (call, *pending):
            self._process_event(item)

    def _process_event(self, call: EventCall) -> None:
        if self._current.defers(call):
            self._deferred.append(call)
            return
        if self._try_event_based_transition(call):
            self._try_direct_transition()

    def _try_event_based_transition(self, call: EventCall) -> bool:
        target = self._current.transition(call, self._actions)
        if target is None:
            return False
        enter_state = target.resolve_enter_state()
        self._log(str(call), target, enter_state)
        self._change_state(enter_state)
        return True

    def _try_direct_transition(self) -> None:
        while (target := self._current.direct_transition(self._actions)) is not None:
            enter_state = target.resolve_enter_state()
            self._log("direct", target, enter_state)
            self._change_state(enter_state)

    def _change_state(self, next_state: RealState) -> None:
        self._current.exit(self._actions, next_state)
        next_state.enter(self._actions, self._current)
        self._current = next_state

    def _log(self, label: str, target: RealState, enter_state: RealState) -> None:
        if self._log_level is None:
            return
        _LOGGER.log(
            self._log_level.logging_level,
            "%s: %s -[%s]-> %s, entering %s",
            self._fsm.name,
            self._current,
            label,
            target,
            enter_state,
        )


def start(
    fsm: UmlFsm, actions: Any, options: Optional[MachineOptions] = None
) -> StateMachine:
    """Start a machine: it enters its first state right away."""
    return StateMachine(fsm, actions, options)