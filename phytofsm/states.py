"""Runtime state nodes that carry out transitions of a built machine."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from phytofsm.idents import action_method_name, state_literal, state_variant_name
from phytofsm.model import State, UmlFsm
from phytofsm.types import Action, Event


@dataclass(frozen=True)
class StateId:
    """Identifier of a state: its variant name and its qualified display name."""

    variant: str
    name: str

    @classmethod
    def from_state(cls, state: State) -> StateId:
        return cls(state_variant_name(state), state_literal(state))

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class EventCall:
    """An event fired together with its parameters."""

    event: Event
    params: Any = None

    def __str__(self) -> str:
        return self.event.name


def _invoke(actions: Any, method: Action, *args: Any) -> Any:
    return getattr(actions, action_method_name(method))(*args)


class RealState:
    """A state of the machine that can be active."""

    __slots__ = ("_state", "_id")

    def __init__(self, state: State) -> None:
        self._state = state
        self._id = StateId.from_state(state)

    @property
    def state(self) -> State:
        return self._state

    def id(self) -> Optional[StateId]:
        return self._id

    def resolve_enter_state(self) -> RealState:
        """The state actually entered when this one is the target."""
        return RealState(self._state.enter_state)

    def transition(self, event: EventCall, actions: Any) -> Optional[RealState]:
        """Handle an event; unhandled events are passed on to the parent state.

        Returns the target state, or None when nothing changes state.
        """
        for t in self._state.transitions():
            if t.event is None or t.event != event.event:
                continue
            if t.guard is not None and not _invoke(actions, t.guard, event.params):
                continue
            if t.action is not None:
                _invoke(actions, t.action, event.params)
            return None if t.destination is None else RealState(t.destination)
        parent = self._state.parent
        if parent is None:
            return None
        return RealState(parent).transition(event, actions)

    def direct_transition(self, actions: Any) -> Optional[RealState]:
        """Take the first transition without an event whose guard allows it."""
        for t in self._state.transitions():
            if t.event is not None or t.destination is None:
                continue
            if t.guard is not None and not _invoke(actions, t.guard):
                continue
            if t.action is not None:
                _invoke(actions, t.action)
            return RealState(t.destination)
        return None

    def _substate_ids(self) -> set[StateId]:
        return {StateId.from_state(s) for s in self._state.substates()}

    def enter(self, actions: Any, source: Node) -> None:
        """Run enter actions, outermost first, unless coming from a direct substate."""
        if source.id() in self._substate_ids():
            return
        parent = self._state.parent
        if parent is not None:
            RealState(parent).enter(actions, source)
        if self._state.enter_action is not None:
            _invoke(actions, self._state.enter_action)

    def exit(self, actions: Any, target: Node) -> None:
        """Run exit actions, innermost first, unless going to a direct substate."""
        if target.id() in self._substate_ids():
            return
        if self._state.exit_action is not None:
            _invoke(actions, self._state.exit_action)
        parent = self._state.parent
        if parent is not None:
            RealState(parent).exit(actions, target)

    def defers(self, event: EventCall) -> bool:
        """Whether the event is deferred while this state is active."""
        return event.event in set(self._state.deferred_events())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RealState):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __str__(self) -> str:
        return str(self._id)

    def __repr__(self) -> str:
        return f"RealState({self._id.name!r})"


class InitialNode:
    """The pseudo state a machine is in before it enters its first state.

    It has no identifier, handles no events, defers nothing and carries no
    enter or exit actions; its only way out is the direct transition to the
    machine's enter state.
    """

    __slots__ = ("_fsm",)

    _ID: Optional[StateId] = None
    _EVENT_TARGETS: Mapping[Event, State] = MappingProxyType({})
    _DEFERRED: frozenset = frozenset()
    _ENTER_ACTIONS: tuple = ()
    _EXIT_ACTIONS: tuple = ()

    def __init__(self, fsm: UmlFsm) -> None:
        self._fsm = fsm

    def id(self) -> Optional[StateId]:
        return self._ID

    def resolve_enter_state(self) -> RealState:
        return RealState(self._fsm.enter_state)

    def transition(self, event: EventCall, actions: Any) -> Optional[RealState]:
        target = self._EVENT_TARGETS.get(event.event)
        return None if target is None else RealState(target)

    def direct_transition(self, actions: Any) -> Optional[RealState]:
        return RealState(self._fsm.enter_state)

    def enter(self, actions: Any, source: Node) -> None:
        for action in self._ENTER_ACTIONS:
            _invoke(actions, action)

    def exit(self, actions: Any, target: Node) -> None:
        for action in self._EXIT_ACTIONS:
            _invoke(actions, action)

    def defers(self, event: EventCall) -> bool:
        return event.event in self._DEFERRED

    def __str__(self) -> str:
        return "[*]"

    def __repr__(self) -> str:
        return "InitialNode()"


Node = Union[RealState, InitialNode]