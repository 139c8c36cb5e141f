"""The built state machine model: states, transitions and the machine itself."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from phytofsm.arena import ScopedArena
from phytofsm.types import Action, Event, StateType

StateId = int


@dataclass(frozen=True)
class TransitionParameters:
    """A transition as described in the diagram, with states given by name.

    A missing target marks an internal transition, a missing event a direct one.
    """

    source: str
    target: Optional[str] = None
    event: Optional[Event] = None
    action: Optional[Action] = None
    guard: Optional[Action] = None


@dataclass(frozen=True)
class TransitionData:
    """A stored transition with states given by id."""

    source: StateId
    target: Optional[StateId] = None
    event: Optional[Event] = None
    action: Optional[Action] = None
    guard: Optional[Action] = None


@dataclass
class StateData:
    """Everything stored about one state."""

    name: str
    state_type: StateType = StateType.SIMPLE
    transitions: list[TransitionData] = field(default_factory=list)
    enter_action: Optional[Action] = None
    exit_action: Optional[Action] = None
    enter_state: Optional[StateId] = None
    # Includes the events inherited from the parents once the machine is built.
    deferred_events: list[Event] = field(default_factory=list)


class State:
    """A view of one state inside a machine's arena."""

    __slots__ = ("_id", "_arena")

    def __init__(self, state_id: StateId, arena: ScopedArena[StateData]) -> None:
        self._id = state_id
        self._arena = arena

    @property
    def state_id(self) -> StateId:
        return self._id

    @property
    def _data(self) -> StateData:
        return self._arena[self._id].data

    @property
    def name(self) -> str:
        return self._data.name

    @property
    def state_type(self) -> StateType:
        return self._data.state_type

    @property
    def enter_action(self) -> Optional[Action]:
        return self._data.enter_action

    @property
    def exit_action(self) -> Optional[Action]:
        return self._data.exit_action

    def transitions(self) -> Iterator[Transition]:
        """Transitions leaving this state, in the order they were added."""
        return (Transition.from_data(t, self._arena) for t in self._data.transitions)

    @property
    def parent(self) -> Optional[State]:
        parent_id = self._arena[self._id].parent
        return None if parent_id is None else State(parent_id, self._arena)

    def substates(self) -> Iterator[State]:
        """Direct substates in the order they were created."""
        return (State(child, self._arena) for child in self._arena.children(self._id))

    @property
    def enter_state(self) -> State:
        """The state actually entered when this one is the target."""
        enter_id = self._data.enter_state
        return State(self._id if enter_id is None else enter_id, self._arena)

    def deferred_events(self) -> Iterator[Event]:
        return iter(self._data.deferred_events)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, State):
            return NotImplemented
        return (
            self.name == other.name
            and self.state_type == other.state_type
            and self.parent == other.parent
        )

    def __hash__(self) -> int:
        return hash((self.name, self.state_type))

    def __repr__(self) -> str:
        return f"State({self.name!r})"


@dataclass(frozen=True, eq=False)
class Transition:
    """A view of one transition with its states resolved."""

    source: State
    destination: Optional[State]
    event: Optional[Event]
    action: Optional[Action]
    guard: Optional[Action]

    @classmethod
    def from_data(cls, data: TransitionData, arena: ScopedArena[StateData]) -> Transition:
        return cls(
            source=State(data.source, arena),
            destination=None if data.target is None else State(data.target, arena),
            event=data.event,
            action=data.action,
            guard=data.guard,
        )

    def sort_key(self) -> tuple[str, str]:
        """Order by source state name, then event name (direct transitions first)."""
        return (self.source.name, self.event.name if self.event is not None else "")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transition):
            return NotImplemented
        return self.source.name == other.source.name and self.event == other.event

    def __hash__(self) -> int:
        return hash((self.source.name, self.event))

    def __str__(self) -> str:
        event = self.event.name if self.event is not None else "(direct)"
        guard = f" [{self.guard.name}]" if self.guard is not None else ""
        action = f" / {self.action.name}" if self.action is not None else ""
        dest = self.destination.name if self.destination is not None else "(internal)"
        return f"{self.source.name} --[{event}{guard}{action}]--> {dest}"


def _transition_key(t: Transition) -> tuple:
    return (
        t.destination.name if t.destination is not None else None,
        t.event,
        t.action,
        t.guard,
    )


class UmlFsm:
    """A validated state machine: its name, enter state and state tree."""

    def __init__(
        self, name: str, enter_state: StateId, arena: ScopedArena[StateData]
    ) -> None:
        self._name = name
        self._enter_state = enter_state
        self._arena = arena

    @property
    def name(self) -> str:
        return self._name

    @property
    def enter_state(self) -> State:
        return State(self._enter_state, self._arena)

    def states(self) -> Iterator[State]:
        """All states in creation order."""
        return (State(node.id, self._arena) for node in self._arena)

    def transitions(self) -> Iterator[Transition]:
        """All transitions, grouped by source state in creation order."""
        return (
            Transition.from_data(t, self._arena)
            for node in self._arena
            for t in node.data.transitions
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UmlFsm):
            return NotImplemented
        mine, theirs = self.enter_state, other.enter_state
        return (
            self.name == other.name
            and mine.name == theirs.name
            and mine.state_type == theirs.state_type
            and {(s.name, s.state_type) for s in self.states()}
            == {(s.name, s.state_type) for s in other.states()}
            and {_transition_key(t) for t in self.transitions()}
            == {_transition_key(t) for t in other.transitions()}
        )

    __hash__ = None  # type: ignore[assignment]

    def _state_tree_lines(self, state: State, indent: int) -> Iterator[str]:
        prefix = " " * (indent * 2)
        marker = "[*] " if state.state_type is StateType.ENTER else ""
        enter = f" > {state.enter_action.name}" if state.enter_action else ""
        exit_ = f" < {state.exit_action.name}" if state.exit_action else ""
        yield f"{prefix}{marker}{state.name}{enter}{exit_}"
        for substate in state.substates():
            yield from self._state_tree_lines(substate, indent + 1)

    def __str__(self) -> str:
        lines = ["UmlFsm {", f"  name: {self.name}", "  states:"]
        lines.extend(self._state_tree_lines(self.enter_state, 2))
        lines.append("  transitions:")
        lines.extend(
            f"    {t}" for t in sorted(self.transitions(), key=Transition.sort_key)
        )
        lines.append("}")
        return "\n".join(lines)

    __repr__ = __str__