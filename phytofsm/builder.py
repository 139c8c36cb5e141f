"""Incremental construction and validation of a state machine model."""

from __future__ import annotations

import os
import sys
from itertools import groupby
from typing import Callable, Iterator, Optional

from phytofsm.arena import ScopedArena
from phytofsm.errors import (
    ConflictingTransitionsError,
    DuplicateGuardError,
    EmptyNameError,
    InvalidEnterStatesError,
    MultipleEventsPerActionError,
)
from phytofsm.model import (
    StateData,
    StateId,
    TransitionData,
    TransitionParameters,
    UmlFsm,
)
from phytofsm.types import Action, Event, StateType

_DEBUG_VARIABLE = "PHYTO_DEBUG"


def _debug(message: str) -> None:
    if _DEBUG_VARIABLE in os.environ:
        print(f"[phyto-fsm] {message}", file=sys.stderr)


class UmlFsmBuilder:
    """Collects states and transitions, then validates them into a UmlFsm."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._arena: ScopedArena[StateData] = ScopedArena()

    def set_scope(self, scope: Optional[StateId]) -> Optional[StateId]:
        """Set the state new states are created in; return the previous scope."""
        return self._arena.set_scope(scope)

    def add_state(self, name: str, state_type: StateType) -> StateId:
        """Add a state to the current scope, or reuse one of the same name there."""
        _debug(f"Adding state '{name}' of type {state_type}")
        existing = self._find_state_in_scope(name)
        if existing is not None:
            self._update_non_simple_state_type(existing, state_type, name)
            return existing
        return self._create_state(name, state_type)

    def add_transition(self, params: TransitionParameters) -> None:
        """Add a transition, creating its source and target states if needed."""
        _debug(
            f"Adding transition from {params.source} -> {params.target}: "
            f"{params.event} [{params.guard}] / {params.action}"
        )
        source_id = self._find_or_create_state(params.source)
        target_id = (
            None if params.target is None else self._find_or_create_state(params.target)
        )
        self._arena[source_id].data.transitions.append(
            TransitionData(
                source=source_id,
                target=target_id,
                event=params.event,
                action=params.action,
                guard=params.guard,
            )
        )

    def add_enter_action(self, state_name: str, action: Action) -> None:
        """Set the action run when the named state is entered."""
        _debug(f"Adding enter action '{action}' to state '{state_name}'")
        state_id = self._find_descendant_state(state_name)
        if state_id is not None:
            self._arena[state_id].data.enter_action = action

    def add_exit_action(self, state_name: str, action: Action) -> None:
        """Set the action run when the named state is left."""
        _debug(f"Adding exit action '{action}' to state '{state_name}'")
        state_id = self._find_descendant_state(state_name)
        if state_id is not None:
            self._arena[state_id].data.exit_action = action

    def add_deferred_event(self, state_name: str, event: Event) -> None:
        """Mark an event as deferred while the named state is active."""
        _debug(f"Adding deferred event '{event}' to state '{state_name}'")
        state_id = self._find_descendant_state(state_name)
        if state_id is not None:
            self._arena[state_id].data.deferred_events.append(event)

    def build(self) -> UmlFsm:
        """Validate the collected definition and return the finished machine."""
        _debug(f"All states: {[node.data.name for node in self._arena]}")

        self._check_injective_action_mapping()
        self._check_no_conflicting_transitions()
        self._check_unique_guards_per_event()

        self._extract_deferred_events()
        self._link_enter_states()

        enter_state = self._find_root_enter_state()
        _debug(f"Found root enter state: {enter_state}")

        if not self._name.strip():
            raise EmptyNameError()

        return UmlFsm(self._name, enter_state, self._arena)

    # State lookup and creation

    def _find_or_create_state(self, name: str) -> StateId:
        found = self._find_descendant_state(name)
        return found if found is not None else self._create_state(name, StateType.SIMPLE)

    def _create_state(self, name: str, state_type: StateType) -> StateId:
        _debug(f"Creating state '{name}' in scope {self._arena.scope()}")
        return self._arena.new_node_in_scope(StateData(name=name, state_type=state_type))

    def _find_state_in_scope(self, name: str) -> Optional[StateId]:
        return next(
            (node.id for node in self._arena.nodes_in_scope() if node.data.name == name),
            None,
        )

    def _find_descendant_state(self, name: str) -> Optional[StateId]:
        return next(
            (
                node.id
                for node in self._arena.descendants_from_scope()
                if node.data.name == name
            ),
            None,
        )

    def _update_non_simple_state_type(
        self, state_id: StateId, state_type: StateType, name: str
    ) -> None:
        data = self._arena[state_id].data
        current = data.state_type
        if state_type is not StateType.SIMPLE and current is StateType.SIMPLE:
            _debug(f"Updating Type of state '{name}' from {current} to {state_type}")
            data.state_type = state_type
        elif state_type is not StateType.SIMPLE and current is not state_type:
            _debug(f"State '{name}' already has type {current}, ignoring {state_type}")

    # Enter states

    def _find_deepest_enter_state(self, state_id: StateId) -> StateId:
        current = state_id
        while True:
            nested = next(
                (
                    child
                    for child in self._arena.children(current)
                    if self._arena[child].data.state_type is StateType.ENTER
                ),
                None,
            )
            if nested is None:
                return current
            current = nested

    def _link_enter_states(self) -> None:
        for state_id in list(self._arena.node_ids()):
            self._arena[state_id].data.enter_state = self._find_deepest_enter_state(
                state_id
            )

    def _find_root_enter_state(self) -> StateId:
        enter_roots = [
            node
            for node in self._arena.root_nodes()
            if node.data.state_type is StateType.ENTER
        ]
        names = [node.data.name for node in enter_roots]
        _debug(f"Root enter states: {names}")
        if len(enter_roots) != 1:
            raise InvalidEnterStatesError(", ".join(names))
        return self._find_deepest_enter_state(enter_roots[0].id)

    # Deferred event inheritance

    def _extract_deferred_events(self) -> None:
        for state_id in list(self._arena.node_ids()):
            self._arena[state_id].data.deferred_events = self._inherited_deferred_events(
                state_id
            )

    def _inherited_deferred_events(self, state_id: StateId) -> list[Event]:
        ancestors = list(self._arena.ancestors(state_id))
        handled = {
            t.event
            for ancestor in ancestors
            for t in self._arena[ancestor].data.transitions
            if t.event is not None
        }
        result: list[Event] = []
        for ancestor in ancestors:
            for event in self._arena[ancestor].data.deferred_events:
                if event not in handled and event not in result:
                    result.append(event)
        return result

    # Validation

    def _all_transitions(self) -> Iterator[TransitionData]:
        return (t for node in self._arena for t in node.data.transitions)

    def _check_injective_action_mapping(self) -> None:
        deduplicated: list[TransitionData] = []
        for transition in self._all_transitions():
            if transition.event is None:
                continue
            if deduplicated and (
                deduplicated[-1].event == transition.event
                and deduplicated[-1].action == transition.action
            ):
                continue
            deduplicated.append(transition)

        pairs = [
            (t.action, t.event) for t in deduplicated if t.action is not None
        ]
        for action, group in groupby(pairs, key=lambda pair: pair[0]):
            items = list(group)
            if len(items) > 1:
                events = ", ".join(event.name for _, event in items)
                raise MultipleEventsPerActionError(action, events)

    def _for_each_transition_group(
        self,
        validate: Callable[[str, Optional[Event], list[Optional[Action]]], None],
    ) -> None:
        keyed = groupby(self._all_transitions(), key=lambda t: (t.source, t.event))
        for (source, event), group in keyed:
            guards = [t.guard for t in group]
            validate(self._arena[source].data.name, event, guards)

    def _check_no_conflicting_transitions(self) -> None:
        def validate(
            state_name: str, event: Optional[Event], guards: list[Optional[Action]]
        ) -> None:
            if len(guards) > 1 and not all(g is not None for g in guards):
                raise ConflictingTransitionsError(state_name, event)

        self._for_each_transition_group(validate)

    def _check_unique_guards_per_event(self) -> None:
        def validate(
            _state_name: str, event: Optional[Event], guards: list[Optional[Action]]
        ) -> None:
            if len(set(guards)) != len(guards):
                raise DuplicateGuardError(event)

        self._for_each_transition_group(validate)