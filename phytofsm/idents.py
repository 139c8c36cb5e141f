"""Names given to events, actions and states in the generated machine."""

from __future__ import annotations

from phytofsm.model import State
from phytofsm.naming import to_snake_case, to_upper_camel_case
from phytofsm.types import Action, Event


def event_params_name(event: Event) -> str:
    """Name of the parameter type carried by an event."""
    return f"{to_upper_camel_case(event.name)}Params"


def event_name(event: Event) -> str:
    """Name of an event's variant."""
    return to_upper_camel_case(event.name)


def event_method_name(event: Event) -> str:
    """Name of the method that fires an event."""
    return to_snake_case(event.name)


def action_method_name(action: Action) -> str:
    """Name of the method implementing an action or guard."""
    return to_snake_case(action.name)


def qualified_name(state: State, separator: str) -> str:
    """The state's name preceded by its ancestors' names, outermost first."""
    names: list[str] = []
    current = state
    while current is not None:
        names.append(current.name)
        current = current.parent
    return separator.join(reversed(names))


def state_function_name(state: State) -> str:
    """Name of the function that creates a state."""
    return to_snake_case(qualified_name(state, "_"))


def state_variant_name(state: State) -> str:
    """Name of a state's identifier variant."""
    return to_upper_camel_case(qualified_name(state, ""))


def state_literal(state: State) -> str:
    """Display name of a state."""
    return qualified_name(state, "::")