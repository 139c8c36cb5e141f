from phytofsm.arena import ScopedArena
from phytofsm.model import (
    State,
    StateData,
    Transition,
    TransitionData,
    TransitionParameters,
    UmlFsm,
)
from phytofsm.types import Action, Event, StateType


def _make_fsm(name="TestFSM", second_event="Back"):
    arena = ScopedArena()
    start = arena.new_node_in_scope(
        StateData(
            "Start",
            StateType.ENTER,
            enter_action=Action("OnEnter"),
            exit_action=Action("OnExit"),
        )
    )
    parent = arena.new_node_in_scope(StateData("Parent"))
    arena.set_scope(parent)
    child = arena.new_node_in_scope(
        StateData("Child", StateType.ENTER, deferred_events=[Event("Later")])
    )
    arena.set_scope(None)
    arena[parent].data.enter_state = child
    arena[start].data.transitions.append(
        TransitionData(start, parent, Event("Go"), Action("Act"), Action("Ok"))
    )
    arena[child].data.transitions.append(
        TransitionData(child, start, Event(second_event))
    )
    arena[parent].data.transitions.append(TransitionData(parent, None, None))
    return UmlFsm(name, start, arena), (start, parent, child)


def _find(fsm, name):
    return next(s for s in fsm.states() if s.name == name)


def test_states_in_creation_order():
    fsm, _ = _make_fsm()
    assert [s.name for s in fsm.states()] == ["Start", "Parent", "Child"]
    assert fsm.name == "TestFSM"
    assert fsm.enter_state.name == "Start"


def test_state_properties():
    fsm, _ = _make_fsm()
    start = _find(fsm, "Start")
    assert start.state_type is StateType.ENTER
    assert start.enter_action == Action("OnEnter")
    assert start.exit_action == Action("OnExit")
    assert start.parent is None


def test_parent_and_substates():
    fsm, _ = _make_fsm()
    parent = _find(fsm, "Parent")
    children = list(parent.substates())
    assert [c.name for c in children] == ["Child"]
    assert children[0].parent == parent


def test_enter_state_resolution():
    fsm, _ = _make_fsm()
    assert _find(fsm, "Parent").enter_state.name == "Child"
    assert _find(fsm, "Start").enter_state == _find(fsm, "Start")


def test_deferred_events():
    fsm, _ = _make_fsm()
    assert list(_find(fsm, "Child").deferred_events()) == [Event("Later")]
    assert list(_find(fsm, "Start").deferred_events()) == []


def test_state_equality_depends_on_parent():
    arena = ScopedArena()
    p1 = arena.new_node_in_scope(StateData("P1"))
    p2 = arena.new_node_in_scope(StateData("P2"))
    arena.set_scope(p1)
    c1 = arena.new_node_in_scope(StateData("Child"))
    arena.set_scope(p2)
    c2 = arena.new_node_in_scope(StateData("Child"))
    assert State(c1, arena) != State(c2, arena)
    assert State(c1, arena) == State(c1, arena)


def test_transitions_resolved():
    fsm, _ = _make_fsm()
    transitions = list(fsm.transitions())
    assert len(transitions) == 3
    first = transitions[0]
    assert first.source.name == "Start"
    assert first.destination.name == "Parent"
    assert first.event == Event("Go")
    assert first.action == Action("Act")
    assert first.guard == Action("Ok")


def test_state_transitions():
    fsm, _ = _make_fsm()
    (t,) = list(_find(fsm, "Child").transitions())
    assert t.destination.name == "Start"
    assert t.event == Event("Back")


def test_transition_str():
    fsm, _ = _make_fsm()
    by_source = {t.source.name: t for t in fsm.transitions()}
    assert str(by_source["Start"]) == "Start --[Go [Ok] / Act]--> Parent"
    assert str(by_source["Parent"]) == "Parent --[(direct)]--> (internal)"


def test_transition_sorting_and_equality():
    fsm, _ = _make_fsm()
    ordered = sorted(fsm.transitions(), key=Transition.sort_key)
    assert [t.source.name for t in ordered] == ["Child", "Parent", "Start"]
    a = list(fsm.transitions())[0]
    b = Transition.from_data(
        TransitionData(a.source.state_id, None, Event("Go")), a.source._arena
    )
    assert a == b


def test_fsm_equality():
    first, _ = _make_fsm()
    second, _ = _make_fsm()
    assert first == second
    renamed, _ = _make_fsm(name="Other")
    assert first != renamed
    changed, _ = _make_fsm(second_event="Elsewhere")
    assert first != changed


def test_fsm_str_layout():
    fsm, _ = _make_fsm()
    lines = str(fsm).splitlines()
    assert lines[0] == "UmlFsm {"
    assert lines[-1] == "}"
    assert "    [*] Start > OnEnter < OnExit" in lines
    for t in fsm.transitions():
        assert f"    {t}" in lines


def test_transition_parameters_defaults():
    params = TransitionParameters(source="A")
    assert (params.target, params.event, params.action, params.guard) == (
        None,
        None,
        None,
        None,
    )
    assert params == TransitionParameters("A")