from phytofsm.builder import UmlFsmBuilder
from phytofsm.extract import (
    actions,
    direct_transition_actions,
    direct_transition_guards,
    enter_actions,
    events,
    exit_actions,
    guards,
)
from phytofsm.model import TransitionParameters
from phytofsm.types import Action, Event, StateType


def test_direct_transitions_not_in_events():
    builder = UmlFsmBuilder("TestFSM")
    builder.add_state("A", StateType.ENTER)
    builder.add_transition(
        TransitionParameters(source="A", target="B", action=Action("DoSomething"))
    )
    builder.add_transition(
        TransitionParameters(source="B", target="A", event=Event("GoBack"))
    )
    fsm = builder.build()

    assert events(fsm) == [Event("GoBack")]


def test_direct_transition_actions_separate_from_event_actions():
    builder = UmlFsmBuilder("TestFSM")
    builder.add_state("A", StateType.ENTER)
    builder.add_transition(
        TransitionParameters(source="A", target="B", action=Action("DirectAction"))
    )
    builder.add_transition(
        TransitionParameters(
            source="B", target="A", event=Event("GoBack"), action=Action("EventAction")
        )
    )
    fsm = builder.build()

    act = actions(fsm)
    assert len(act) == 1
    assert act[0][0] == Action("EventAction")
    assert direct_transition_actions(fsm) == [Action("DirectAction")]


def test_direct_transition_guards_separate_from_event_guards():
    builder = UmlFsmBuilder("TestFSM")
    builder.add_state("A", StateType.ENTER)
    builder.add_transition(
        TransitionParameters(source="A", target="B", guard=Action("DirectGuard"))
    )
    builder.add_transition(
        TransitionParameters(
            source="A", target="C", event=Event("GoToC"), guard=Action("EventGuard")
        )
    )
    fsm = builder.build()

    g = guards(fsm)
    assert len(g) == 1
    assert g[0][0] == Action("EventGuard")
    assert direct_transition_guards(fsm) == [Action("DirectGuard")]


def test_events_are_unique_and_ordered():
    builder = UmlFsmBuilder("TestFSM")
    builder.add_state("A", StateType.ENTER)
    builder.add_transition(TransitionParameters(source="A", target="B", event=Event("Next")))
    builder.add_transition(TransitionParameters(source="B", target="C", event=Event("Next")))
    builder.add_transition(TransitionParameters(source="C", target="A", event=Event("Back")))
    fsm = builder.build()

    assert events(fsm) == [Event("Next"), Event("Back")]


def test_actions_pair_with_their_event():
    builder = UmlFsmBuilder("TestFSM")
    builder.add_state("A", StateType.ENTER)
    builder.add_transition(
        TransitionParameters(
            source="A", target="B", event=Event("Go"), action=Action("Move")
        )
    )
    fsm = builder.build()

    assert actions(fsm) == [(Action("Move"), Event("Go"))]
    assert guards(fsm) == []


def test_enter_and_exit_actions_are_unique():
    builder = UmlFsmBuilder("TestFSM")
    builder.add_state("A", StateType.ENTER)
    builder.add_state("B", StateType.SIMPLE)
    builder.add_enter_action("A", Action("Greet"))
    builder.add_enter_action("B", Action("Greet"))
    builder.add_exit_action("A", Action("Leave"))
    fsm = builder.build()

    assert enter_actions(fsm) == [Action("Greet")]
    assert exit_actions(fsm) == [Action("Leave")]