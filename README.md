# phytofsm

phytofsm builds a validated model of a UML state machine — states, nested
substates, events, guards, transition actions, enter/exit actions and
deferred events — and runs that model against an object of your own that
supplies the actions and guards.

## Installation

```
pip install phytofsm
```

To run the test suite:

```
pip install "phytofsm[test]"
pytest
```

## Describing a state machine

A machine is assembled with `phytofsm.builder.UmlFsmBuilder`. States are
created explicitly with `add_state`, or implicitly by the transitions that
mention them.

```python
from phytofsm.builder import UmlFsmBuilder
from phytofsm.model import TransitionParameters
from phytofsm.types import Action, Event, StateType

builder = UmlFsmBuilder("TestFsm")
builder.add_state("StateA", StateType.ENTER)
builder.add_transition(TransitionParameters(
    source="StateA",
    target="StateB",
    event=Event("GoToB"),
    action=Action("Action1"),
))
builder.add_transition(TransitionParameters(
    source="StateB",
    target="StateA",
    event=Event("GoToA"),
    action=Action("Action2"),
))
fsm = builder.build()
print(fsm)
```

In `TransitionParameters` a missing `target` makes an internal transition
(the action runs, the state does not change) and a missing `event` makes a
direct transition, taken as soon as its source state is active and its guard,
if any, allows it.

`build()` returns a `phytofsm.model.UmlFsm`. It checks the description and
raises a subclass of `phytofsm.errors.BuildError` when something is wrong:

| Error | Cause |
|-------|-------|
| `EmptyNameError` | the machine's name is blank |
| `InvalidEnterStatesError` | not exactly one top-level enter state |
| `MultipleEventsPerActionError` | one action is used for several events |
| `ConflictingTransitionsError` | a state has several transitions for one event and not all are guarded |
| `DuplicateGuardError` | the same guard appears twice for one event of a state |

All errors of the package derive from `phytofsm.errors.FsmError`.

### Nested states

`set_scope` makes following `add_state` calls create states inside a
composite state, and makes name lookups start there. It returns the previous
scope, so it can be restored afterwards.

```python
parent = builder.add_state("Parent", StateType.SIMPLE)
previous = builder.set_scope(parent)
builder.add_state("Child", StateType.ENTER)
builder.set_scope(previous)
```

Entering a composite state enters its deepest nested enter state. Events a
substate does not handle are passed on to its parent.

### Enter, exit and deferred events

```python
builder.add_enter_action("Child", Action("OnEnterChild"))
builder.add_exit_action("Child", Action("OnExitChild"))
builder.add_deferred_event("Parent", Event("Later"))
```

Enter actions run outermost first, exit actions innermost first; moving
between a composite state and one of its direct substates does not run the
composite state's own enter or exit actions.

A deferred event is queued while the active state defers it, and is tried
again each time a new event is fired, after that event. Substates inherit the
deferred events of their ancestors unless they or an ancestor handle the event
with a transition.

### Inspecting the model

`UmlFsm` offers `name`, `enter_state`, `states()` and `transitions()`.
Each `State` exposes `name`, `state_type`, `parent`, `substates()`,
`transitions()`, `enter_action`, `exit_action`, `enter_state` and
`deferred_events()`. `phytofsm.extract` collects the distinct events,
actions and guards a machine uses (`events`, `actions`, `guards`,
`direct_transition_actions`, `direct_transition_guards`, `enter_actions`,
`exit_actions`), and `phytofsm.idents` gives the snake-case and camel-case
names derived from them.

## Running a machine

`phytofsm.machine.start` starts the machine and takes it through its initial
transition and any direct transitions that follow. Actions and guards are
methods of your object, named in snake case after the names in the diagram.
Event actions and guards receive the event's parameters; direct-transition
actions and guards, and enter and exit actions, receive none.

```python
from phytofsm.machine import MachineOptions, required_actions, start

class MyActions:
    def action1(self, params):
        print("going to B with", params)

    def action2(self, params):
        print("back to A with", params)

print(required_actions(fsm))   # ['action1', 'action2']

machine = start(fsm, MyActions(), MachineOptions())
machine.go_to_b(None)
machine.fire("GoToA", 42)
print(machine.active_state())  # StateA
```

`start` raises `TypeError` if the actions object lacks any method listed by
`required_actions`. Every event is available both as a snake-case method on
the machine and through `fire(event, params)`; `fire` raises `ValueError`
for an event the machine does not know. `active_state()` returns a
`phytofsm.states.StateId` whose string form is the state's name qualified by
its ancestors (`Parent::Child`).

With `MachineOptions(log_level=LogLevel.INFO)` (from `phytofsm.options`) every
transition is logged through the `logging` logger `phytofsm.machine` at that
level.

## Naming templates

`MachineOptions.naming` is a template of `key = value` lines in which
`{name}` stands for the machine's name in upper camel case. The rendered
names are returned by `StateMachine.names()`.

```
fsm = {name}
module = {name}
event_params_trait = I{name}EventParams
action_trait = I{name}Actions
state_id_enum = {name}State
```

`phytofsm.naming.NamingTemplate.default()` provides this template and
`NamingTemplate.from_file(path)` loads your own. All five keys are required
(`MissingKeyError`); unknown keys (`UnknownKeyError`) and lines without `=`
(`MalformedLineError`) are rejected, as are unknown variables
(`RenderError`). The `module` value is converted to snake case.

## Options and files

`phytofsm.options.parse_options` reads an option string, either a bare
quoted path or key/value pairs, and returns an `Options`:

```python
from phytofsm.options import parse_options

options = parse_options('file_path = "fsm.puml", log_level = "info", naming = "names.tmpl"')
```

Log levels are `error`, `warn`, `info`, `debug` and `trace`, in any case.
Invalid input raises `InvalidInputError`.

`phytofsm.files.resolve_path` resolves such a path: absolute paths are kept,
paths starting with `./` or `../` are taken relative to a given caller
directory, and others are looked up under `src/` of a given project
directory. `phytofsm.files.read_text` reads a file, raising
`InvalidFileError` when it cannot.

Setting the environment variable `PHYTO_DEBUG` makes the builder print what
it does to standard error.

## What this package does not do

- It does not read diagram text. Machines are described through
  `UmlFsmBuilder`; `phytofsm.errors.ParseError` is defined, but nothing in
  the package raises it.
- It does not write out source code. The naming template only decides names;
  the machine is run directly by `phytofsm.machine`.
- It has no command-line tool.