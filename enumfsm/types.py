"""
State machine data types and structures.

Defines the core types used by the engine:
- State: Named, hashable identity for one enum member
- Transition: Guarded, optionally effectful edge between two states
- StateMachineDefinition: Immutable bundle of states, transitions and initial state
- TransitionHistoryEntry: Audit record of a completed transition
- BuilderPhase: Lifecycle of a FiniteStateMachineBuilder
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from enumfsm.exceptions import StructuralIntegrityError

Condition = Callable[[Any], bool]
SideEffect = Callable[[Any, Enum, Enum], None]


def always(context: Any) -> bool:
    """Default guard: every transition without a condition is eligible."""
    return True


class BuilderPhase(Enum):
    """Lifecycle of a builder. There is no observable empty phase."""

    CONFIGURING = "configuring"
    BUILT = "built"


@dataclass(frozen=True)
class State:
    """
    A named point in the enumerated state space.

    Identity is the name alone: two states compare equal iff their names
    are equal, regardless of which enum member they were created from.

    Args:
        name: Canonical name, the enum member's declared identifier.
        value: The originating enum member.
    """

    name: str
    value: Optional[Enum] = field(default=None, compare=False, repr=False)

    @classmethod
    def of(cls, member: Union[Enum, "State"]) -> "State":
        """Return the State for an enum member (States pass through unchanged)."""
        if isinstance(member, State):
            return member
        return cls(name=member.name, value=member)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Transition:
    """
    A directed edge between two states.

    Args:
        from_state: State this transition originates from.
        to_state: State this transition leads to.
        condition: Guard over the context. Defaults to ``always``.
        side_effect: Called as ``side_effect(context, from, to)`` when the
                     transition is taken. None means no-op.
        condition_name: Registry name of the guard, if it has one.
        side_effect_name: Registry name of the side effect, if it has one.
    """

    from_state: State
    to_state: State
    condition: Condition = always
    side_effect: Optional[SideEffect] = None
    condition_name: Optional[str] = None
    side_effect_name: Optional[str] = None

    def matches(self, from_name: str, to_name: str) -> bool:
        return self.from_state.name == from_name and self.to_state.name == to_name

    def is_eligible(self, context: Any) -> bool:
        """
        Evaluate the guard against ``context``.

        Exceptions raised by the guard are not caught.
        """
        return bool(self.condition(context))

    def apply(
        self,
        context: Any,
        from_member: Optional[Enum] = None,
        to_member: Optional[Enum] = None,
    ) -> None:
        """
        Invoke the side effect, if any, with the enum members of both endpoints.

        ``from_member`` / ``to_member`` override the endpoints' own members,
        which are absent on States created from a bare name.
        """
        if self.side_effect is None:
            return
        self.side_effect(
            context,
            from_member if from_member is not None else self.from_state.value,
            to_member if to_member is not None else self.to_state.value,
        )


@dataclass(frozen=True)
class StateMachineDefinition:
    """
    The immutable, complete description of a machine.

    Safe to share read-only between any number of machine instances.

    Args:
        entity_label: What kind of entity the machine governs (e.g. "Order").
        states: Every state, in insertion order.
        transitions: Every transition, in declaration order.
        initial_state: Where new machines start.

    Raises:
        StructuralIntegrityError: If the initial state or any transition
            endpoint is missing from ``states``.
    """

    entity_label: str
    states: Tuple[State, ...]
    transitions: Tuple[Transition, ...]
    initial_state: State

    def __post_init__(self):
        # Accept any iterable, store tuples so the definition cannot be mutated.
        object.__setattr__(self, "states", tuple(self.states))
        object.__setattr__(self, "transitions", tuple(self.transitions))

        names = set(self.state_names)
        if self.initial_state.name not in names:
            raise StructuralIntegrityError(
                f"Initial state {self.initial_state.name} not in states of {self.entity_label}"
            )
        for t in self.transitions:
            if t.from_state.name not in names:
                raise StructuralIntegrityError(
                    f"Transition from_state {t.from_state.name} not in states of {self.entity_label}"
                )
            if t.to_state.name not in names:
                raise StructuralIntegrityError(
                    f"Transition to_state {t.to_state.name} not in states of {self.entity_label}"
                )

    @classmethod
    def from_members(
        cls,
        entity_label: str,
        states: Iterable[Enum],
        transitions: Iterable[Transition],
        initial_state: Enum,
    ) -> "StateMachineDefinition":
        """Construct a definition directly from enum members."""
        return cls(
            entity_label=entity_label,
            states=tuple(State.of(s) for s in states),
            transitions=tuple(transitions),
            initial_state=State.of(initial_state),
        )

    @property
    def state_names(self) -> List[str]:
        return [s.name for s in self.states]

    def has_state(self, state: Union[State, Enum, str]) -> bool:
        name = state if isinstance(state, str) else State.of(state).name
        return name in self.state_names

    def transitions_from(self, state: Union[State, Enum]) -> List[Transition]:
        """Transitions leaving ``state``, in declaration order."""
        name = State.of(state).name
        return [t for t in self.transitions if t.from_state.name == name]


@dataclass
class TransitionHistoryEntry:
    """
    Records one successful transition.

    Kept by each machine in a bounded history for auditing and debugging.
    """

    from_state: State
    to_state: State
    timestamp: float = field(default_factory=time.time)
    condition_name: Optional[str] = None
    side_effect_name: Optional[str] = None

    @property
    def is_self_transition(self) -> bool:
        return self.from_state == self.to_state

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a plain dictionary."""
        return {
            "from": self.from_state.name,
            "to": self.to_state.name,
            "timestamp": self.timestamp,
            "condition_name": self.condition_name,
            "side_effect_name": self.side_effect_name,
        }
