"""
FiniteStateMachineBuilder — fluent assembly of state machine definitions.

Features:
- Fluent, chainable configuration of initial state and transitions
- Guards and side effects given inline or referenced by registry name
- Endpoints of every transition are added to the state set automatically
- Projection to a name-only DefinitionDto and re-hydration from one

Usage:
    from enum import Enum
    from enumfsm import FiniteStateMachineBuilder, FiniteStateMachine, TransitionRegistry

    class Ticket(Enum):
        OPEN = "open"
        IN_PROGRESS = "in_progress"
        RESOLVED = "resolved"

    registry = TransitionRegistry()
    registry.register_condition("AgentAssigned", lambda ctx: ctx.agent_assigned)

    definition = (
        FiniteStateMachineBuilder.create("Ticket", Ticket)
        .with_initial_state(Ticket.OPEN)
        .with_registry(registry)
        .add_transition(Ticket.OPEN, Ticket.IN_PROGRESS)
            .when("AgentAssigned")
            .done()
        .add_transition(Ticket.IN_PROGRESS, Ticket.RESOLVED)
            .done()
        .build()
    )
    machine = FiniteStateMachine(definition)
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Type, Union

from enumfsm.exceptions import (
    InvalidConfiguration,
    MissingInitialState,
    UnknownCondition,
    UnknownSideEffect,
    UnknownStateName,
)
from enumfsm.registry import TransitionRegistry
from enumfsm.serialization import DefinitionDto, TransitionDto
from enumfsm.types import (
    BuilderPhase,
    Condition,
    SideEffect,
    State,
    StateMachineDefinition,
    Transition,
    always,
)

logger = logging.getLogger(__name__)


class TransitionBuilder:
    """
    Scoped sub-builder for a single ``(from, to)`` transition.

    Obtained from ``FiniteStateMachineBuilder.add_transition``. ``done()``
    appends the finished Transition to the parent and returns the parent.
    """

    def __init__(self, parent: "FiniteStateMachineBuilder", from_state: Enum, to_state: Enum):
        self._parent = parent
        self._from = from_state
        self._to = to_state
        self._condition: Condition = always
        self._side_effect: Optional[SideEffect] = None
        self._condition_name: Optional[str] = None
        self._side_effect_name: Optional[str] = None

    def when(self, condition: Union[Condition, str], name: Optional[str] = None) -> "TransitionBuilder":
        """
        Guard the transition.

        Args:
            condition: A predicate over the context, or the name of a
                       condition in the parent's registry.
            name: Registry name to record for an inline predicate.

        Raises:
            InvalidConfiguration: A name was given but no registry is set.
            UnknownCondition: The name is not registered.
        """
        if isinstance(condition, str):
            registry = self._parent._require_registry("condition", condition)
            predicate = registry.get_condition(condition)
            if predicate is None:
                raise UnknownCondition(condition)
            self._condition = predicate
            self._condition_name = condition
        else:
            self._condition = condition
            self._condition_name = name
        return self

    def with_side_effect(self, effect: Union[SideEffect, str], name: Optional[str] = None) -> "TransitionBuilder":
        """
        Attach a side effect, called as ``effect(context, from, to)``.

        Args:
            effect: A callable, or the name of a side effect in the
                    parent's registry.
            name: Registry name to record for an inline callable.

        Raises:
            InvalidConfiguration: A name was given but no registry is set.
            UnknownSideEffect: The name is not registered.
        """
        if isinstance(effect, str):
            registry = self._parent._require_registry("side effect", effect)
            fn = registry.get_side_effect(effect)
            if fn is None:
                raise UnknownSideEffect(effect)
            self._side_effect = fn
            self._side_effect_name = effect
        else:
            self._side_effect = effect
            self._side_effect_name = name
        return self

    def done(self) -> "FiniteStateMachineBuilder":
        """Finalise the transition and return control to the parent builder."""
        self._parent._append(
            Transition(
                from_state=State.of(self._from),
                to_state=State.of(self._to),
                condition=self._condition,
                side_effect=self._side_effect,
                condition_name=self._condition_name,
                side_effect_name=self._side_effect_name,
            )
        )
        return self._parent


class FiniteStateMachineBuilder:
    """
    Mutable accumulator that produces immutable StateMachineDefinitions.

    The builder is in ``CONFIGURING`` phase until ``build()`` succeeds,
    then ``BUILT``. Further configuration returns it to ``CONFIGURING``;
    each ``build()`` yields an independent snapshot.

    Args:
        entity_label: What kind of entity the machine governs.
        states_enum: The Enum class whose members are the states.
    """

    def __init__(self, entity_label: str, states_enum: Type[Enum]):
        if not (isinstance(states_enum, type) and issubclass(states_enum, Enum)):
            raise InvalidConfiguration(f"states_enum must be an Enum class, got {states_enum!r}")
        self._entity_label = entity_label
        self._states_enum = states_enum
        self._initial: Optional[Enum] = None
        self._registry: Optional[TransitionRegistry] = None
        # dict as an insertion-ordered set
        self._states: Dict[Enum, None] = {}
        self._transitions: List[Transition] = []
        self._phase = BuilderPhase.CONFIGURING

    @classmethod
    def create(cls, entity_label: str, states_enum: Type[Enum]) -> "FiniteStateMachineBuilder":
        return cls(entity_label, states_enum)

    @classmethod
    def from_serializable(
        cls,
        dto: DefinitionDto,
        states_enum: Type[Enum],
        registry: TransitionRegistry,
        strict: bool = False,
    ) -> "FiniteStateMachineBuilder":
        """Create a builder labelled from ``dto`` and load it. See ``load_from``."""
        return cls(dto.entity_label, states_enum).load_from(dto, registry, strict=strict)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def entity_label(self) -> str:
        return self._entity_label

    @property
    def states_enum(self) -> Type[Enum]:
        return self._states_enum

    @property
    def initial_state(self) -> Optional[Enum]:
        return self._initial

    @property
    def states(self) -> List[Enum]:
        return list(self._states)

    @property
    def phase(self) -> BuilderPhase:
        return self._phase

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def with_initial_state(self, state: Enum) -> "FiniteStateMachineBuilder":
        """Set the initial state and add it to the state set."""
        self._check_member(state)
        self._initial = state
        self._add_state(state)
        return self

    def with_registry(self, registry: TransitionRegistry) -> "FiniteStateMachineBuilder":
        """
        Set the registry used to resolve names passed to ``when`` / ``with_side_effect``.

        Raises:
            InvalidConfiguration: If ``registry`` is None.
        """
        if registry is None:
            raise InvalidConfiguration("registry must not be None")
        self._registry = registry
        self._touch()
        return self

    def add_transition(self, from_state: Enum, to_state: Enum) -> TransitionBuilder:
        """Add both endpoints to the state set and start a transition between them."""
        self._check_member(from_state)
        self._check_member(to_state)
        self._add_state(from_state)
        self._add_state(to_state)
        return TransitionBuilder(self, from_state, to_state)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def build(self) -> StateMachineDefinition:
        """
        Freeze the current configuration into a definition.

        Raises:
            MissingInitialState: If ``with_initial_state`` was never called.
        """
        if self._initial is None:
            raise MissingInitialState(f"Initial state not specified for {self._entity_label}")

        definition = StateMachineDefinition.from_members(
            entity_label=self._entity_label,
            states=self._states,
            transitions=self._transitions,
            initial_state=self._initial,
        )
        self._phase = BuilderPhase.BUILT
        return definition

    def to_serializable(self) -> DefinitionDto:
        """
        Project the builder into a name-only DefinitionDto.

        Guards and side effects are represented by their names only;
        unnamed ones are serialized as absent.

        Raises:
            MissingInitialState: If ``with_initial_state`` was never called.
        """
        if self._initial is None:
            raise MissingInitialState(f"Initial state must be defined for {self._entity_label}")

        return DefinitionDto(
            entity_label=self._entity_label,
            initial_state=self._initial.name,
            states=[s.name for s in self._states],
            transitions=[
                TransitionDto(
                    from_state=t.from_state.name,
                    to_state=t.to_state.name,
                    condition_name=t.condition_name,
                    side_effect_name=t.side_effect_name,
                )
                for t in self._transitions
            ],
        )

    def load_from(
        self,
        dto: DefinitionDto,
        registry: TransitionRegistry,
        strict: bool = False,
    ) -> "FiniteStateMachineBuilder":
        """
        Add the states and transitions described by ``dto`` to this builder.

        Condition and side-effect names missing from ``registry`` are
        replaced by an always-true guard and a no-op effect, and a warning
        is logged. The names themselves are kept so the definition
        serializes back unchanged. With ``strict=True`` a missing name
        raises instead.

        Raises:
            UnknownStateName: A state name is not a member of the state enum.
            UnknownCondition: ``strict`` and a condition name is unresolved.
            UnknownSideEffect: ``strict`` and a side-effect name is unresolved.
        """
        if registry is None:
            raise InvalidConfiguration("registry must not be None")

        # Parse and resolve everything first so a failure leaves the builder untouched.
        initial = self._parse_state(dto.initial_state)
        members = [initial] + [self._parse_state(name) for name in dto.states]
        transitions: List[Transition] = []

        for t in dto.transitions:
            from_state = self._parse_state(t.from_state)
            to_state = self._parse_state(t.to_state)
            members.extend((from_state, to_state))

            condition: Condition = always
            if t.condition_name is not None:
                resolved = registry.get_condition(t.condition_name)
                if resolved is not None:
                    condition = resolved
                elif strict:
                    raise UnknownCondition(t.condition_name)
                else:
                    logger.warning(
                        f"{self._entity_label}: condition '{t.condition_name}' not registered — "
                        f"{from_state.name} → {to_state.name} will always be eligible"
                    )

            side_effect: Optional[SideEffect] = None
            if t.side_effect_name is not None:
                side_effect = registry.get_side_effect(t.side_effect_name)
                if side_effect is None:
                    if strict:
                        raise UnknownSideEffect(t.side_effect_name)
                    logger.warning(
                        f"{self._entity_label}: side effect '{t.side_effect_name}' not registered — "
                        f"{from_state.name} → {to_state.name} will do nothing"
                    )

            transitions.append(
                Transition(
                    from_state=State.of(from_state),
                    to_state=State.of(to_state),
                    condition=condition,
                    side_effect=side_effect,
                    condition_name=t.condition_name,
                    side_effect_name=t.side_effect_name,
                )
            )

        self._initial = initial
        for member in members:
            self._add_state(member)
        for transition in transitions:
            self._append(transition)

        logger.debug(
            f"Loaded {self._entity_label}: {len(dto.states)} states, "
            f"{len(dto.transitions)} transitions"
        )
        return self

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _touch(self) -> None:
        self._phase = BuilderPhase.CONFIGURING

    def _add_state(self, state: Enum) -> None:
        self._states.setdefault(state, None)
        self._touch()

    def _append(self, transition: Transition) -> None:
        self._transitions.append(transition)
        self._touch()

    def _check_member(self, state: Enum) -> None:
        if not isinstance(state, self._states_enum):
            raise InvalidConfiguration(
                f"{state!r} is not a member of {self._states_enum.__name__}"
            )

    def _parse_state(self, name: str) -> Enum:
        try:
            return self._states_enum[name]
        except KeyError:
            raise UnknownStateName(
                f"'{name}' is not a member of {self._states_enum.__name__}"
            ) from None

    def _require_registry(self, kind: str, name: str) -> TransitionRegistry:
        if self._registry is None:
            raise InvalidConfiguration(
                f"Cannot resolve {kind} '{name}': no registry set, call with_registry() first"
            )
        return self._registry
