"""
FiniteStateMachine — runtime cursor over an immutable definition.

Features:
- First-match evaluation of guarded transitions in declaration order
- Side effects invoked before the cursor moves; a failing side effect
  leaves the machine where it was
- Fail-fast on a missing context
- Bounded transition history (deque) for auditing and introspection

Usage:
    machine = FiniteStateMachine(definition)
    if machine.try_transition_to(Ticket.IN_PROGRESS, ctx):
        ...
    machine.current  # Ticket.IN_PROGRESS

A definition may be shared by any number of machines. A single machine is
not safe for concurrent ``try_transition_to`` calls; serialize them.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from enum import Enum
from typing import Any, Dict, List, Optional

from enumfsm.exceptions import NullContext
from enumfsm.types import State, StateMachineDefinition, Transition, TransitionHistoryEntry

logger = logging.getLogger(__name__)


class BaseStateMachine(ABC):
    """Interface shared by all state machines."""

    @property
    @abstractmethod
    def current(self) -> Enum:
        """The state the machine is in."""

    @abstractmethod
    def can_transition_to(self, target: Enum, context: Any) -> bool:
        """Return True if a transition to ``target`` is currently allowed."""

    @abstractmethod
    def try_transition_to(self, target: Enum, context: Any) -> bool:
        """Attempt the transition to ``target``. Return True on success."""


class FiniteStateMachine(BaseStateMachine):
    """
    A running instance of a StateMachineDefinition.

    Args:
        definition: The immutable definition to run.
        require_context: If True (default), evaluating a transition with a
                         ``None`` context raises NullContext.
        history_size: Maximum number of history entries kept
                      (default: DEFAULT_HISTORY_SIZE).

    Attributes:
        DEFAULT_HISTORY_SIZE: Default bound on recorded transitions (100).
    """

    DEFAULT_HISTORY_SIZE: int = 100

    def __init__(
        self,
        definition: StateMachineDefinition,
        require_context: bool = True,
        history_size: Optional[int] = None,
    ):
        self._definition = definition
        # Enum members by state name, for definitions built from bare State names
        self._members: Dict[str, Enum] = {}
        for s in definition.states:
            if s.value is not None:
                self._members.setdefault(s.name, s.value)
        for t in definition.transitions:
            for s in (t.from_state, t.to_state):
                if s.value is not None:
                    self._members.setdefault(s.name, s.value)

        initial = definition.initial_state
        self._current: State = State.of(self._members.get(initial.name, initial))
        self._require_context = require_context

        # O(1) lookup by source state name, declaration order preserved per bucket
        self._transition_map: Dict[str, List[Transition]] = {}
        for t in definition.transitions:
            self._transition_map.setdefault(t.from_state.name, []).append(t)

        maxlen = self.DEFAULT_HISTORY_SIZE if history_size is None else history_size
        self._history: deque = deque(maxlen=maxlen)

        logger.info(
            f"{definition.entity_label} machine created — "
            f"{len(definition.states)} states, "
            f"{len(definition.transitions)} transitions, "
            f"starting at {self._current.name}"
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def current(self) -> Enum:
        """
        Enum member of the current state.

        None only for a definition built from bare ``State`` names, until
        the first transition supplies the member.
        """
        return self._current.value

    @property
    def current_state(self) -> State:
        return self._current

    @property
    def definition(self) -> StateMachineDefinition:
        return self._definition

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def can_transition_to(self, target: Enum, context: Any) -> bool:
        """
        Check whether a transition from the current state to ``target`` is eligible.

        Guards are evaluated in declaration order until one passes. Guard
        exceptions propagate.

        Raises:
            NullContext: If ``context`` is None and a context is required.
        """
        return self._find_transition(target, context) is not None

    def try_transition_to(self, target: Enum, context: Any) -> bool:
        """
        Take the first eligible transition from the current state to ``target``.

        The matched transition's side effect runs with
        ``(context, from, to)`` before the cursor moves, so an exception
        from it leaves the current state unchanged. Moving to the current
        state requires an explicit self-transition like any other target.

        Returns:
            True if the transition was taken, False if none was eligible.

        Raises:
            NullContext: If ``context`` is None and a context is required.
        """
        transition = self._find_transition(target, context)
        if transition is None:
            logger.debug(
                f"{self._definition.entity_label}: no eligible transition "
                f"{self._current.name} → {State.of(target).name}"
            )
            return False

        from_member = self._member_of(self._current, target)
        to_member = self._member_of(transition.to_state, target)
        transition.apply(context, from_member, to_member)

        self._history.append(
            TransitionHistoryEntry(
                from_state=transition.from_state,
                to_state=transition.to_state,
                condition_name=transition.condition_name,
                side_effect_name=transition.side_effect_name,
            )
        )
        logger.info(
            f"{self._definition.entity_label} transition: "
            f"{self._current.name} → {transition.to_state.name}"
        )
        self._current = State.of(to_member) if to_member is not None else transition.to_state
        return True

    def _member_of(self, state: State, target: Enum) -> Optional[Enum]:
        if state.value is not None:
            return state.value
        if state.name in self._members:
            return self._members[state.name]
        if isinstance(target, Enum):
            member = type(target).__members__.get(state.name)
            if member is not None:
                self._members[state.name] = member
            return member
        return None

    def _find_transition(self, target: Enum, context: Any) -> Optional[Transition]:
        if context is None and self._require_context:
            raise NullContext(
                f"{self._definition.entity_label}: context is required to evaluate transitions"
            )
        target_name = State.of(target).name
        for transition in self._transition_map.get(self._current.name, []):
            if transition.to_state.name != target_name:
                continue
            if transition.is_eligible(context):
                return transition
        return None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_history(self, last_n: Optional[int] = None) -> List[TransitionHistoryEntry]:
        """
        Return recorded transitions, oldest first.

        Args:
            last_n: If provided, return only the last N entries.
        """
        history = list(self._history)
        if last_n is None:
            return history
        return history[-last_n:] if last_n > 0 else []

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"entity_label={self._definition.entity_label!r}, current={self._current.name})"
        )
