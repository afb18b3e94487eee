"""
enum-fsm
~~~~~~~~

Declarative finite state machines over Python enums, with named guards and
side effects that survive a round trip through plain data.

Quick start:
    from enumfsm import FiniteStateMachineBuilder, FiniteStateMachine
    from enumfsm import TransitionRegistry, DefinitionDto
"""

from enumfsm.builder import FiniteStateMachineBuilder, TransitionBuilder
from enumfsm.exceptions import (
    FsmError,
    InvalidConfiguration,
    MalformedDefinition,
    MissingInitialState,
    NullContext,
    StructuralIntegrityError,
    UnknownCondition,
    UnknownSideEffect,
    UnknownStateName,
)
from enumfsm.helpers import build_registry, log_side_effect
from enumfsm.machine import BaseStateMachine, FiniteStateMachine
from enumfsm.registry import TransitionRegistry
from enumfsm.serialization import DefinitionDto, TransitionDto
from enumfsm.types import (
    BuilderPhase,
    State,
    StateMachineDefinition,
    Transition,
    TransitionHistoryEntry,
    always,
)

__all__ = [
    "FiniteStateMachineBuilder",
    "TransitionBuilder",
    "FiniteStateMachine",
    "BaseStateMachine",
    "StateMachineDefinition",
    "State",
    "Transition",
    "TransitionHistoryEntry",
    "BuilderPhase",
    "TransitionRegistry",
    "DefinitionDto",
    "TransitionDto",
    "always",
    "build_registry",
    "log_side_effect",
    "FsmError",
    "InvalidConfiguration",
    "MissingInitialState",
    "UnknownCondition",
    "UnknownSideEffect",
    "UnknownStateName",
    "StructuralIntegrityError",
    "MalformedDefinition",
    "NullContext",
]
