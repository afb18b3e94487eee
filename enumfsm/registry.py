"""
TransitionRegistry — named guards and side effects.

Transitions can reference a registered guard or side effect by name, which
is what allows a definition to be persisted as plain data and re-hydrated
later with identical behaviour.

Usage:
    registry = TransitionRegistry()
    registry.register_condition("PaymentReceived", lambda ctx: ctx.paid)
    registry.register_side_effect("NotifyShipment", lambda ctx, frm, to: notify(ctx))
"""

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from enumfsm.types import Condition, SideEffect

logger = logging.getLogger(__name__)


class TransitionRegistry:
    """
    Maps name strings to guard predicates and to side-effect functions.

    Registration overwrites silently. Not safe for registration concurrent
    with lookups; read-only use after setup needs no locking.
    """

    def __init__(self):
        self._conditions: Dict[str, Condition] = {}
        self._side_effects: Dict[str, SideEffect] = {}

    def register_condition(self, name: str, predicate: Condition) -> None:
        """Register a named guard. Overwrites if already registered."""
        if name in self._conditions:
            logger.debug(f"Overwriting condition '{name}'")
        self._conditions[name] = predicate

    def register_side_effect(self, name: str, effect: SideEffect) -> None:
        """Register a named side effect. Overwrites if already registered."""
        if name in self._side_effects:
            logger.debug(f"Overwriting side effect '{name}'")
        self._side_effects[name] = effect

    @property
    def conditions(self) -> Mapping[str, Condition]:
        """Read-only view of registered guards."""
        return MappingProxyType(self._conditions)

    @property
    def side_effects(self) -> Mapping[str, SideEffect]:
        """Read-only view of registered side effects."""
        return MappingProxyType(self._side_effects)

    def get_condition(self, name: str) -> Optional[Condition]:
        return self._conditions.get(name)

    def get_side_effect(self, name: str) -> Optional[SideEffect]:
        return self._side_effects.get(name)

    def has_condition(self, name: str) -> bool:
        return name in self._conditions

    def has_side_effect(self, name: str) -> bool:
        return name in self._side_effects

    def condition_names(self) -> List[str]:
        return list(self._conditions)

    def side_effect_names(self) -> List[str]:
        return list(self._side_effects)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"conditions={self.condition_names()}, "
            f"side_effects={self.side_effect_names()})"
        )
