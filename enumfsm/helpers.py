"""
Helper utilities for building state machines.

Provides convenience functions and decorators that reduce boilerplate
when registering guards and side effects.
"""

import logging
from enum import Enum
from functools import wraps
from typing import Any, Dict, Optional

from enumfsm.registry import TransitionRegistry
from enumfsm.types import Condition, SideEffect

logger = logging.getLogger(__name__)


def build_registry(
    conditions: Optional[Dict[str, Condition]] = None,
    side_effects: Optional[Dict[str, SideEffect]] = None,
    registry: Optional[TransitionRegistry] = None,
) -> TransitionRegistry:
    """
    Build a registry from compact name → callable mappings.

    Args:
        conditions: Mapping of name → predicate(context).
        side_effects: Mapping of name → effect(context, from, to).
        registry: Existing registry to add to. A new one is created if None.

    Returns:
        The populated registry.

    Raises:
        TypeError: If any registered value is not callable.

    Example:
        registry = build_registry(
            conditions={"PaymentReceived": lambda ctx: ctx.paid},
            side_effects={"NotifyShipment": notify_shipment},
        )
    """
    registry = registry if registry is not None else TransitionRegistry()
    for name, predicate in (conditions or {}).items():
        if not callable(predicate):
            raise TypeError(f"Condition '{name}' is not callable: {predicate!r}")
        registry.register_condition(name, predicate)
    for name, effect in (side_effects or {}).items():
        if not callable(effect):
            raise TypeError(f"Side effect '{name}' is not callable: {effect!r}")
        registry.register_side_effect(name, effect)
    return registry


def log_side_effect(func):
    """
    Decorator that adds entry/exit logging to a side effect.

    Logs the transition at DEBUG level around the call. Exceptions are
    logged and re-raised.

    Usage:
        @log_side_effect
        def notify_shipment(ctx, from_state, to_state):
            ...
    """

    @wraps(func)
    def wrapper(context: Any, from_state: Enum, to_state: Enum) -> None:
        label = f"{func.__name__} {from_state.name} → {to_state.name}"
        logger.debug(f"{label}: Starting...")
        try:
            func(context, from_state, to_state)
        except Exception:
            logger.debug(f"{label}: Failed")
            raise
        logger.debug(f"{label}: Complete")

    return wrapper
