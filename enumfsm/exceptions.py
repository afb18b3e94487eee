"""
Error types raised by the state machine engine.

Configuration and decode errors are raised immediately and never recovered
internally. Errors raised by user guards or side effects are not wrapped;
they propagate to the caller unchanged.
"""


class FsmError(Exception):
    """Base class for all engine errors."""


class InvalidConfiguration(FsmError, ValueError):
    """The builder was used incorrectly."""


class MissingInitialState(InvalidConfiguration):
    """``build()`` or ``to_serializable()`` was called before an initial state was set."""


class UnknownCondition(InvalidConfiguration, KeyError):
    """A condition name could not be resolved against the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Condition '{name}' is not registered")

    def __str__(self) -> str:
        return self.args[0]


class UnknownSideEffect(InvalidConfiguration, KeyError):
    """A side-effect name could not be resolved against the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Side effect '{name}' is not registered")

    def __str__(self) -> str:
        return self.args[0]


class StructuralIntegrityError(FsmError, ValueError):
    """A definition references a state that is not part of its state set."""


class UnknownStateName(FsmError, ValueError):
    """A serialized state name does not match any member of the state enum."""


class MalformedDefinition(FsmError, ValueError):
    """A serialized definition does not have the expected shape."""


class NullContext(FsmError, TypeError):
    """A transition was evaluated without a context where one is required."""
