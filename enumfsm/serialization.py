"""
Serializable, name-only mirror of a state machine definition.

These DTOs carry no functions: guards and side effects appear only as their
registry names. Any structured encoding with string scalars, ordered lists
and optional fields can carry them (see ``enumfsm.codecs``).

Wire shape:
    {
        "entityLabel": "Order",
        "initialState": "Created",
        "states": ["Created", "Paid"],
        "transitions": [
            {"from": "Created", "to": "Paid", "conditionName": "PaymentReceived"}
        ]
    }
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from enumfsm.exceptions import MalformedDefinition


def _require_str(data: Dict[str, Any], key: str, where: str) -> str:
    if key not in data:
        raise MalformedDefinition(f"{where} missing required '{key}' field")
    value = data[key]
    if not isinstance(value, str):
        raise MalformedDefinition(
            f"{where} field '{key}' must be a string, got {type(value).__name__}"
        )
    return value


def _optional_str(data: Dict[str, Any], key: str, where: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise MalformedDefinition(
            f"{where} field '{key}' must be a string, got {type(value).__name__}"
        )
    return value


@dataclass
class TransitionDto:
    """One transition, by state and registry names."""

    from_state: str
    to_state: str
    condition_name: Optional[str] = None
    side_effect_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a plain dictionary. Absent names are omitted."""
        data: Dict[str, Any] = {"from": self.from_state, "to": self.to_state}
        if self.condition_name is not None:
            data["conditionName"] = self.condition_name
        if self.side_effect_name is not None:
            data["sideEffectName"] = self.side_effect_name
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransitionDto":
        """
        Build from a plain dictionary.

        Raises:
            MalformedDefinition: On a missing or mistyped field.
        """
        if not isinstance(data, dict):
            raise MalformedDefinition(
                f"Transition entry must be a mapping, got {type(data).__name__}"
            )
        return cls(
            from_state=_require_str(data, "from", "Transition"),
            to_state=_require_str(data, "to", "Transition"),
            condition_name=_optional_str(data, "conditionName", "Transition"),
            side_effect_name=_optional_str(data, "sideEffectName", "Transition"),
        )


@dataclass
class DefinitionDto:
    """A whole definition, by name. ``states`` and ``transitions`` keep their order."""

    entity_label: str
    initial_state: str
    states: List[str] = field(default_factory=list)
    transitions: List[TransitionDto] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a plain dictionary using the wire key names."""
        return {
            "entityLabel": self.entity_label,
            "initialState": self.initial_state,
            "states": list(self.states),
            "transitions": [t.to_dict() for t in self.transitions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DefinitionDto":
        """
        Build from a plain dictionary.

        State names are not checked here; they are resolved against the
        state enum when the DTO is loaded into a builder.

        Raises:
            MalformedDefinition: On a missing or mistyped field.
        """
        if not isinstance(data, dict):
            raise MalformedDefinition(
                f"Definition must be a mapping, got {type(data).__name__}"
            )

        states = data.get("states", [])
        if not isinstance(states, list) or not all(isinstance(s, str) for s in states):
            raise MalformedDefinition("Definition field 'states' must be a list of strings")

        transitions = data.get("transitions", [])
        if not isinstance(transitions, list):
            raise MalformedDefinition("Definition field 'transitions' must be a list")

        return cls(
            entity_label=_require_str(data, "entityLabel", "Definition"),
            initial_state=_require_str(data, "initialState", "Definition"),
            states=list(states),
            transitions=[TransitionDto.from_dict(t) for t in transitions],
        )
