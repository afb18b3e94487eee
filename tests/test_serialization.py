"""Tests for enumfsm.serialization and enumfsm.codecs."""

import json

import pytest
import yaml

from enumfsm.codecs import dump_definition, from_json, from_yaml, load_definition, to_json, to_yaml
from enumfsm.exceptions import MalformedDefinition
from enumfsm.serialization import DefinitionDto, TransitionDto


def _dto() -> DefinitionDto:
    return DefinitionDto(
        entity_label="Order",
        initial_state="Created",
        states=["Created", "Paid", "Cancelled"],
        transitions=[
            TransitionDto("Created", "Paid", condition_name="PaymentReceived"),
            TransitionDto("Created", "Cancelled", "CancelRequested", "NotifyCancel"),
            TransitionDto("Paid", "Cancelled"),
        ],
    )


# ── DTO dictionaries ───────────────────────────────────────────────────────────

class TestDtoDict:
    def test_to_dict_uses_wire_keys(self):
        d = _dto().to_dict()
        assert list(d) == ["entityLabel", "initialState", "states", "transitions"]
        assert d["transitions"][1] == {
            "from": "Created",
            "to": "Cancelled",
            "conditionName": "CancelRequested",
            "sideEffectName": "NotifyCancel",
        }

    def test_absent_names_omitted(self):
        assert _dto().to_dict()["transitions"][2] == {"from": "Paid", "to": "Cancelled"}

    def test_from_dict_restores_dto(self):
        assert DefinitionDto.from_dict(_dto().to_dict()) == _dto()

    def test_from_dict_accepts_explicit_nulls(self):
        t = TransitionDto.from_dict({"from": "A", "to": "B", "conditionName": None})
        assert t.condition_name is None

    def test_from_dict_defaults_empty_collections(self):
        dto = DefinitionDto.from_dict({"entityLabel": "X", "initialState": "A"})
        assert dto.states == []
        assert dto.transitions == []

    def test_missing_required_field(self):
        with pytest.raises(MalformedDefinition, match="initialState"):
            DefinitionDto.from_dict({"entityLabel": "X"})

    def test_wrong_field_type(self):
        with pytest.raises(MalformedDefinition, match="entityLabel"):
            DefinitionDto.from_dict({"entityLabel": 3, "initialState": "A"})

    def test_states_must_be_strings(self):
        with pytest.raises(MalformedDefinition, match="states"):
            DefinitionDto.from_dict({"entityLabel": "X", "initialState": "A", "states": ["A", 1]})

    def test_transition_must_be_mapping(self):
        with pytest.raises(MalformedDefinition, match="mapping"):
            DefinitionDto.from_dict(
                {"entityLabel": "X", "initialState": "A", "transitions": ["A->B"]}
            )

    def test_transition_missing_to(self):
        with pytest.raises(MalformedDefinition, match="'to'"):
            TransitionDto.from_dict({"from": "A"})

    def test_non_mapping_definition(self):
        with pytest.raises(MalformedDefinition):
            DefinitionDto.from_dict(["not", "a", "dict"])


# ── Codecs ─────────────────────────────────────────────────────────────────────

class TestCodecs:
    def test_json_round_trip(self):
        assert from_json(to_json(_dto())) == _dto()

    def test_yaml_round_trip(self):
        assert from_yaml(to_yaml(_dto())) == _dto()

    def test_json_and_yaml_carry_same_data(self):
        assert json.loads(to_json(_dto())) == yaml.safe_load(to_yaml(_dto()))

    def test_yaml_keeps_key_order(self):
        text = to_yaml(_dto())
        assert text.index("entityLabel") < text.index("initialState") < text.index("transitions")

    def test_invalid_json(self):
        with pytest.raises(MalformedDefinition, match="JSON"):
            from_json("{not json")

    def test_invalid_yaml(self):
        with pytest.raises(MalformedDefinition, match="YAML"):
            from_yaml("states: [unclosed")

    def test_empty_yaml_is_malformed(self):
        with pytest.raises(MalformedDefinition):
            from_yaml("")

    @pytest.mark.parametrize("text", ["[]", "0", "false"])
    def test_falsy_non_mapping_yaml_reports_mapping(self, text):
        with pytest.raises(MalformedDefinition, match="must be a mapping"):
            from_yaml(text)


# ── Files ──────────────────────────────────────────────────────────────────────

class TestFiles:
    @pytest.mark.parametrize("suffix", [".json", ".yaml", ".yml"])
    def test_dump_then_load(self, tmp_path, suffix):
        path = dump_definition(_dto(), tmp_path / f"order{suffix}")
        assert load_definition(path) == _dto()

    def test_load_accepts_str_path(self, tmp_path):
        path = tmp_path / "order.json"
        path.write_text(to_json(_dto()), encoding="utf-8")
        assert load_definition(str(path)) == _dto()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_definition(tmp_path / "nope.json")

    def test_unsupported_suffix_on_load(self, tmp_path):
        path = tmp_path / "order.toml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError, match="Unsupported"):
            load_definition(path)

    def test_unsupported_suffix_on_dump(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported"):
            dump_definition(_dto(), tmp_path / "order.txt")
