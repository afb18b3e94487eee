"""
Text encodings for DefinitionDto.

JSON and YAML are interchangeable: both carry the same wire shape produced
by ``DefinitionDto.to_dict``. The engine itself never imports this module.
"""

import json
from pathlib import Path
from typing import Union

import yaml

from enumfsm.exceptions import MalformedDefinition
from enumfsm.serialization import DefinitionDto

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}


def to_json(dto: DefinitionDto, indent: int = 2) -> str:
    return json.dumps(dto.to_dict(), indent=indent)


def from_json(text: str) -> DefinitionDto:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedDefinition(f"Invalid JSON definition: {exc}") from exc
    return DefinitionDto.from_dict(data)


def to_yaml(dto: DefinitionDto) -> str:
    return yaml.safe_dump(dto.to_dict(), sort_keys=False, default_flow_style=False)


def from_yaml(text: str) -> DefinitionDto:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise MalformedDefinition(f"Invalid YAML definition: {exc}") from exc
    return DefinitionDto.from_dict({} if data is None else data)


def _normalize_path(path: Union[Path, str]) -> Path:
    return path if isinstance(path, Path) else Path(path)


def load_definition(path: Union[Path, str]) -> DefinitionDto:
    """
    Read a DefinitionDto from a ``.json``, ``.yaml`` or ``.yml`` file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the suffix is not supported.
        MalformedDefinition: If the content is not a valid definition.
    """
    path = _normalize_path(path)
    if not path.exists():
        raise FileNotFoundError(f"Definition file not found at {path}")

    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix in YAML_SUFFIXES:
        return from_yaml(text)
    if suffix in JSON_SUFFIXES:
        return from_json(text)
    raise ValueError(f"Unsupported definition format: {suffix}")


def dump_definition(dto: DefinitionDto, path: Union[Path, str]) -> Path:
    """Write ``dto`` to ``path``, choosing the encoding from the suffix."""
    path = _normalize_path(path)
    suffix = path.suffix.lower()
    if suffix in YAML_SUFFIXES:
        text = to_yaml(dto)
    elif suffix in JSON_SUFFIXES:
        text = to_json(dto)
    else:
        raise ValueError(f"Unsupported definition format: {suffix}")
    path.write_text(text, encoding="utf-8")
    return path
