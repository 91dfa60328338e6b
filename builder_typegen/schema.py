"""
Builder.io model schema types.

Raw models arrive as loosely-typed JSON from the Admin API. The parsers here
are tolerant: malformed parts are dropped or defaulted instead of raising,
except for a model that is not a mapping at all.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

logger = logging.getLogger(__name__)

# System fields present on every content entry; never part of the "data" shape
BUILDER_BUILTIN_FIELDS = frozenset({
    "id",
    "name",
    "published",
    "createdDate",
    "lastUpdated",
    "createdBy",
    "lastUpdatedBy",
    "modelId",
    "testRatio",
    "screenshot",
    "variations",
    "rev",
})

# Hard stop for parsing nested subFields; well above any resolver ceiling
MAX_PARSE_DEPTH = 64


class TypeGenerationError(Exception):
    """Base error for type generation."""


class InvalidModelError(TypeGenerationError):
    """Raised when a model is not a mapping and cannot be interpreted at all."""


@dataclass
class Field:
    """A single attribute of a model schema."""
    name: str
    type: str = ""
    required: bool = False
    enum: Optional[List[Any]] = None
    sub_fields: List["Field"] = field(default_factory=list)
    model: Optional[str] = None
    model_id: Optional[str] = None
    helper_text: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], _depth: int = 0) -> "Field":
        """Parse a raw Builder.io field definition."""
        name = data.get("name")
        field_type = data.get("type")
        enum = data.get("enum")
        model = data.get("model")
        model_id = data.get("modelId")

        sub_fields = []
        raw_sub_fields = data.get("subFields")
        if isinstance(raw_sub_fields, (list, tuple)):
            if _depth >= MAX_PARSE_DEPTH:
                logger.warning(f"Dropping subFields of '{name}' nested deeper than {MAX_PARSE_DEPTH}")
            else:
                sub_fields = [
                    cls.from_dict(sub, _depth + 1)
                    for sub in raw_sub_fields
                    if isinstance(sub, Mapping)
                ]

        return cls(
            name=name if isinstance(name, str) else "",
            type=field_type if isinstance(field_type, str) else "",
            required=bool(data.get("required", False)),
            enum=list(enum) if isinstance(enum, (list, tuple)) else None,
            sub_fields=sub_fields,
            model=model if isinstance(model, str) and model else None,
            model_id=model_id if isinstance(model_id, str) and model_id else None,
            helper_text=data.get("helperText") if isinstance(data.get("helperText"), str) else None,
        )


@dataclass
class Model:
    """A named Builder.io model schema."""
    name: str
    fields: List[Field] = field(default_factory=list)
    id: Optional[str] = None
    kind: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Model":
        """
        Parse a raw model.

        A missing name becomes ``""`` and a non-list ``fields`` becomes ``[]``.

        Raises:
            InvalidModelError: ``data`` is not a mapping
        """
        if not isinstance(data, Mapping):
            raise InvalidModelError(f"Expected a model object, got {type(data).__name__}")

        name = data.get("name")
        if not isinstance(name, str):
            logger.warning(f"Model {data.get('id', '<unknown>')} has no usable name")
            name = ""

        raw_fields = data.get("fields")
        if not isinstance(raw_fields, (list, tuple)):
            if raw_fields is not None:
                logger.warning(f"Model '{name}' has malformed fields ({type(raw_fields).__name__}), treating as empty")
            raw_fields = []

        model_id = data.get("id")
        kind = data.get("kind")
        return cls(
            name=name,
            fields=[Field.from_dict(f) for f in raw_fields if isinstance(f, Mapping)],
            id=str(model_id) if model_id is not None else None,
            kind=kind if isinstance(kind, str) else None,
        )


class ModelIndex(Mapping):
    """
    Read-only model id -> model name table used to resolve references.

    Built once per generation batch from ``{"id": ..., "name": ...}`` entries.
    """

    def __init__(self, mapping: Optional[Mapping[str, str]] = None):
        self._mapping = MappingProxyType(dict(mapping or {}))

    @classmethod
    def from_entries(cls, entries: Optional[Iterable[Any]]) -> "ModelIndex":
        """Build an index from mappings, ``Model`` objects or ``(id, name)`` pairs, skipping incomplete ones."""
        mapping: Dict[str, str] = {}
        for entry in entries or []:
            if isinstance(entry, Mapping):
                model_id, name = entry.get("id"), entry.get("name")
            elif isinstance(entry, Model):
                model_id, name = entry.id, entry.name
            elif isinstance(entry, (list, tuple)) and len(entry) == 2:
                model_id, name = entry
            else:
                continue
            if model_id and name and isinstance(name, str):
                mapping[str(model_id)] = name
        return cls(mapping)

    def __getitem__(self, model_id: str) -> str:
        return self._mapping[model_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:
        return f"ModelIndex({dict(self._mapping)!r})"
