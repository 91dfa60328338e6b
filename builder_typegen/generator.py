"""
TypeScript interface generator for Builder.io models.

Converts a model schema into two coupled interfaces (the content entry and
its ``data`` payload), plus a barrel index re-exporting every generated
model. Generation is pure and synchronous; writing files is a separate step.
"""

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from .naming import to_interface_name, to_slug
from .schema import (
    BUILDER_BUILTIN_FIELDS,
    Field,
    InvalidModelError,
    Model,
    ModelIndex,
    TypeGenerationError,
)
from .type_expr import (
    ArrayOf,
    BOOLEAN,
    Dynamic,
    LiteralUnion,
    Member,
    NUMBER,
    OpenRecord,
    Record,
    Reference,
    STRING,
    TypeExpr,
    property_key,
)

logger = logging.getLogger(__name__)

__all__ = [
    "GeneratedInterface",
    "InvalidModelError",
    "TypeGenerationError",
    "TypeGenerator",
    "strip_timestamp",
]

DEFAULT_MAX_DEPTH = 10

# Content API representation of each Builder.io field type
SCALAR_TYPES: Dict[str, TypeExpr] = {
    "text": STRING,
    "longText": STRING,
    "richText": STRING,
    "html": STRING,
    "markdown": STRING,
    "number": NUMBER,
    "boolean": BOOLEAN,
    "date": STRING,  # ISO strings in content responses
    "datetime": STRING,
    "file": STRING,
    "image": STRING,
    "video": STRING,
    "select": STRING,
    "enum": STRING,
    "color": STRING,
    "url": STRING,
    "email": STRING,
    "phone": STRING,
    "code": Dynamic("code"),
    "blocks": Dynamic("blocks"),
}

TIMESTAMP_PREFIX = "// Generated on: "
TIMESTAMP_PLACEHOLDER = "<timestamp>"
_TIMESTAMP_RE = re.compile(r"^// Generated on: .*$", re.MULTILINE)

ModelIndexLike = Union[ModelIndex, Iterable[Any], None]


def strip_timestamp(text: str) -> str:
    """Replace generation timestamps so two outputs can be compared."""
    return _TIMESTAMP_RE.sub(TIMESTAMP_PREFIX + TIMESTAMP_PLACEHOLDER, text)


@dataclass(frozen=True)
class GeneratedInterface:
    """Generated source for one model."""
    interface_name: str
    source_text: str
    output_path: Path
    model_name: str
    model_id: Optional[str] = None
    generated_at: str = ""

    @property
    def content_type_name(self) -> str:
        return f"{self.interface_name}Content"

    @property
    def data_type_name(self) -> str:
        return f"{self.interface_name}Data"

    def to_dict(self) -> Dict[str, Any]:
        """Inventory record for this interface."""
        return {
            "modelId": self.model_id,
            "modelName": self.model_name,
            "interfaceName": self.interface_name,
            "filePath": str(self.output_path),
            "generatedAt": self.generated_at,
        }


class TypeGenerator:
    """Generates TypeScript interfaces for Builder.io content models."""

    def __init__(
        self,
        output_dir: Union[str, Path] = Path("src") / "types" / "generated",
        use_interface_prefix: bool = True,
        max_depth: int = DEFAULT_MAX_DEPTH,
        reference_import: str = "@/types",
        generated_import: str = "@/types/generated",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the generator.

        Args:
            output_dir: Directory generated files are written to
            use_interface_prefix: Prefix interface names with ``I``
            max_depth: Nesting depth beyond which fields resolve to ``any``
            reference_import: Module exporting ``BuilderReference``
            generated_import: Barrel module exporting the generated interfaces
            clock: Returns the generation time (UTC now by default)
        """
        self.output_dir = Path(output_dir)
        self.use_interface_prefix = use_interface_prefix
        self.max_depth = max_depth
        self.reference_import = reference_import
        self.generated_import = generated_import
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._model_index = ModelIndex()

    # Model index

    @property
    def model_index(self) -> ModelIndex:
        return self._model_index

    def set_model_index(self, entries: ModelIndexLike) -> None:
        """Replace the model id -> name table used for reference resolution."""
        self._model_index = self._coerce_index(entries)
        logger.debug(f"Model index set with {len(self._model_index)} entries")

    def clear_model_index(self) -> None:
        self._model_index = ModelIndex()

    def _coerce_index(self, entries: ModelIndexLike) -> ModelIndex:
        if isinstance(entries, ModelIndex):
            return entries
        return ModelIndex.from_entries(entries)

    def _active_index(self, model_index: ModelIndexLike) -> ModelIndex:
        if model_index is None:
            return self._model_index
        return self._coerce_index(model_index)

    # Naming

    def interface_name(self, model_name: str) -> str:
        return to_interface_name(model_name, self.use_interface_prefix)

    def content_type_name(self, model_name: str) -> str:
        return f"{self.interface_name(model_name)}Content"

    def output_path(self, model_name: str) -> Path:
        return self.output_dir / f"{to_slug(model_name)}.ts"

    # Field type resolution

    def resolve_field_type(self, field: Field, depth: int = 0, model_index: ModelIndexLike = None) -> TypeExpr:
        """
        Resolve a field to a type expression.

        Never raises: unknown types, malformed fields and nesting beyond
        ``max_depth`` all degrade to ``Dynamic``.
        """
        index = self._active_index(model_index)
        return self._resolve(field, depth, index)

    def _resolve(self, field: Field, depth: int, index: ModelIndex) -> TypeExpr:
        name = getattr(field, "name", "<unknown>")
        if depth > self.max_depth:
            logger.warning(f"Maximum recursion depth reached for field: {name}")
            return Dynamic("max depth exceeded")

        try:
            # Enum values win over the declared type
            if field.enum:
                values = self._enum_literals(field.enum)
                return LiteralUnion(values) if values else STRING

            if field.type == "list":
                if field.sub_fields:
                    return ArrayOf(Record(self._resolve_members(field.sub_fields, depth, index)))
                return ArrayOf(Dynamic("list without subFields"))

            if field.type == "object":
                if field.sub_fields:
                    return Record(self._resolve_members(field.sub_fields, depth, index))
                return OpenRecord()

            if field.type == "reference":
                target = self.resolve_reference_name(field, index)
                if target:
                    return Reference(self.content_type_name(target))
                return Reference()

            if field.type in SCALAR_TYPES:
                return SCALAR_TYPES[field.type]

            logger.warning(f"Unknown field type '{field.type}' for field: {name}")
            return Dynamic(f"unknown type {field.type!r}")
        except Exception as e:
            logger.warning(f"Error processing field {name}: {e}")
            return Dynamic("error")

    def _resolve_members(self, sub_fields: List[Field], depth: int, index: ModelIndex) -> tuple:
        members = {}
        for sub_field in sub_fields:
            if not isinstance(sub_field.name, str) or not sub_field.name:
                continue
            members[sub_field.name] = Member(
                name=sub_field.name,
                optional=not sub_field.required,
                type=self._resolve(sub_field, depth + 1, index),
            )
        return tuple(members.values())

    @staticmethod
    def _enum_literals(values: List[Any]) -> tuple:
        literals = []
        for value in values:
            if value is None or value == "":
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            # Strip one layer of stray quotes left over from hand-edited schemas
            cleaned = re.sub(r"^['\"]|['\"]$", "", str(value).strip())
            literals.append(cleaned)
        return tuple(literals)

    def resolve_reference_name(self, field: Field, model_index: ModelIndexLike = None) -> Optional[str]:
        """Target model name of a reference: id lookup first, then the named model."""
        index = self._active_index(model_index)
        if field.model_id and field.model_id in index:
            return index[field.model_id]
        if field.model:
            return field.model
        return None

    # Field filtering

    def filter_fields(self, fields: Any) -> List[Field]:
        """
        Custom fields for the data shape.

        Built-in fields are dropped and duplicates collapse to the last
        definition, kept at the position of the first one.
        """
        if not isinstance(fields, (list, tuple)):
            return []

        kept: Dict[str, Field] = {}
        for raw in fields:
            if isinstance(raw, Field):
                field = raw
            elif isinstance(raw, Mapping):
                field = Field.from_dict(raw)
            else:
                continue
            if not isinstance(field.name, str) or not field.name or field.name in BUILDER_BUILTIN_FIELDS:
                continue
            kept[field.name] = field
        return list(kept.values())

    # Reference collection

    def collect_references(self, fields: Any, model_index: ModelIndexLike = None) -> List[str]:
        """Distinct referenced model names, in first-seen order, including nested subfields."""
        index = self._active_index(model_index)
        found: Dict[str, None] = {}

        def visit(field: Field, depth: int):
            if depth > self.max_depth:
                return
            if field.type == "reference":
                target = self.resolve_reference_name(field, index)
                if target:
                    found.setdefault(target)
            for sub_field in field.sub_fields or []:
                visit(sub_field, depth + 1)

        if isinstance(fields, (list, tuple)):
            for raw in fields:
                if isinstance(raw, Mapping):
                    raw = Field.from_dict(raw)
                if isinstance(raw, Field):
                    visit(raw, 0)
        return list(found)

    # Emission

    def _timestamp(self) -> str:
        return self._clock().isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def generate_interface(self, model: Union[Model, Mapping[str, Any]], model_index: ModelIndexLike = None) -> GeneratedInterface:
        """
        Generate the TypeScript interfaces for one model.

        Args:
            model: ``Model`` or raw Builder.io model dictionary
            model_index: Id -> name table overriding the one set on the generator

        Returns:
            GeneratedInterface

        Raises:
            InvalidModelError: ``model`` is neither a ``Model`` nor a mapping
        """
        if not isinstance(model, Model):
            model = Model.from_dict(model)
        index = self._active_index(model_index)

        interface_name = self.interface_name(model.name)
        content_name = f"{interface_name}Content"
        data_name = f"{interface_name}Data"

        fields = self.filter_fields(model.fields)
        referenced = self.collect_references(fields, index)

        field_lines = []
        for field in fields:
            optional = "" if field.required else "?"
            try:
                type_text = self._resolve(field, 0, index).render()
                field_lines.append(f"  {property_key(field.name)}{optional}: {type_text};")
            except Exception as e:
                logger.warning(f"Error processing field {field.name} in model {model.name}: {e}")
                field_lines.append(f"  {property_key(field.name)}?: any; // Error processing field type")

        imports = [f"import type {{ BuilderReference }} from '{self.reference_import}';"]
        imported = []
        for target in referenced:
            name = self.content_type_name(target)
            if name != content_name and name not in imported:
                imported.append(name)
        if imported:
            imports.append(f"import type {{ {', '.join(imported)} }} from '{self.generated_import}';")

        generated_at = self._timestamp()
        # Comment text must stay on one line
        header_name = " ".join(str(model.name).split())
        import_block = "\n".join(imports)
        data_body = "\n".join(field_lines)
        data_block = f"{{\n{data_body}\n}}" if field_lines else "{\n}"
        content = f"""// Auto-generated TypeScript interfaces for {header_name} content
{TIMESTAMP_PREFIX}{generated_at}

{import_block}

// Content entry structure (full response from Content API)
export interface {content_name} {{
  id: string;
  name: string;
  published: 'published' | 'draft' | 'archived';
  createdDate: number;
  lastUpdated?: number;
  modelId: string;
  rev?: string;
  data: {data_name};
}}

// Data structure (nested under 'data' property in content)
export interface {data_name} {data_block}
"""

        return GeneratedInterface(
            interface_name=interface_name,
            source_text=content,
            output_path=self.output_path(model.name),
            model_name=model.name,
            model_id=model.id,
            generated_at=generated_at,
        )

    def generate_index(self, interfaces: Iterable[GeneratedInterface]) -> str:
        """Barrel file re-exporting every generated interface pair, in input order."""
        exports = "\n".join(
            f"export type {{ {iface.content_type_name}, {iface.data_type_name} }} "
            f"from './{Path(iface.output_path).stem}';"
            for iface in interfaces
        )

        return f"""// Auto-generated index file for Builder.io content interfaces
{TIMESTAMP_PREFIX}{self._timestamp()}

{exports}
"""

    def inventory(self, interfaces: Iterable[GeneratedInterface]) -> List[Dict[str, Any]]:
        return [iface.to_dict() for iface in interfaces]

    # Persistence

    def write_interface(self, generated: GeneratedInterface) -> Path:
        """Write one interface file, creating the output directory if needed."""
        path = Path(generated.output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(generated.source_text, encoding="utf-8")
        logger.info(f"Generated interface: {path}")
        return path

    def write_index(self, content: str) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        index_path = self.output_dir / "index.ts"
        index_path.write_text(content, encoding="utf-8")
        logger.info(f"Generated index file: {index_path}")
        return index_path

    def write_manifest(self, interfaces: Iterable[GeneratedInterface]) -> Path:
        """Write the generation inventory as ``manifest.json``."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        manifest_path = self.output_dir / "manifest.json"
        with open(manifest_path, "w", encoding="utf-8") as f:
            json.dump(self.inventory(interfaces), f, indent=2)
        logger.info(f"Generated manifest: {manifest_path}")
        return manifest_path

    def clean_generated_dir(self) -> int:
        """Delete generated ``.ts`` files. Returns the number removed."""
        if not self.output_dir.is_dir():
            logger.debug("Generated directory does not exist or is empty")
            return 0

        removed = 0
        for path in self.output_dir.glob("*.ts"):
            path.unlink()
            removed += 1
        logger.info(f"Cleaned generated directory ({removed} files)")
        return removed
