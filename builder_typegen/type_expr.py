"""
TypeScript type expressions.

Field types are resolved into these variants first and rendered to source
text afterwards. ``Dynamic`` marks every place where typing fidelity was
given up (``any``) and records why.
"""

import json
import re
from dataclasses import dataclass
from typing import Optional, Tuple

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def quote_literal(value: str) -> str:
    """Double-quoted TypeScript string literal with embedded quotes escaped."""
    return json.dumps(value, ensure_ascii=False)


def property_key(name: str) -> str:
    """Property name as written in a type literal, quoted when not an identifier."""
    if _IDENTIFIER_RE.fullmatch(name):
        return name
    return quote_literal(name)


class TypeExpr:
    """Base class for resolved type expressions."""

    def render(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Primitive(TypeExpr):
    name: str

    def render(self) -> str:
        return self.name


STRING = Primitive("string")
NUMBER = Primitive("number")
BOOLEAN = Primitive("boolean")


@dataclass(frozen=True)
class Dynamic(TypeExpr):
    """Untyped fallback, rendered as ``any``."""
    reason: str = ""

    def render(self) -> str:
        return "any"


@dataclass(frozen=True)
class LiteralUnion(TypeExpr):
    values: Tuple[str, ...]

    def render(self) -> str:
        return " | ".join(quote_literal(value) for value in self.values)


@dataclass(frozen=True)
class Member:
    name: str
    optional: bool
    type: TypeExpr

    def render(self) -> str:
        marker = "?" if self.optional else ""
        return f"{property_key(self.name)}{marker}: {self.type.render()}"


@dataclass(frozen=True)
class Record(TypeExpr):
    """Inline object type literal."""
    members: Tuple[Member, ...] = ()

    def render(self) -> str:
        return "{" + "; ".join(member.render() for member in self.members) + "}"


@dataclass(frozen=True)
class OpenRecord(TypeExpr):
    """Generic key-value object."""

    def render(self) -> str:
        return "Record<string, any>"


@dataclass(frozen=True)
class ArrayOf(TypeExpr):
    item: TypeExpr

    def render(self) -> str:
        return f"Array<{self.item.render()}>"


@dataclass(frozen=True)
class Reference(TypeExpr):
    """
    A Builder.io reference.

    ``target`` is the referenced model's content type name; ``None`` when the
    target model could not be resolved.
    """
    target: Optional[str] = None

    def render(self) -> str:
        if self.target:
            return f"BuilderReference<{self.target}>"
        return "BuilderReference"


def find_dynamic(expr: TypeExpr):
    """Yield every ``Dynamic`` node inside ``expr``."""
    if isinstance(expr, Dynamic):
        yield expr
    elif isinstance(expr, ArrayOf):
        yield from find_dynamic(expr.item)
    elif isinstance(expr, Record):
        for member in expr.members:
            yield from find_dynamic(member.type)
