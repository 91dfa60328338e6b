"""
Builder.io TypeScript interface generator.

This package converts Builder.io model schemas into TypeScript interfaces
and exposes the generator over a CLI, an HTTP API and an MCP server.
"""

__version__ = "0.1.0"

from .generator import GeneratedInterface, TypeGenerator, strip_timestamp
from .naming import to_interface_name, to_slug
from .schema import Field, InvalidModelError, Model, ModelIndex, TypeGenerationError

__all__ = [
    "Field",
    "GeneratedInterface",
    "InvalidModelError",
    "Model",
    "ModelIndex",
    "TypeGenerationError",
    "TypeGenerator",
    "strip_timestamp",
    "to_interface_name",
    "to_slug",
    "__version__",
]
