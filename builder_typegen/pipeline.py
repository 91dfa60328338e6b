"""
Batch type generation.

Fetches models from a model source, generates interfaces for each of them
and persists the results. A failure on one model never stops its siblings.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .generator import GeneratedInterface, TypeGenerator
from .schema import ModelIndex, TypeGenerationError

logger = logging.getLogger(__name__)


class ModelNotFoundError(TypeGenerationError):
    """Raised when a requested model does not exist in the space."""

    def __init__(self, model_name: str):
        super().__init__(f"Model '{model_name}' not found")
        self.model_name = model_name


@dataclass
class BatchResult:
    """Outcome of generating a batch of models."""
    interfaces: List[GeneratedInterface] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)
    index_path: Optional[Path] = None
    manifest_path: Optional[Path] = None

    @property
    def interface_names(self) -> List[str]:
        names = []
        for iface in self.interfaces:
            names.extend([iface.content_type_name, iface.data_type_name])
        return names

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_files": [str(iface.output_path) for iface in self.interfaces],
            "interface_count": len(self.interfaces),
            "interfaces": self.interface_names,
            "index_file": str(self.index_path) if self.index_path else None,
            "manifest_file": str(self.manifest_path) if self.manifest_path else None,
            "errors": self.errors,
        }


def generate_batch(
    models: Iterable[Any],
    generator: TypeGenerator,
    model_index: Optional[ModelIndex] = None,
    write: bool = True,
) -> BatchResult:
    """
    Generate interfaces for every model, isolating per-model failures.

    Args:
        models: Raw model dictionaries (or ``Model`` objects)
        generator: Generator to use
        model_index: Id -> name table; built from ``models`` when omitted
        write: Persist interface files, the index and the manifest
    """
    models = list(models)
    if model_index is None:
        model_index = ModelIndex.from_entries(models)

    result = BatchResult()
    for model in models:
        model_name = model.get("name", "<unnamed>") if isinstance(model, Mapping) else getattr(model, "name", repr(model))
        try:
            generated = generator.generate_interface(model, model_index=model_index)
            if write:
                generator.write_interface(generated)
            result.interfaces.append(generated)
            logger.info(f"   ✅ {model_name} → {generated.interface_name}")
        except Exception as e:
            logger.error(f"Error generating interface for model {model_name}: {e}")
            result.errors.append({"model": str(model_name), "error": str(e)})

    if write and result.interfaces:
        result.index_path = generator.write_index(generator.generate_index(result.interfaces))
        result.manifest_path = generator.write_manifest(result.interfaces)

    logger.info(f"Generated {len(result.interfaces)} TypeScript interfaces ({len(result.errors)} errors)")
    return result


async def generate_all_types(source, generator: TypeGenerator, clean: bool = True) -> BatchResult:
    """
    Fetch every model from ``source`` and generate its interfaces.

    Args:
        source: Object with an async ``list_models()`` (e.g. ``BuilderAdminClient``)
        generator: Generator to use
        clean: Remove previously generated files first
    """
    logger.info("🔄 Fetching all Builder.io models...")
    models = await source.list_models()
    logger.info(f"📋 Found {len(models)} models")

    if clean:
        await asyncio.to_thread(generator.clean_generated_dir)

    # File writes run off the event loop
    return await asyncio.to_thread(
        generate_batch, models, generator, model_index=ModelIndex.from_entries(models)
    )


async def generate_model_types(source, generator: TypeGenerator, model_name: str, write: bool = True) -> GeneratedInterface:
    """
    Generate the interfaces for a single model, looked up by name.

    Raises:
        ModelNotFoundError: No model called ``model_name``
    """
    model, entries = await asyncio.gather(
        source.get_model_by_name(model_name),
        source.list_model_ids(),
    )
    if not model:
        raise ModelNotFoundError(model_name)

    generated = generator.generate_interface(model, model_index=ModelIndex.from_entries(entries))
    if write:
        await asyncio.to_thread(generator.write_interface, generated)
    return generated
