#!/usr/bin/env python3
"""
Builder.io Type Generation MCP server entry point.

This file provides the direct MCP server interface that can be called
by Claude Desktop via stdio without any CLI arguments.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from .config import MissingCredentialsError, TypegenConfig
from .model_source import BuilderAPIError
from .pipeline import ModelNotFoundError, generate_all_types, generate_model_types
from .schema import InvalidModelError

logger = logging.getLogger(__name__)

_settings: Optional[TypegenConfig] = None

def get_settings() -> TypegenConfig:
    """Load configuration once per process"""
    global _settings
    if _settings is None:
        _settings = TypegenConfig()
        _settings.load()
    return _settings

mcp = FastMCP(
    name="builder-typegen",
    instructions="""
Builder.io TypeScript interface generator.

Generates a `<Name>Content` / `<Name>Data` interface pair for each Builder.io
model, resolving references between models, plus a barrel index file.

Tools:
• generate_types() - Generate and write interfaces for every model
• generate_types_for_model(model) - Generate and write one model's interfaces
• preview_interface(model, models) - Render interfaces for a posted schema without writing
"""
)

@mcp.tool()
async def generate_types(clean: bool = True) -> Dict[str, Any]:
    """
    Generate TypeScript interfaces for all models and write them to files

    Args:
        clean: Remove previously generated files first (default: True)

    Returns:
        Generated files, interface names and per-model errors
    """
    logger.info("Generating TypeScript interfaces for all models")
    settings = get_settings()
    try:
        result = await generate_all_types(
            settings.create_model_source(), settings.create_generator(), clean=clean
        )
    except (MissingCredentialsError, BuilderAPIError) as e:
        logger.error(f"❌ Type generation failed: {e}")
        return {"status": "error", "message": str(e)}

    return {"status": "success", **result.to_dict()}

@mcp.tool()
async def generate_types_for_model(model: str) -> Dict[str, Any]:
    """
    Generate the TypeScript interface for a specific model and write it to a file

    Args:
        model: Model name

    Returns:
        Interface name, file path and generated source
    """
    if not model:
        return {"status": "error", "message": "Model name is required"}

    logger.info(f"Generating TypeScript interface for model: {model}")
    settings = get_settings()
    try:
        generated = await generate_model_types(
            settings.create_model_source(), settings.create_generator(), model
        )
    except (MissingCredentialsError, BuilderAPIError, ModelNotFoundError) as e:
        logger.error(f"❌ Failed to generate types for model {model}: {e}")
        return {"status": "error", "message": str(e)}

    return {
        "status": "success",
        "interfaceName": generated.interface_name,
        "filePath": str(generated.output_path),
        "content": generated.source_text,
    }

@mcp.tool()
def preview_interface(model: Dict[str, Any], models: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """
    Render the TypeScript interfaces for a model schema without fetching or writing anything

    Args:
        model: Builder.io model object with name and fields
        models: Optional {id, name} entries used to resolve reference fields

    Returns:
        Interface name, target file path and generated source
    """
    generator = get_settings().create_generator()
    try:
        generated = generator.generate_interface(model, model_index=models)
    except InvalidModelError as e:
        return {"status": "error", "message": str(e)}

    return {
        "status": "success",
        "interfaceName": generated.interface_name,
        "filePath": str(generated.output_path),
        "content": generated.source_text,
    }

@mcp.resource("typegen://config")
def get_configuration() -> str:
    """Current generator configuration with credentials masked"""
    config = get_settings().to_dict()
    builder = config.get("builder", {})
    for key in ("api_key", "private_key"):
        if builder.get(key):
            builder[key] = "***"
    return json.dumps(config, indent=2)

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    logger.info("🚀 Starting FastMCP server...")
    mcp.run()
