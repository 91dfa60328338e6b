#!/usr/bin/env python3
"""
FastAPI router for TypeScript interface generation endpoints
"""

import logging

from fastapi import APIRouter, HTTPException, Query

from ..models.types import (
    GenerateAllResponse, GeneratedInterfaceResponse, PreviewRequest
)
from ..dependencies import get_generator, get_model_source
from ...config import MissingCredentialsError
from ...generator import GeneratedInterface
from ...model_source import BuilderAPIError
from ...pipeline import ModelNotFoundError, generate_all_types, generate_model_types
from ...schema import InvalidModelError

logger = logging.getLogger(__name__)

router = APIRouter()

def _interface_response(generated: GeneratedInterface) -> GeneratedInterfaceResponse:
    return GeneratedInterfaceResponse(
        model_name=generated.model_name,
        model_id=generated.model_id,
        interface_name=generated.interface_name,
        file_path=str(generated.output_path),
        generated_at=generated.generated_at,
        content=generated.source_text,
    )

def _model_source():
    try:
        return get_model_source()
    except MissingCredentialsError as e:
        raise HTTPException(status_code=503, detail=str(e))

def _upstream_error(e: BuilderAPIError) -> HTTPException:
    status = e.status if e.status >= 400 else 502
    return HTTPException(status_code=status, detail=e.message)

@router.post("/types", response_model=GenerateAllResponse)
async def generate_all_interfaces(
    clean: bool = Query(True, description="Remove previously generated files first")
):
    """Generate TypeScript interfaces for all models (one file per model plus an index)"""
    logger.info("Generating TypeScript interfaces for all models")
    source = _model_source()

    try:
        result = await generate_all_types(source, get_generator(), clean=clean)
    except BuilderAPIError as e:
        raise _upstream_error(e)

    return GenerateAllResponse(**result.to_dict())

@router.post("/types/preview", response_model=GeneratedInterfaceResponse)
async def preview_interface(request: PreviewRequest):
    """Generate an interface from a posted model schema without fetching or writing anything"""
    generator = get_generator()
    try:
        generated = generator.generate_interface(request.model, model_index=request.models)
    except InvalidModelError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return _interface_response(generated)

@router.post("/types/{model}", response_model=GeneratedInterfaceResponse)
async def generate_model_interface(model: str):
    """Generate the TypeScript interface for a specific model"""
    logger.info(f"Generating TypeScript interface for model: {model}")
    source = _model_source()

    try:
        generated = await generate_model_types(source, get_generator(), model)
    except ModelNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BuilderAPIError as e:
        raise _upstream_error(e)

    return _interface_response(generated)
