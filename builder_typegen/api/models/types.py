#!/usr/bin/env python3
"""
Pydantic models for type generation endpoints
"""

from typing import Dict, List, Optional, Any
from pydantic import BaseModel, ConfigDict, Field

class GenerationError(BaseModel):
    """A model that failed to generate"""
    model: str = Field(..., description="Model name")
    error: str = Field(..., description="Error message")

class GenerateAllResponse(BaseModel):
    """Response for generating interfaces for every model"""
    generated_files: List[str] = Field(default_factory=list, description="Paths of generated interface files")
    interface_count: int = Field(0, description="Number of models generated")
    interfaces: List[str] = Field(default_factory=list, description="Generated interface names")
    index_file: Optional[str] = Field(None, description="Path of the barrel index file")
    manifest_file: Optional[str] = Field(None, description="Path of the generation manifest")
    errors: List[GenerationError] = Field(default_factory=list, description="Models that failed to generate")

class GeneratedInterfaceResponse(BaseModel):
    """Response for a single generated model"""
    model_config = ConfigDict(protected_namespaces=())

    model_name: str = Field(..., description="Raw Builder.io model name")
    model_id: Optional[str] = Field(None, description="Builder.io model id")
    interface_name: str = Field(..., description="Normalized interface name")
    file_path: str = Field(..., description="Output path of the interface file")
    generated_at: str = Field(..., description="Generation timestamp")
    content: str = Field(..., description="Generated TypeScript source")

class PreviewRequest(BaseModel):
    """Request for generating an interface from a posted schema"""
    model: Any = Field(..., description="Builder.io model object: {id, name, fields[]}")
    models: Optional[List[Dict[str, Any]]] = Field(None, description="Model {id, name} entries used to resolve references")
