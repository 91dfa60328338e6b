#!/usr/bin/env python3
"""
FastAPI dependencies for the type generation API
"""

from typing import Any, Dict, Optional

from ..config import TypegenConfig
from ..generator import TypeGenerator
from ..model_source import BuilderAdminClient

# Global settings, loaded at startup
_settings: Optional[TypegenConfig] = None

def load_settings(cli_args: Optional[Dict[str, Any]] = None) -> TypegenConfig:
    """Load configuration from all sources"""
    global _settings

    settings = TypegenConfig()
    settings.load(cli_args)
    _settings = settings
    return settings

def get_settings() -> TypegenConfig:
    """Get the loaded configuration, loading it on first use"""
    if _settings is None:
        return load_settings()
    return _settings

def get_generator() -> TypeGenerator:
    """Create a generator for the configured output directory"""
    return get_settings().create_generator()

def get_model_source() -> BuilderAdminClient:
    """Create an Admin API client (raises MissingCredentialsError without a private key)"""
    return get_settings().create_model_source()
