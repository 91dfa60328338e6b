#!/usr/bin/env python3
"""
Builder.io Type Generation FastAPI Server

REST API for generating TypeScript interfaces from Builder.io model schemas.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .routers import types
from .dependencies import load_settings

API_VERSION = "1.0.0"

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    # Startup
    load_settings()
    yield

# Create FastAPI app with metadata
app = FastAPI(
    title="Builder.io Type Generation API",
    description="REST API for generating TypeScript interfaces from Builder.io models",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure as needed for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(types.router, prefix="/api/v1")

@app.get("/", response_model=dict)
async def root():
    """Root endpoint with API information"""
    return {
        "name": "Builder.io Type Generation API",
        "version": API_VERSION,
        "description": "REST API for generating TypeScript interfaces from Builder.io models",
        "docs": "/docs",
        "openapi": "/openapi.json"
    }

@app.get("/health", response_model=dict)
async def health_check():
    """Health check endpoint"""
    from .dependencies import get_settings
    settings = get_settings()

    return {
        "status": "healthy",
        "credentials_configured": bool(settings.get("builder.private_key")),
        "output_directory": settings.get("output.directory"),
        "api_version": "v1"
    }

if __name__ == "__main__":
    import uvicorn
    import sys

    print("🚀 Starting Builder.io Type Generation API server")

    if "--production" in sys.argv:
        uvicorn.run("builder_typegen.api.main:app", host="0.0.0.0", port=8000)
    else:
        # Development mode with auto-reload
        uvicorn.run("builder_typegen.api.main:app", host="0.0.0.0", port=8000, reload=True)
