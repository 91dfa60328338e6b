#!/usr/bin/env python3
"""
Pytest configuration and fixtures for builder-typegen tests
"""

from datetime import datetime, timezone

import pytest
from httpx import AsyncClient, ASGITransport

from builder_typegen.api.main import app
from builder_typegen.generator import TypeGenerator

FIXED_TIME = datetime(2025, 6, 13, 11, 1, 54, 232000, tzinfo=timezone.utc)


@pytest.fixture
async def client():
    """Create async test client"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def generator(tmp_path):
    """Generator writing into a temporary directory with a fixed clock"""
    return TypeGenerator(output_dir=tmp_path / "generated", clock=lambda: FIXED_TIME)


@pytest.fixture
def sample_models():
    """Raw models as returned by the Admin API"""
    return [
        {
            "id": "m-author",
            "name": "author",
            "kind": "data",
            "fields": [
                {"name": "fullName", "type": "text", "required": True},
                {"name": "bio", "type": "longText"},
            ],
        },
        {
            "id": "m-blog",
            "name": "blog-post",
            "kind": "data",
            "fields": [
                {"name": "id", "type": "text"},
                {"name": "title", "type": "text", "required": True},
                {"name": "author", "type": "reference", "modelId": "m-author"},
                {"name": "status", "type": "text", "enum": ["draft", "live"]},
                {
                    "name": "sections",
                    "type": "list",
                    "subFields": [
                        {"name": "heading", "type": "text", "required": True},
                        {"name": "views", "type": "number"},
                    ],
                },
            ],
        },
    ]


class FakeModelSource:
    """In-memory stand-in for BuilderAdminClient"""

    def __init__(self, models):
        self.models = models

    async def list_models(self):
        return self.models

    async def list_model_ids(self):
        return [{"id": m.get("id"), "name": m.get("name")} for m in self.models]

    async def get_model_by_name(self, name):
        for model in self.models:
            if model.get("name") == name:
                return model
        return None


@pytest.fixture
def model_source(sample_models):
    return FakeModelSource(sample_models)


@pytest.fixture
def make_source():
    """Factory for model sources over arbitrary models"""
    return FakeModelSource
