#!/usr/bin/env python3
"""
Tests for batch generation
"""

import asyncio
import json

import pytest
from unittest.mock import patch

from builder_typegen.pipeline import (
    BatchResult, ModelNotFoundError, generate_all_types, generate_batch, generate_model_types
)


class TestGenerateBatch:
    """Test generating a list of models"""

    def test_one_bad_model_does_not_stop_the_batch(self, generator, sample_models):
        models = [sample_models[0], "not-a-model", sample_models[1]]

        result = generate_batch(models, generator)

        assert [iface.interface_name for iface in result.interfaces] == ["IAuthor", "IBlogPost"]
        assert len(result.errors) == 1
        assert "not-a-model" in result.errors[0]["model"]
        assert "Expected a model object" in result.errors[0]["error"]

    def test_writes_files_index_and_manifest(self, generator, sample_models):
        result = generate_batch(sample_models, generator)

        output = generator.output_dir
        assert (output / "author.ts").exists()
        assert (output / "blog-post.ts").exists()
        assert result.index_path == output / "index.ts"
        assert "export type { IBlogPostContent, IBlogPostData } from './blog-post';" in result.index_path.read_text()
        manifest = json.loads(result.manifest_path.read_text())
        assert [entry["modelId"] for entry in manifest] == ["m-author", "m-blog"]

    def test_references_resolved_across_the_batch(self, generator, sample_models):
        result = generate_batch(sample_models, generator, write=False)
        assert "BuilderReference<IAuthorContent>" in result.interfaces[1].source_text

    def test_without_writing(self, generator, sample_models):
        result = generate_batch(sample_models, generator, write=False)

        assert len(result.interfaces) == 2
        assert result.index_path is None
        assert not generator.output_dir.exists()

    def test_no_index_when_nothing_generated(self, generator):
        result = generate_batch([None, 3], generator)

        assert result.interfaces == []
        assert len(result.errors) == 2
        assert result.index_path is None

    def test_to_dict(self, generator, sample_models):
        data = generate_batch(sample_models, generator).to_dict()

        assert data["interface_count"] == 2
        assert data["interfaces"] == ["IAuthorContent", "IAuthorData", "IBlogPostContent", "IBlogPostData"]
        assert data["generated_files"][0].endswith("author.ts")
        assert data["index_file"].endswith("index.ts")
        assert data["errors"] == []

    def test_empty_result_to_dict(self):
        data = BatchResult().to_dict()
        assert data["index_file"] is None
        assert data["manifest_file"] is None


class TestGenerateAllTypes:
    """Test fetching and generating every model"""

    @pytest.mark.asyncio
    async def test_generate_all(self, model_source, generator):
        result = await generate_all_types(model_source, generator)

        assert result.interface_names[:2] == ["IAuthorContent", "IAuthorData"]
        assert (generator.output_dir / "index.ts").exists()

    @pytest.mark.asyncio
    async def test_clean_removes_stale_files(self, model_source, generator):
        generator.output_dir.mkdir(parents=True)
        stale = generator.output_dir / "removed-model.ts"
        stale.write_text("export interface Old {}")

        await generate_all_types(model_source, generator)

        assert not stale.exists()

    @pytest.mark.asyncio
    async def test_no_clean_keeps_stale_files(self, model_source, generator):
        generator.output_dir.mkdir(parents=True)
        stale = generator.output_dir / "removed-model.ts"
        stale.write_text("export interface Old {}")

        await generate_all_types(model_source, generator, clean=False)

        assert stale.exists()


class TestGenerateModelTypes:
    """Test generating a single model by name"""

    @pytest.mark.asyncio
    async def test_generate_one(self, model_source, generator):
        generated = await generate_model_types(model_source, generator, "blog-post")

        assert generated.interface_name == "IBlogPost"
        assert generated.output_path.exists()
        assert "BuilderReference<IAuthorContent>" in generated.source_text

    @pytest.mark.asyncio
    async def test_preview_does_not_write(self, model_source, generator):
        generated = await generate_model_types(model_source, generator, "author", write=False)
        assert not generated.output_path.exists()

    @pytest.mark.asyncio
    async def test_unknown_model(self, model_source, generator):
        with pytest.raises(ModelNotFoundError) as exc_info:
            await generate_model_types(model_source, generator, "missing")

        assert exc_info.value.model_name == "missing"
        assert "missing" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_generator_index_left_untouched(self, model_source, generator):
        await generate_model_types(model_source, generator, "blog-post", write=False)
        assert len(generator.model_index) == 0


class TestEventLoopOffloading:
    """Test file system work runs in worker threads"""

    @pytest.mark.asyncio
    async def test_generate_all_writes_in_threads(self, model_source, generator):
        with patch("builder_typegen.pipeline.asyncio.to_thread", wraps=asyncio.to_thread) as to_thread:
            result = await generate_all_types(model_source, generator)

        offloaded = [c.args[0] for c in to_thread.call_args_list]
        assert offloaded == [generator.clean_generated_dir, generate_batch]
        assert result.index_path.exists()

    @pytest.mark.asyncio
    async def test_generate_one_writes_in_thread(self, model_source, generator):
        with patch("builder_typegen.pipeline.asyncio.to_thread", wraps=asyncio.to_thread) as to_thread:
            generated = await generate_model_types(model_source, generator, "author")

        to_thread.assert_called_once_with(generator.write_interface, generated)
        assert generated.output_path.exists()

    @pytest.mark.asyncio
    async def test_preview_stays_on_loop(self, model_source, generator):
        with patch("builder_typegen.pipeline.asyncio.to_thread", wraps=asyncio.to_thread) as to_thread:
            await generate_model_types(model_source, generator, "author", write=False)

        to_thread.assert_not_called()
