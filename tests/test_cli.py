#!/usr/bin/env python3
"""
Tests for the command-line interface
"""

import json

import pytest
from unittest.mock import patch

from builder_typegen.cli import async_main, cli_overrides, create_parser, main
from builder_typegen.config import TypegenConfig


@pytest.fixture
def config(tmp_path, monkeypatch):
    for env_var in TypegenConfig.ENV_MAPPING:
        monkeypatch.delenv(env_var, raising=False)
    config = TypegenConfig(project_dir=tmp_path, user_dir=tmp_path / "user")
    config.load({"output": {"directory": str(tmp_path / "generated")}})
    return config


class TestParser:
    """Test argument parsing"""

    def test_generate_all(self):
        args = create_parser().parse_args(["generate"])
        assert args.command == "generate"
        assert args.model is None
        assert args.no_clean is False

    def test_generate_one_with_options(self):
        args = create_parser().parse_args(["generate", "blog-post", "--output-dir", "types", "--no-prefix", "--no-clean"])
        assert args.model == "blog-post"
        assert cli_overrides(args) == {"output": {"directory": "types", "interface_prefix": False}}

    def test_api_overrides(self):
        args = create_parser().parse_args(["--log-level", "DEBUG", "api", "--host", "0.0.0.0", "--port", "9000"])
        assert cli_overrides(args) == {"server": {"host": "0.0.0.0", "port": 9000, "log_level": "DEBUG"}}

    def test_no_overrides(self):
        assert cli_overrides(create_parser().parse_args(["config"])) == {}


class TestPreviewCommand:
    """Test rendering a schema file"""

    @pytest.mark.asyncio
    async def test_preview_model_file(self, tmp_path, config, sample_models, capsys):
        path = tmp_path / "author.json"
        path.write_text(json.dumps(sample_models[0]))

        args = create_parser().parse_args(["preview", str(path)])
        exit_code = await async_main(args, config)

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "export interface IAuthorData {" in out
        assert "  fullName: string;" in out

    @pytest.mark.asyncio
    async def test_preview_with_model_list(self, tmp_path, config, sample_models, capsys):
        path = tmp_path / "blog.json"
        path.write_text(json.dumps({"model": sample_models[1], "models": sample_models}))

        args = create_parser().parse_args(["preview", str(path)])
        exit_code = await async_main(args, config)

        assert exit_code == 0
        assert "BuilderReference<IAuthorContent>" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_preview_missing_file(self, tmp_path, config, capsys):
        args = create_parser().parse_args(["preview", str(tmp_path / "missing.json")])

        assert await async_main(args, config) == 1
        assert "Could not read" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_preview_invalid_model(self, tmp_path, config, capsys):
        path = tmp_path / "list.json"
        path.write_text(json.dumps(["author"]))

        args = create_parser().parse_args(["preview", str(path)])

        assert await async_main(args, config) == 1


class TestGenerateCommand:
    """Test the generate command"""

    @pytest.mark.asyncio
    async def test_without_credentials(self, config, capsys):
        args = create_parser().parse_args(["generate"])

        assert await async_main(args, config) == 1
        assert "BUILDER_PRIVATE_KEY" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_generate_all(self, config, model_source, capsys):
        args = create_parser().parse_args(["generate"])
        with patch.object(config, "create_model_source", return_value=model_source):
            exit_code = await async_main(args, config)

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "Successfully generated: 2 interfaces" in out

    @pytest.mark.asyncio
    async def test_generate_unknown_model(self, config, model_source, capsys):
        args = create_parser().parse_args(["generate", "missing"])
        with patch.object(config, "create_model_source", return_value=model_source):
            exit_code = await async_main(args, config)

        assert exit_code == 1
        assert "missing" in capsys.readouterr().out


class TestConfigCommand:
    """Test the config command"""

    @pytest.mark.asyncio
    async def test_keys_are_masked(self, config, capsys):
        config.load({"builder": {"private_key": "bpk-secret"}})
        args = create_parser().parse_args(["config"])

        assert await async_main(args, config) == 0
        out = capsys.readouterr().out
        assert "bpk-secret" not in out
        assert json.loads(out)["builder"]["private_key"] == "***"

    @pytest.mark.asyncio
    async def test_sources(self, config, capsys):
        args = create_parser().parse_args(["config", "--sources"])

        assert await async_main(args, config) == 0
        assert "server.port: 8000 (defaults)" in capsys.readouterr().out


class TestMain:
    """Test the entry point"""

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "builder-typegen" in capsys.readouterr().out
