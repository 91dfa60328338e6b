"""
Command-line interface for Builder.io type generation.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .config import MissingCredentialsError, TypegenConfig
from .model_source import BuilderAPIError
from .pipeline import ModelNotFoundError, generate_all_types, generate_model_types
from .schema import InvalidModelError

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO"):
    """Configure logging for the application."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="builder-typegen",
        description="Generate TypeScript interfaces from Builder.io model schemas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate interfaces for every model
  builder-typegen generate

  # Generate the interface for one model
  builder-typegen generate hvac-unit

  # Render a model schema stored in a JSON file
  builder-typegen preview model.json

  # Run the MCP server over stdio
  builder-typegen serve

  # Run the HTTP API
  builder-typegen api --port 8000
"""
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    # Global options
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set logging level (default: from configuration, INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate interfaces from the Builder.io space"
    )
    generate_parser.add_argument(
        "model",
        nargs="?",
        help="Only generate this model (default: all models)"
    )
    _add_output_options(generate_parser)
    generate_parser.add_argument(
        "--no-clean",
        action="store_true",
        help="Keep previously generated files"
    )

    # Preview command
    preview_parser = subparsers.add_parser(
        "preview",
        help="Print the interfaces for a model schema read from a JSON file"
    )
    preview_parser.add_argument(
        "file",
        help="JSON file holding a model, or {\"model\": ..., \"models\": [...]}"
    )
    _add_output_options(preview_parser)

    # Config command
    config_parser = subparsers.add_parser(
        "config",
        help="Show current configuration"
    )
    config_parser.add_argument(
        "--sources",
        action="store_true",
        help="Show configuration sources"
    )

    # Serve command
    subparsers.add_parser(
        "serve",
        help="Run the MCP server over stdio"
    )

    # API command
    api_parser = subparsers.add_parser(
        "api",
        help="Run the HTTP API server"
    )
    api_parser.add_argument("--host", help="Host to bind to (default: localhost)")
    api_parser.add_argument("--port", type=int, help="Port to bind to (default: 8000)")

    return parser


def _add_output_options(subparser: argparse.ArgumentParser):
    subparser.add_argument(
        "--output-dir",
        help="Directory for generated files (default: src/types/generated)"
    )
    subparser.add_argument(
        "--no-prefix",
        action="store_true",
        help="Do not prefix interface names with 'I'"
    )


def cli_overrides(args) -> dict:
    """Nested configuration overrides from parsed arguments."""
    overrides = {}
    if getattr(args, "output_dir", None):
        overrides.setdefault("output", {})["directory"] = args.output_dir
    if getattr(args, "no_prefix", False):
        overrides.setdefault("output", {})["interface_prefix"] = False
    if getattr(args, "host", None):
        overrides.setdefault("server", {})["host"] = args.host
    if getattr(args, "port", None):
        overrides.setdefault("server", {})["port"] = args.port
    if getattr(args, "log_level", None):
        overrides.setdefault("server", {})["log_level"] = args.log_level
    return overrides


async def cmd_generate(args, config: TypegenConfig):
    """Run the generate command."""
    generator = config.create_generator()
    try:
        source = config.create_model_source()
    except MissingCredentialsError as e:
        print(f"❌ {e}")
        print("   Copy .env.example to .env and fill in your Builder.io credentials")
        return 1

    try:
        if args.model:
            print(f"🔄 Generating TypeScript interface for model: {args.model}")
            generated = await generate_model_types(source, generator, args.model)
            print(f"✅ Generated interface for {args.model}:")
            print(f"   📁 {generated.output_path}")
            print(f"   🏷️  {generated.content_type_name}, {generated.data_type_name}")
            return 0

        result = await generate_all_types(source, generator, clean=not args.no_clean)
    except ModelNotFoundError as e:
        print(f"❌ {e}")
        return 1
    except BuilderAPIError as e:
        print(f"❌ Failed to fetch models: {e.message}")
        return 1

    print("\n📊 Generation Summary:")
    print(f"   ✅ Successfully generated: {len(result.interfaces)} interfaces")
    if result.errors:
        print(f"   ❌ Errors: {len(result.errors)}")
        for error in result.errors:
            print(f"      • {error['model']}: {error['error']}")
    print(f"   📁 Output directory: {generator.output_dir}")
    if result.index_path:
        print(f"   📄 Index file: {result.index_path}")

    return 1 if result.errors and not result.interfaces else 0


async def cmd_preview(args, config: TypegenConfig):
    """Run the preview command."""
    path = Path(args.file)
    try:
        with open(path) as f:
            payload = json.load(f)
    except (OSError, ValueError) as e:
        print(f"❌ Could not read {path}: {e}")
        return 1

    models = None
    if isinstance(payload, dict) and "model" in payload and "fields" not in payload:
        models = payload.get("models")
        payload = payload["model"]

    generator = config.create_generator()
    try:
        generated = generator.generate_interface(payload, model_index=models)
    except InvalidModelError as e:
        print(f"❌ {e}")
        return 1

    print(generated.source_text, end="")
    return 0


async def cmd_config(args, config: TypegenConfig):
    """Run the config command."""
    full_config = config.to_dict()

    if args.sources:
        print("Configuration with sources:")
        print("-" * 60)

        def show_with_sources(cfg, prefix=""):
            for key, value in cfg.items():
                path = f"{prefix}.{key}" if prefix else key
                if isinstance(value, dict):
                    print(f"{path}:")
                    show_with_sources(value, path)
                else:
                    source = config.get_source(path) or "unknown"
                    if key in ("api_key", "private_key") and value:
                        value = "***"
                    print(f"{path}: {value} ({source})")

        show_with_sources(full_config)
    else:
        builder = full_config.get("builder", {})
        for key in ("api_key", "private_key"):
            if builder.get(key):
                builder[key] = "***"
        print(json.dumps(full_config, indent=2))

    return 0


async def async_main(args, config: TypegenConfig):
    """Async main entry point."""
    commands = {
        "generate": cmd_generate,
        "preview": cmd_preview,
        "config": cmd_config,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        return await cmd_func(args, config)
    print(f"Unknown command: {args.command}")
    return 1


def main(argv=None):
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    config = TypegenConfig()
    config.load(cli_overrides(args))

    setup_logging(config.get("server.log_level", "INFO"))

    # Default to serve if no command specified
    command = args.command or "serve"

    if command == "serve":
        from .main import mcp
        mcp.run()
        sys.exit(0)

    if command == "api":
        import uvicorn
        uvicorn.run(
            "builder_typegen.api.main:app",
            host=config.get("server.host", "localhost"),
            port=int(config.get("server.port", 8000)),
        )
        sys.exit(0)

    try:
        exit_code = asyncio.run(async_main(args, config))
        sys.exit(exit_code or 0)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
