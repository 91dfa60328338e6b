"""
Configuration management for Builder.io type generation.

Handles configuration from multiple sources:
1. Command-line arguments
2. Environment variables (a ``.env`` file is loaded first)
3. ~/.builder-typegen/config.json
4. Project-local .builder-typegen.json
5. Smart defaults
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, Optional, List
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = ".builder-typegen.json"
USER_CONFIG_DIR = ".builder-typegen"

# Nesting never resolves to `any` before this depth
MIN_MAX_DEPTH = 10


class MissingCredentialsError(Exception):
    """Raised when Builder.io credentials are required but not configured."""


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


class TypegenConfig:
    """Manages configuration for the type generator and its servers."""

    # Configuration priority (highest to lowest)
    CONFIG_SOURCES = [
        "cli",         # Command-line arguments
        "env",         # Environment variables
        "user",        # ~/.builder-typegen/config.json
        "project",     # .builder-typegen.json in current directory
        "defaults",    # Built-in defaults
    ]

    DEFAULTS = {
        "builder": {
            "api_key": None,
            "private_key": None,
            "admin_url": "https://cdn.builder.io/api/v2/admin",
            "timeout": 30,
        },
        "output": {
            "directory": "src/types/generated",
            "interface_prefix": True,
            "max_depth": 10,
            "reference_import": "@/types",
            "generated_import": "@/types/generated",
        },
        "server": {
            "host": "localhost",
            "port": 8000,
            "log_level": "INFO",
        },
    }

    # Environment variable -> (config path, converter)
    ENV_MAPPING = {
        "BUILDER_API_KEY": (["builder", "api_key"], str),
        "BUILDER_PRIVATE_KEY": (["builder", "private_key"], str),
        "BUILDER_ADMIN_URL": (["builder", "admin_url"], str),
        "BUILDER_TYPEGEN_OUTPUT_DIR": (["output", "directory"], str),
        "BUILDER_TYPEGEN_INTERFACE_PREFIX": (["output", "interface_prefix"], _parse_bool),
        "BUILDER_TYPEGEN_MAX_DEPTH": (["output", "max_depth"], int),
        "BUILDER_TYPEGEN_HOST": (["server", "host"], str),
        "BUILDER_TYPEGEN_PORT": (["server", "port"], int),
        "BUILDER_TYPEGEN_LOG_LEVEL": (["server", "log_level"], str),
    }

    def __init__(self, project_dir: Optional[Path] = None, user_dir: Optional[Path] = None, env_file: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            project_dir: Directory holding the project config (default: cwd)
            user_dir: Directory holding the user config (default: ~/.builder-typegen)
            env_file: ``.env`` file to load (default: ``.env`` in project_dir)
        """
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.user_dir = Path(user_dir) if user_dir else Path.home() / USER_CONFIG_DIR
        self.env_file = Path(env_file) if env_file else self.project_dir / ".env"
        self._config: Dict[str, Any] = {}
        self._sources: Dict[str, str] = {}  # Track which source each config came from

    def load(self, cli_args: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Load configuration from all sources.

        Args:
            cli_args: Command-line arguments override (nested like DEFAULTS)

        Returns:
            Merged configuration dictionary
        """
        self._config = self._deep_copy(self.DEFAULTS)
        self._sources = {}
        self._track_source(self._config, "defaults")

        project_config = self._load_json(self.project_dir / PROJECT_CONFIG_FILE, "project")
        if project_config:
            self._merge_config(project_config, "project")

        user_config = self._load_json(self.user_dir / "config.json", "user")
        if user_config:
            self._merge_config(user_config, "user")

        env_config = self._load_env_config()
        if env_config:
            self._merge_config(env_config, "env")

        # Apply CLI arguments last (highest priority)
        if cli_args:
            self._merge_config(cli_args, "cli")

        self._expand_paths()
        return self._config

    def _load_json(self, path: Path, label: str) -> Optional[Dict[str, Any]]:
        """Load a JSON config file, ignoring it when missing or malformed."""
        if not path.exists():
            return None
        try:
            with open(path) as f:
                config = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load {label} config: {e}")
            return None
        if not isinstance(config, dict):
            logger.warning(f"Ignoring {label} config {path}: expected a JSON object")
            return None
        logger.info(f"Loaded {label} config from {path}")
        return config

    def _load_env_config(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        if self.env_file.exists():
            load_dotenv(self.env_file, override=False)
            logger.debug(f"Loaded environment from {self.env_file}")

        config: Dict[str, Any] = {}
        for env_var, (config_path, convert) in self.ENV_MAPPING.items():
            value = os.environ.get(env_var)
            if value is None or value == "":
                continue
            try:
                self._set_nested(config, config_path, convert(value))
            except ValueError:
                logger.warning(f"Ignoring invalid value for {env_var}: {value!r}")
        return config

    def _merge_config(self, new_config: Dict[str, Any], source: str):
        """Merge new configuration with existing, tracking sources."""
        self._deep_merge(self._config, new_config, source)

    def _deep_merge(self, base: Dict[str, Any], update: Dict[str, Any], source: str, prefix: str = ""):
        """Deep merge update into base, tracking source by dotted path."""
        for key, value in update.items():
            path = f"{prefix}.{key}" if prefix else key
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value, source, path)
            else:
                base[key] = self._deep_copy(value)
                if isinstance(value, dict):
                    self._track_source(value, source, path)
                else:
                    self._sources[path] = source

    def _expand_paths(self):
        """Expand ~ and environment variables in the output directory."""
        output = self._config.get("output", {})
        directory = output.get("directory")
        if isinstance(directory, str):
            output["directory"] = os.path.expanduser(os.path.expandvars(directory))

    def _deep_copy(self, obj: Any) -> Any:
        """Deep copy a configuration object."""
        if isinstance(obj, dict):
            return {k: self._deep_copy(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._deep_copy(v) for v in obj]
        else:
            return obj

    def _set_nested(self, config: Dict[str, Any], path: List[str], value: Any):
        """Set a nested configuration value."""
        current = config
        for key in path[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]
        current[path[-1]] = value

    def _track_source(self, config: Dict[str, Any], source: str, prefix: str = ""):
        """Track the source of all configuration values."""
        for key, value in config.items():
            path = f"{prefix}.{key}" if prefix else key
            if isinstance(value, dict):
                self._track_source(value, source, path)
            else:
                self._sources[path] = source

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get a configuration value by path.

        Args:
            path: Dot-separated path (e.g., "output.directory")
            default: Default value if not found

        Returns:
            Configuration value
        """
        parts = path.split(".")
        current = self._config

        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default

        return current

    def get_source(self, path: str) -> Optional[str]:
        """Get the source of a configuration value."""
        return self._sources.get(path)

    def to_dict(self) -> Dict[str, Any]:
        """Get the full configuration as a dictionary."""
        return self._deep_copy(self._config)

    def generator_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``TypeGenerator`` from the ``output`` section."""
        max_depth = int(self.get("output.max_depth", MIN_MAX_DEPTH))
        if max_depth < MIN_MAX_DEPTH:
            logger.warning(f"output.max_depth {max_depth} is below {MIN_MAX_DEPTH}, using {MIN_MAX_DEPTH}")
            max_depth = MIN_MAX_DEPTH
        return {
            "output_dir": self.get("output.directory"),
            "use_interface_prefix": bool(self.get("output.interface_prefix", True)),
            "max_depth": max_depth,
            "reference_import": self.get("output.reference_import", "@/types"),
            "generated_import": self.get("output.generated_import", "@/types/generated"),
        }

    def create_generator(self):
        """Build a ``TypeGenerator`` from the loaded configuration."""
        from .generator import TypeGenerator
        return TypeGenerator(**self.generator_kwargs())

    def create_model_source(self):
        """
        Build a ``BuilderAdminClient`` from the loaded configuration.

        Raises:
            MissingCredentialsError: No private key is configured
        """
        from .model_source import BuilderAdminClient
        private_key = self.get("builder.private_key")
        if not private_key:
            raise MissingCredentialsError(
                "BUILDER_PRIVATE_KEY must be set to fetch models from Builder.io"
            )
        return BuilderAdminClient(
            private_key=private_key,
            admin_url=self.get("builder.admin_url", "https://cdn.builder.io/api/v2/admin"),
            timeout=float(self.get("builder.timeout", 30)),
        )
