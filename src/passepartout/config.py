"""Passepartout configuration.

Configuration is YAML-based and optional; every value has a default.
Supports environment variable substitution (${VAR}) in string values.

Configuration file discovery (in priority order):
1. Explicit path passed to load_config
2. ./.passepartout/config.yaml
3. ./passepartout.yaml

Example:
    templates:
      root: "templates"
      common_dir: "partials"
    environment:
      autoescape: true
      trim_blocks: true
    cache: true
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, select_autoescape

from passepartout.exceptions import ConfigError
from passepartout.renderer import Passepartout, load_from
from passepartout.store import DirectoryStore

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}")


@dataclass
class TemplatesConfig:
    """Where templates are found.

    Attributes:
        root: Directory holding the templates; names are relative to it
        common_dir: Folder of partials shared by every page (None to disable)
    """

    root: str = "templates"
    common_dir: str | None = None

    def __post_init__(self) -> None:
        if not self.root:
            raise ConfigError("templates.root must not be empty")


@dataclass
class EnvironmentConfig:
    """Options for the shared Jinja2 environment.

    Attributes:
        autoescape: Escape output of .html/.xml templates
        trim_blocks: Remove the first newline after a block tag
        lstrip_blocks: Strip whitespace before a block tag
        keep_trailing_newline: Keep the final newline of a template
    """

    autoescape: bool = False
    trim_blocks: bool = False
    lstrip_blocks: bool = False
    keep_trailing_newline: bool = False

    def build(self) -> Environment:
        """Create the base environment described by this config."""
        return Environment(
            autoescape=select_autoescape(["html", "xml"]) if self.autoescape else False,
            trim_blocks=self.trim_blocks,
            lstrip_blocks=self.lstrip_blocks,
            keep_trailing_newline=self.keep_trailing_newline,
        )


@dataclass
class PassepartoutConfig:
    """Top-level configuration.

    Attributes:
        templates: Template locations
        environment: Jinja2 environment options
        cache: Keep compiled units between renders
    """

    templates: TemplatesConfig = field(default_factory=TemplatesConfig)
    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)
    cache: bool = True

    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


def substitute_env_vars(value: Any) -> Any:
    """Substitute ${VAR} references with environment variables.

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted

    Raises:
        ConfigError: If a referenced variable is not set
    """
    if isinstance(value, str):

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ConfigError(f"Environment variable not set: {var_name}")
            return env_value

        return _ENV_VAR_RE.sub(replace_var, value)

    if isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    if isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find a configuration file in the standard locations.

    Args:
        start_path: Directory to search (defaults to cwd)

    Returns:
        Path to the config file if found, None otherwise
    """
    start_path = (start_path or Path.cwd()).resolve()

    for candidate in (
        start_path / ".passepartout" / "config.yaml",
        start_path / "passepartout.yaml",
    ):
        if candidate.exists():
            return candidate

    return None


def load_config_from_dict(data: dict[str, Any]) -> PassepartoutConfig:
    """Build a configuration from a dictionary.

    Unknown keys are ignored.

    Raises:
        ConfigError: If a section is not a mapping
    """
    data = substitute_env_vars(data)
    config = PassepartoutConfig()

    for section in ("templates", "environment"):
        if section in data and not isinstance(data[section], dict):
            raise ConfigError(f"'{section}' must be a mapping")

    if "templates" in data:
        templates_data = data["templates"]
        config.templates = TemplatesConfig(
            root=str(templates_data.get("root", config.templates.root)),
            common_dir=templates_data.get("common_dir"),
        )

    if "environment" in data:
        env_data = data["environment"]
        config.environment = EnvironmentConfig(
            autoescape=bool(env_data.get("autoescape", False)),
            trim_blocks=bool(env_data.get("trim_blocks", False)),
            lstrip_blocks=bool(env_data.get("lstrip_blocks", False)),
            keep_trailing_newline=bool(env_data.get("keep_trailing_newline", False)),
        )

    config.cache = bool(data.get("cache", True))

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> PassepartoutConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for a config file if not specified

    Returns:
        PassepartoutConfig (defaults when no file is found)

    Raises:
        FileNotFoundError: If config_path is given but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path: Path | None = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is None:
        return PassepartoutConfig()

    with open(found_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {found_path}")

    config = load_config_from_dict(data)
    config._config_path = found_path
    return config


def load_from_config(
    config: PassepartoutConfig,
    base: Environment | None = None,
) -> Passepartout:
    """Create a Passepartout from configuration.

    A relative templates root is resolved against the directory of the
    config file when one was loaded.

    Args:
        config: Loaded configuration
        base: Environment to use instead of one built from config.environment

    Returns:
        Configured Passepartout
    """
    root = Path(config.templates.root)
    if not root.is_absolute() and config.config_path is not None:
        anchor = config.config_path.parent
        if anchor.name == ".passepartout":
            anchor = anchor.parent
        root = anchor / root

    return load_from(
        DirectoryStore(root),
        base=base if base is not None else config.environment.build(),
        common_dir=config.templates.common_dir,
        cache=config.cache,
    )
