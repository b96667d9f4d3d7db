import dataclasses
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger("gatsby_cli.core.config")

CONFIG_ENV = "GATSBY_CLI_CONFIG"
VERBOSE_ENV = "GATSBY_CLI_VERBOSE"
DEFAULT_CONFIG_FILENAME = ".gatsby-cli.yml"


class ConfigError(Exception):
    """Raised when the CLI config file cannot be used."""


@dataclasses.dataclass(frozen=True)
class CliConfig:
    verbose: bool = False
    source: Optional[Path] = None


def parse_bool_text(value: Any, *, name: str) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value or "").strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    raise ConfigError(f"Invalid value for {name}: {value!r} (expected true|false)")


def default_config_path(env: Mapping[str, str]) -> Path:
    explicit = env.get(CONFIG_ENV)
    if explicit:
        return Path(explicit).expanduser()
    return Path.home() / DEFAULT_CONFIG_FILENAME


def _load_yaml_dict(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    return data


def load_cli_config(
    path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None
) -> CliConfig:
    """Built-in defaults, then the YAML file, then environment variables."""
    env = os.environ if env is None else env
    config_path = path if path is not None else default_config_path(env)
    data = _load_yaml_dict(config_path)

    verbose = parse_bool_text(data.get("verbose", False), name="verbose")
    env_verbose = env.get(VERBOSE_ENV)
    if env_verbose is not None:
        verbose = parse_bool_text(env_verbose, name=VERBOSE_ENV)

    source = config_path if data else None
    if source is not None:
        logger.debug("Loaded CLI config from %s", source)
    return CliConfig(verbose=verbose, source=source)
