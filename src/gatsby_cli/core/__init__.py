"""Core dispatch primitives."""

from .bundle import build_argument_bundle
from .config import CliConfig, ConfigError, load_cli_config
from .locator import (
    COMMAND_LOOKUPS,
    CommandLocator,
    FailureReason,
    LookupStrategy,
    ResolutionFailure,
    ResolutionResult,
    Resolved,
)
from .reporter import Reporter
from .site import DEFAULT_BROWSERS, ManifestInfo, SiteContext, detect_site

__all__ = [
    "build_argument_bundle",
    "CliConfig",
    "ConfigError",
    "load_cli_config",
    "COMMAND_LOOKUPS",
    "CommandLocator",
    "FailureReason",
    "LookupStrategy",
    "ResolutionFailure",
    "ResolutionResult",
    "Resolved",
    "Reporter",
    "DEFAULT_BROWSERS",
    "ManifestInfo",
    "SiteContext",
    "detect_site",
]
