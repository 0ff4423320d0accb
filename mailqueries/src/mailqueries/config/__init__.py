"""Configuration package: schema, loader and definition providers.

What:
  Provide a single import surface for reading ``config.yaml`` and for the
  providers that turn it into query definitions.

Why:
  Callers (the CLI, tests, embedding applications) should not depend on the
  internal module split between schema, loader and providers.

How:
  Re-export the supported helpers and keep ``__all__`` explicit.

Interfaces:
  - load_runtime_config / get_runtime_config / reset_runtime_config / parse_config.
  - ConfigLoadError / RuntimeConfigError / ValidationError.
  - RuntimeConfig, BookmarkConfig, MaildirConfig, ImapSettings, RefreshSettings.
  - DefinitionProvider, RuntimeDefinitionProvider, StaticDefinitionProvider.
"""

from .loader import (
    ConfigLoadError,
    RuntimeConfigError,
    get_runtime_config,
    load_runtime_config,
    parse_config,
    reset_runtime_config,
)
from .providers import DefinitionProvider, RuntimeDefinitionProvider, StaticDefinitionProvider
from .schema import (
    BookmarkConfig,
    ImapSettings,
    MaildirConfig,
    RefreshSettings,
    RuntimeConfig,
    ValidationError,
)

__all__ = [
    "BookmarkConfig",
    "ConfigLoadError",
    "DefinitionProvider",
    "ImapSettings",
    "MaildirConfig",
    "RefreshSettings",
    "RuntimeConfig",
    "RuntimeConfigError",
    "RuntimeDefinitionProvider",
    "StaticDefinitionProvider",
    "ValidationError",
    "get_runtime_config",
    "load_runtime_config",
    "parse_config",
    "reset_runtime_config",
]
