"""Vite-Bridge Configuration.

The configuration is split into two groups:

- PluginInput / ResolvedConfig: what the bundler plugin is driven by
- ViteConfig: how the backend locates built or dev-served assets

Example usage::

    resolved = resolve_input({"entrypoints": "src/main.ts", "outDir": "static"})

    VitePlugin(config=ViteConfig(manifest_path="static/.vite/manifest.json", prefix="static"))
"""

from vite_bridge.config._backend import ViteConfig, ViteMode, resolve_app_url, resolve_prefix
from vite_bridge.config._constants import (
    ASSET_URL_ENV,
    DEFAULT_DEV_SERVER_URL,
    DEFAULT_OUT_DIR,
    DEFAULT_PUBLIC_ENDPOINT,
    HMR_CLIENT_PATH,
    ORIGIN_PLACEHOLDER,
    PRODUCTION_ENV_VARS,
    TRUE_VALUES,
)
from vite_bridge.config._plugin import (
    PluginInput,
    PluginInputValue,
    RefreshConfig,
    RefreshKind,
    ResolvedConfig,
    classify_refresh,
    resolve_assets_endpoint,
    resolve_input,
    resolve_refresh,
)
from vite_bridge.config._runtime import Command, RunContext

__all__ = (
    "ASSET_URL_ENV",
    "DEFAULT_DEV_SERVER_URL",
    "DEFAULT_OUT_DIR",
    "DEFAULT_PUBLIC_ENDPOINT",
    "HMR_CLIENT_PATH",
    "ORIGIN_PLACEHOLDER",
    "PRODUCTION_ENV_VARS",
    "TRUE_VALUES",
    "Command",
    "PluginInput",
    "PluginInputValue",
    "RefreshConfig",
    "RefreshKind",
    "ResolvedConfig",
    "RunContext",
    "ViteConfig",
    "ViteMode",
    "classify_refresh",
    "resolve_app_url",
    "resolve_assets_endpoint",
    "resolve_input",
    "resolve_prefix",
    "resolve_refresh",
)
