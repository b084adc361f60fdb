"""Vite-Bridge: drive Vite from backend configuration and locate its assets from Litestar.

The bundler side computes what the Vite plugin contributes to the build:

    from vite_bridge import vite_bridge

    adapter, full_reload = vite_bridge({"entrypoints": ["resources/js/main.ts"], "outDir": "dist"})

The backend side renders the tags for the current mode:

    from litestar import Litestar
    from vite_bridge import VitePlugin, ViteConfig

    app = Litestar(
        plugins=[VitePlugin(config=ViteConfig(template_dir="templates", entrypoints=["resources/js/main.ts"]))],
    )
"""

from vite_bridge.adapter import FullReloadPlugin, TransformResult, ViteBridgeAdapter, merge_config, vite_bridge
from vite_bridge.base import resolve_base
from vite_bridge.config import PluginInput, RefreshConfig, ResolvedConfig, RunContext, ViteConfig, ViteMode, resolve_input
from vite_bridge.helpers import resolve_page_component
from vite_bridge.loader import ViteAssetLoader
from vite_bridge.paths import normalize
from vite_bridge.plugin import VitePlugin

__all__ = (
    "FullReloadPlugin",
    "PluginInput",
    "RefreshConfig",
    "ResolvedConfig",
    "RunContext",
    "TransformResult",
    "ViteAssetLoader",
    "ViteBridgeAdapter",
    "ViteConfig",
    "ViteMode",
    "VitePlugin",
    "merge_config",
    "normalize",
    "resolve_base",
    "resolve_input",
    "resolve_page_component",
    "vite_bridge",
)
