"""Vite Asset Loader.

This module provides the ViteAssetLoader class for locating Vite-managed
assets from the backend. The loader works in one of two modes:

- development: every URL points at the Vite dev server and the HMR client is injected
- manifest: URLs come from the build manifest, with stylesheets, entry scripts
  and preloads rendered for each entrypoint

The mode is forced by configuration or discovered at startup by pinging the
dev server.
"""

import hashlib
import logging
import os
from enum import IntEnum
from pathlib import Path
from textwrap import dedent
from typing import TYPE_CHECKING, Any, NamedTuple

import anyio
import httpx
from litestar.exceptions import SerializationException
from litestar.serialization import decode_json

from vite_bridge.config import HMR_CLIENT_PATH, PRODUCTION_ENV_VARS, TRUE_VALUES, ViteMode
from vite_bridge.exceptions import ManifestNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from vite_bridge.config import ViteConfig

__all__ = (
    "Asset",
    "AssetKind",
    "ViteAssetLoader",
    "check_heart_beat",
    "check_heart_beat_async",
    "is_production_environment",
)

logger = logging.getLogger("vite_bridge")

_IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp")
_FONT_EXTENSIONS = (".woff", ".woff2", ".ttf", ".eot")
_VIDEO_EXTENSIONS = (".mp4", ".webm", ".mov")
_AUDIO_EXTENSIONS = (".mp3", ".wav", ".aac", ".m4a")


class AssetKind(IntEnum):
    """Kinds of rendered tags, in render order."""

    STYLESHEET = 0
    ENTRYPOINT = 1
    PRELOAD = 2


class Asset(NamedTuple):
    kind: AssetKind
    url: str

    def to_html(self) -> str:
        if self.kind is AssetKind.STYLESHEET:
            return f'<link rel="stylesheet" href="{self.url}" />'
        if self.kind is AssetKind.ENTRYPOINT:
            return f'<script type="module" src="{self.url}"></script>'
        return _preload_tag(self.url)


def _preload_tag(url: str) -> str:
    if url.endswith((".js", ".mjs")):
        return f'<link rel="modulepreload" href="{url}" />'
    if url.endswith(".css"):
        return f'<link rel="preload" as="style" href="{url}" />'
    for extensions, as_type in (
        (_IMAGE_EXTENSIONS, "image"),
        (_FONT_EXTENSIONS, "font"),
        (_VIDEO_EXTENSIONS, "video"),
        (_AUDIO_EXTENSIONS, "audio"),
    ):
        if url.endswith(extensions):
            return f'<link rel="preload" as="{as_type}" href="{url}" />'
    return ""


def is_production_environment() -> bool:
    """Return True when the environment declares a production deployment."""
    for name in PRODUCTION_ENV_VARS:
        value = os.environ.get(name, "")
        if value == "production" or value in TRUE_VALUES:
            return True
    return False


def _heart_beat_url(dev_server_url: str) -> str:
    return f"{dev_server_url.rstrip('/')}/{HMR_CLIENT_PATH}"


def check_heart_beat(dev_server_url: str, timeout: float = 10.0) -> bool:
    """Check whether the dev server answers.

    Returns:
        True if the HMR client endpoint responds with ``200``.
    """
    url = _heart_beat_url(dev_server_url)
    try:
        response = httpx.get(url, timeout=timeout)
    except httpx.HTTPError as exc:
        logger.error("Failed to reach the Vite dev server at %s: %s", url, exc)
        return False
    return response.status_code == 200


async def check_heart_beat_async(dev_server_url: str, timeout: float = 10.0) -> bool:
    """Asynchronously check whether the dev server answers.

    Returns:
        True if the HMR client endpoint responds with ``200``.
    """
    url = _heart_beat_url(dev_server_url)
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(url)
    except httpx.HTTPError as exc:
        logger.error("Failed to reach the Vite dev server at %s: %s", url, exc)
        return False
    return response.status_code == 200


class ViteAssetLoader:
    """Vite asset loader for locating frontend assets.

    Example:
        loader = ViteAssetLoader(config)
        await loader.initialize()
        html = loader.get_resolved_vite_scripts()
    """

    def __init__(self, config: "ViteConfig") -> None:
        """Initialize the asset loader.

        Args:
            config: The Vite configuration.
        """
        self._config = config
        self._manifest: "dict[str, Any] | None" = None
        self._manifest_content: str = ""
        self._mode: "ViteMode | None" = None
        self._entrypoints: list[str] = []
        self._initialized: bool = False

    @classmethod
    def initialize_loader(cls, config: "ViteConfig") -> "ViteAssetLoader":
        """Synchronously create and initialize a loader.

        For async contexts, prefer :meth:`initialize` after construction.

        Returns:
            An initialized ViteAssetLoader instance.
        """
        loader = cls(config=config)
        mode = loader._static_mode()
        if mode is None:
            mode = (
                ViteMode.DEVELOPMENT
                if check_heart_beat(config.dev_server_url, config.heart_beat_timeout)
                else ViteMode.MANIFEST
            )
        loader._mode = mode
        if loader._needs_manifest():
            loader._load_manifest_sync()
        loader._finalize()
        return loader

    async def initialize(self) -> None:
        """Asynchronously discover the mode and load the manifest.

        Call this during app startup in an async context. Subsequent calls do nothing.
        """
        if self._initialized:
            return
        mode = self._static_mode()
        if mode is None:
            reachable = await check_heart_beat_async(self._config.dev_server_url, self._config.heart_beat_timeout)
            mode = ViteMode.DEVELOPMENT if reachable else ViteMode.MANIFEST
        self._mode = mode
        if self._needs_manifest():
            await self._load_manifest_async()
        self._finalize()

    def _static_mode(self) -> "ViteMode | None":
        """Return the mode when it can be decided without contacting the dev server."""
        if self._config.force_mode is not None:
            return ViteMode(self._config.force_mode)
        if not self._config.use_heart_beat_check:
            return ViteMode.DEVELOPMENT
        if not self._config.enable_dev_server:
            return ViteMode.MANIFEST
        if is_production_environment():
            return ViteMode.MANIFEST
        return None

    def _needs_manifest(self) -> bool:
        return self._mode is ViteMode.MANIFEST or self._config.entrypoints is None

    def _finalize(self) -> None:
        if self._config.entrypoints is not None:
            self._entrypoints = list(self._config.entrypoints)
        else:
            self._entrypoints = [key for key, chunk in (self._manifest or {}).items() if chunk.get("isEntry")]
        logger.debug("Vite assets resolved in %s mode for %s", self.mode.value, self._entrypoints)
        self._initialized = True

    def _get_manifest_path(self) -> Path:
        return Path(self._config.manifest_path)

    def _load_manifest_sync(self) -> None:
        """Synchronously load and parse the Vite manifest file.

        Raises:
            ManifestNotFoundError: If the manifest file cannot be read or parsed.
        """
        manifest_path = self._get_manifest_path()
        try:
            self._manifest_content = manifest_path.read_text(encoding="utf-8")
            self._manifest = decode_json(self._manifest_content)
        except (OSError, UnicodeDecodeError, SerializationException) as exc:
            raise ManifestNotFoundError(str(manifest_path)) from exc

    async def _load_manifest_async(self) -> None:
        """Asynchronously load and parse the Vite manifest file.

        Raises:
            ManifestNotFoundError: If the manifest file cannot be read or parsed.
        """
        manifest_path = anyio.Path(self._get_manifest_path())
        try:
            self._manifest_content = await manifest_path.read_text(encoding="utf-8")
            self._manifest = decode_json(self._manifest_content)
        except (OSError, UnicodeDecodeError, SerializationException) as exc:
            raise ManifestNotFoundError(str(manifest_path)) from exc

    @property
    def mode(self) -> ViteMode:
        """The mode assets are located in.

        Raises:
            RuntimeError: If the loader has not been initialized.
        """
        if self._mode is None:
            msg = "The asset loader has not been initialized."
            raise RuntimeError(msg)
        return self._mode

    @property
    def entrypoints(self) -> "list[str]":
        return list(self._entrypoints)

    @property
    def dev_server_url(self) -> str:
        return self._config.dev_server_url

    @property
    def manifest_content(self) -> str:
        """The raw manifest content."""
        return self._manifest_content

    @property
    def version_id(self) -> "str | None":
        """Hex encoded MD5 hash of the manifest, usable for asset versioning."""
        if self._manifest is None:
            return None
        return hashlib.md5(self._manifest_content.encode("utf-8"), usedforsecurity=False).hexdigest()

    def get_tags(self) -> str:
        """Generate the HTML tags for the entrypoints from the manifest.

        Stylesheets come first, then entry scripts, then preloads.

        Raises:
            ManifestNotFoundError: If no manifest was loaded.

        Returns:
            One tag per line.
        """
        if self._manifest is None:
            raise ManifestNotFoundError(str(self._get_manifest_path()))
        if not self._manifest:
            logger.error("Vite manifest at %s is empty; no tags rendered.", self._get_manifest_path())
            return ""

        assets: set[Asset] = set()
        for entry in self._entrypoints:
            chunk = self._manifest.get(entry)
            if chunk is None:
                logger.warning("Skipping unknown Vite entrypoint %r.", entry)
                continue
            kind = AssetKind.STYLESHEET if entry.endswith(".css") else AssetKind.ENTRYPOINT
            entry_asset = Asset(kind, self._build_url(chunk["file"]))
            if entry_asset not in assets:
                assets.add(entry_asset)
                assets.update(self._iter_chunk_assets(chunk, set()))

        tags = (asset.to_html() for asset in sorted(assets))
        return "\n".join(tag for tag in tags if tag)

    def _iter_chunk_assets(self, chunk: "dict[str, Any]", seen: "set[str]") -> "Iterator[Asset]":
        for asset_file in chunk.get("assets", []):
            yield Asset(AssetKind.PRELOAD, self._build_url(asset_file))
        for css_file in chunk.get("css", []):
            yield Asset(AssetKind.STYLESHEET, self._build_url(css_file))
        if not chunk.get("isEntry"):
            return
        for import_key in chunk.get("imports", []):
            if import_key in seen:
                continue
            seen.add(import_key)
            import_chunk = (self._manifest or {}).get(import_key)
            if import_chunk is None:
                logger.warning("Skipping unknown Vite import %r.", import_key)
                continue
            yield Asset(AssetKind.PRELOAD, self._build_url(import_chunk["file"]))
            yield from self._iter_chunk_assets(import_chunk, seen)

    def get_development_scripts(self) -> str:
        """Generate tags loading the entrypoints straight from the dev server.

        Returns:
            One tag per line.
        """
        tags: list[str] = []
        for entry in self._entrypoints:
            kind = AssetKind.STYLESHEET if entry.endswith(".css") else AssetKind.ENTRYPOINT
            tags.append(Asset(kind, self._dev_server_asset_url(entry)).to_html())
        return "\n".join(tags)

    def get_hmr_script(self) -> str:
        """Generate the Vite HMR client script tag.

        Returns:
            The script tag in development mode, an empty string otherwise.
        """
        if self.mode is ViteMode.MANIFEST:
            return ""
        return f'<script type="module" src="{self.dev_server_url}/{HMR_CLIENT_PATH}"></script>'

    def get_react_script(self) -> str:
        """Generate the React Fast Refresh preamble.

        Returns:
            The inline script in development mode, an empty string otherwise.
        """
        if self.mode is ViteMode.MANIFEST:
            return ""
        return dedent(f"""\
            <script type="module">
            import RefreshRuntime from '{self.dev_server_url}/@react-refresh'
            RefreshRuntime.injectIntoGlobalHook(window)
            window.$RefreshReg$ = () => {{}}
            window.$RefreshSig$ = () => (type) => type
            window.__vite_plugin_react_preamble_installed__ = true
            </script>""")

    def get_resolved_vite_scripts(self) -> str:
        """Generate the tags for the current mode.

        Development mode renders the dev server scripts followed by the HMR
        client; manifest mode renders the manifest tags.

        Returns:
            The HTML tags.
        """
        if self.mode is ViteMode.DEVELOPMENT:
            return f"{self.get_development_scripts()}\n{self.get_hmr_script()}"
        return self.get_tags()

    def get_asset_url(self, path: str) -> str:
        """Get the URL of an asset by its source path, e.g. ``src/assets/logo.svg``.

        Raises:
            ManifestNotFoundError: If in manifest mode without a manifest.

        Returns:
            The dev server URL in development mode, the built file URL in
            manifest mode, or an empty string for assets missing from the manifest.
        """
        path = path.removeprefix("/").replace("'", "")
        if self.mode is ViteMode.DEVELOPMENT:
            return self._dev_server_asset_url(path)
        if self._manifest is None:
            raise ManifestNotFoundError(str(self._get_manifest_path()))
        chunk = self._manifest.get(path)
        if chunk is None:
            logger.warning("Asset %r not found in Vite manifest at %s.", path, self._get_manifest_path())
            return ""
        return self._build_url(chunk["file"])

    def _dev_server_asset_url(self, path: str) -> str:
        return f"{self.dev_server_url}/{path.removeprefix('/')}"

    def _build_url(self, file: str) -> str:
        prefix = self._config.resolved_prefix
        path = "/".join(part for part in (prefix, file) if part)
        return f"{self._config.resolved_app_url}/{path}"
