"""Backend side configuration: where the built assets live and how to reach the dev server."""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from vite_bridge.config._constants import DEFAULT_DEV_SERVER_URL, TRUE_VALUES

if TYPE_CHECKING:
    from vite_bridge.config._plugin import PluginInputValue

__all__ = ("ViteConfig", "ViteMode", "resolve_app_url", "resolve_prefix")


class ViteMode(str, Enum):
    """How assets are located at runtime."""

    DEVELOPMENT = "development"
    """Assets are served by the dev server."""
    MANIFEST = "manifest"
    """Assets are resolved through the build manifest."""


@dataclass
class ViteConfig:
    """Configuration for locating Vite assets from the backend.

    To enable the integration, pass an instance of this class to
    :class:`VitePlugin <vite_bridge.plugin.VitePlugin>`.
    """

    manifest_path: "Path | str" = field(default_factory=lambda: Path("dist/.vite/manifest.json"))
    """Location of the build manifest."""
    entrypoints: "list[str] | None" = None
    """Entrypoints to render tags for.

    When unset, every manifest chunk flagged ``isEntry`` is used.
    """
    force_mode: "ViteMode | str | None" = None
    """Skip mode discovery and always use this mode."""
    use_heart_beat_check: bool = True
    """Ping the dev server during mode discovery. When disabled, development mode is assumed."""
    enable_dev_server: bool = field(
        default_factory=lambda: os.getenv("VITE_ENABLE_DEV_SERVER", "True") in TRUE_VALUES,
    )
    """When False, manifest mode is always used."""
    dev_server_url: str = field(default_factory=lambda: os.getenv("VITE_DEV_SERVER_URL", DEFAULT_DEV_SERVER_URL))
    """URL of the Vite dev server."""
    heart_beat_timeout: float = 10.0
    """Seconds to wait for the dev server to answer the heart beat."""
    prefix: "str | None" = "dist"
    """Path segment prepended to built asset URLs. Matches the base the bundler builds with, e.g. its ``out_dir``."""
    app_url: "str | None" = field(default_factory=lambda: os.getenv("APP_URL"))
    """Origin prepended to built asset URLs."""
    is_react: bool = False
    """Render the React Fast Refresh preamble in development."""
    bundle_dir: "Path | str" = field(default_factory=lambda: Path("dist"))
    """Directory holding the built assets, served as static files."""
    template_dir: "Path | str | None" = None
    """Location of the Jinja2 templates."""
    set_static_folders: bool = True
    """When True, ``bundle_dir`` is served at the asset prefix."""
    frontend: "PluginInputValue | None" = None
    """Bundler plugin configuration, emitted by ``litestar assets config``."""
    root_dir: "Path | str | None" = None
    """Directory the frontend commands run in. Defaults to the working directory."""
    build_command: "list[str]" = field(default_factory=lambda: ["npm", "run", "build"])
    """Command building the frontend."""
    run_command: "list[str]" = field(default_factory=lambda: ["npm", "run", "dev"])
    """Command starting the dev server."""

    def __post_init__(self) -> None:
        """Normalize path and mode types."""
        if isinstance(self.manifest_path, str):
            self.manifest_path = Path(self.manifest_path)
        if isinstance(self.bundle_dir, str):
            self.bundle_dir = Path(self.bundle_dir)
        if isinstance(self.template_dir, str):
            self.template_dir = Path(self.template_dir)
        if isinstance(self.root_dir, str):
            self.root_dir = Path(self.root_dir)
        if isinstance(self.force_mode, str):
            self.force_mode = ViteMode(self.force_mode)
        self.dev_server_url = self.dev_server_url.rstrip("/")

    @property
    def resolved_prefix(self) -> "str | None":
        return resolve_prefix(self.prefix)

    @property
    def resolved_app_url(self) -> str:
        return resolve_app_url(self.app_url)

    @property
    def asset_path(self) -> str:
        """URL path the built assets are served from."""
        prefix = self.resolved_prefix
        return f"/{prefix}" if prefix else "/"


def resolve_prefix(prefix: "str | None") -> "str | None":
    """Strip one leading and one trailing slash from an asset prefix.

    Returns:
        The prefix, or None when it is unset, empty or ``/``.
    """
    if not prefix or prefix == "/":
        return None
    prefix = prefix.removeprefix("/")
    return prefix.removesuffix("/")


def resolve_app_url(app_url: "str | None") -> str:
    """Strip one trailing slash from the application origin.

    Returns:
        The app URL, or an empty string when unset.
    """
    if not app_url:
        return ""
    return app_url.removesuffix("/")
