from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from litestar.plugins import CLIPlugin, InitPluginProtocol
from litestar.static_files import create_static_files_router  # pyright: ignore[reportUnknownVariableType]
from litestar.template import TemplateConfig

from vite_bridge.config import ViteConfig, ViteMode
from vite_bridge.loader import ViteAssetLoader

if TYPE_CHECKING:
    from collections.abc import Iterator

    from click import Group
    from litestar import Litestar
    from litestar.config.app import AppConfig

    from vite_bridge.template_engine import ViteTemplateEngine

__all__ = ("VitePlugin",)


class VitePlugin(InitPluginProtocol, CLIPlugin):
    """Vite plugin."""

    __slots__ = ("_asset_loader", "_config")

    def __init__(self, config: "ViteConfig | None" = None) -> None:
        """Initialize ``Vite``.

        Args:
            config: configuration to use for locating assets. The default configuration will be used if it is not provided.
        """
        if config is None:
            config = ViteConfig()
        self._config = config
        self._asset_loader = ViteAssetLoader(config=config)

    @property
    def config(self) -> ViteConfig:
        return self._config

    @property
    def asset_loader(self) -> ViteAssetLoader:
        """The asset loader. It is initialized on application startup."""
        return self._asset_loader

    @property
    def template_config(self) -> "TemplateConfig[ViteTemplateEngine]":
        from vite_bridge.template_engine import ViteTemplateEngine

        return TemplateConfig(
            engine=ViteTemplateEngine(
                directory=Path(self._config.template_dir) if self._config.template_dir else None,
                config=self._config,
                asset_loader=self._asset_loader,
            ),
        )

    def on_cli_init(self, cli: "Group") -> None:
        from vite_bridge.cli import vite_group

        cli.add_command(vite_group)

    def on_app_init(self, app_config: "AppConfig") -> "AppConfig":
        """Configure application for use with Vite.

        Args:
            app_config: The :class:`AppConfig <.config.app.AppConfig>` instance.

        Returns:
            The updated application configuration.
        """
        if self._config.template_dir is not None:
            app_config.template_config = self.template_config

        if self._config.set_static_folders and self._config.resolved_prefix:
            app_config.route_handlers.append(
                create_static_files_router(
                    directories=[Path(self._config.bundle_dir)],
                    path=self._config.asset_path,
                    name="vite",
                    html_mode=False,
                    include_in_schema=False,
                    opt={"exclude_from_auth": True},
                ),
            )
        app_config.on_startup.append(self._asset_loader.initialize)
        return app_config

    @contextmanager
    def server_lifespan(self, app: "Litestar") -> "Iterator[None]":
        from litestar.cli._utils import console  # pyright: ignore[reportPrivateImportUsage]

        manifest_path = Path(self._config.manifest_path)
        if self._config.force_mode is not None:
            console.rule(f"[yellow]Serving assets in forced {ViteMode(self._config.force_mode).value} mode.[/]", align="left")
        elif manifest_path.exists():
            console.rule(f"[yellow]Serving assets using manifest at `{manifest_path!s}`.[/]", align="left")
        else:
            console.rule(
                f"[yellow]No manifest at `{manifest_path!s}`, expecting the dev server at {self._config.dev_server_url}.[/]",
                align="left",
            )
        yield
