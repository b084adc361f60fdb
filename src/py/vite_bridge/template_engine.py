from typing import TYPE_CHECKING, Any

import markupsafe
from litestar.contrib.jinja import JinjaTemplateEngine

from vite_bridge.directives import expand_directives
from vite_bridge.loader import ViteAssetLoader

if TYPE_CHECKING:
    from pathlib import Path

    from jinja2 import Environment

    from vite_bridge.config import ViteConfig

__all__ = ("ViteTemplateEngine",)


class ViteTemplateEngine(JinjaTemplateEngine):
    """Jinja Template Engine with Vite Integration."""

    def __init__(
        self,
        directory: "Path | list[Path] | None" = None,
        engine_instance: "Environment | None" = None,
        config: "ViteConfig | None" = None,
        asset_loader: "ViteAssetLoader | None" = None,
    ) -> None:
        """Jinja2 based TemplateEngine.

        Args:
            directory: Direct path or list of directory paths from which to serve templates.
            engine_instance: A jinja Environment instance.
            config: Vite config
            asset_loader: An initialized asset loader. Created from ``config`` when omitted.
        """
        super().__init__(directory=directory, engine_instance=engine_instance)
        if config is None:
            msg = "Please configure the `ViteConfig` instance."
            raise ValueError(msg)
        self.config = config
        self.asset_loader = asset_loader or ViteAssetLoader.initialize_loader(config=self.config)
        self.engine.globals.update(
            {
                "vite": self.get_asset_tags,
                "vite_hmr": self.get_hmr_client,
                "vite_react": self.get_react_refresh,
                "vite_asset": self.get_asset_url,
                "vite_directives": self.render_directives,
            }
        )

    def get_hmr_client(self) -> markupsafe.Markup:
        """Generate the script tags for the Vite HMR client.

        The React Fast Refresh preamble is included when ``is_react`` is set. In
        manifest mode this returns an empty string.

        ``vite()`` already includes the HMR client, so only call this on pages
        that load their entrypoints some other way. Pages using ``vite()`` and
        React call ``vite_react()`` before it instead.

        Returns:
            The script tags or an empty string.
        """
        react = self.asset_loader.get_react_script() if self.config.is_react else ""
        return markupsafe.Markup(f"{react}{self.asset_loader.get_hmr_script()}")

    def get_react_refresh(self) -> markupsafe.Markup:
        return markupsafe.Markup(self.asset_loader.get_react_script())

    def get_asset_tags(self, **_: Any) -> markupsafe.Markup:
        """Generate the tags loading every entrypoint.

        In development the entrypoints are loaded from the dev server together
        with the HMR client. In production the stylesheets, scripts and
        preloads are read from the manifest. Calling ``vite()`` alone is
        enough; do not add ``vite_hmr()`` next to it or the client loads twice.

        Returns:
            All tags to import the entrypoints in your HTML page.
        """
        return markupsafe.Markup(self.asset_loader.get_resolved_vite_scripts())

    def get_asset_url(self, path: str) -> str:
        """Return the URL of a single asset, e.g. ``{{ vite_asset('src/logo.svg') }}``."""
        return self.asset_loader.get_asset_url(path)

    def render_directives(self, html: str) -> markupsafe.Markup:
        """Expand ``@vite`` directives in a block of HTML."""
        return markupsafe.Markup(expand_directives(html, self.asset_loader))

    @classmethod
    def from_environment(cls, config: "ViteConfig", jinja_environment: "Environment") -> "ViteTemplateEngine":  # type: ignore[override]
        """Create a ViteTemplateEngine from an existing jinja Environment instance.

        Args:
            config: Vite config
            jinja_environment (jinja2.environment.Environment): A jinja Environment instance.

        Returns:
            ViteTemplateEngine instance
        """
        return cls(directory=None, config=config, engine_instance=jinja_environment)
