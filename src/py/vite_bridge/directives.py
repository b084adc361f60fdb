"""HTML directive expansion.

Plain HTML files can reference Vite assets without a template engine:

- ``@vite`` expands to the tags for the current mode
- ``@vite::asset("src/logo.svg")`` (or ``@vite::assets``) expands to the asset URL
- ``@vite::hmr`` expands to the HMR client script, or nothing in manifest mode
- ``@vite::react`` expands to the React Fast Refresh preamble, or nothing in manifest mode

Regex patterns are compiled once at import time.
"""

import re
from typing import TYPE_CHECKING

from vite_bridge.config import ViteMode
from vite_bridge.exceptions import ViteBridgeError

if TYPE_CHECKING:
    from vite_bridge.loader import ViteAssetLoader

__all__ = (
    "expand_assets_directive",
    "expand_directives",
    "expand_hmr_directive",
    "expand_react_directive",
    "expand_vite_directive",
)

_VITE_DIRECTIVE = re.compile(r"([ \t]*)@vite([ \t]*)(\s|$)")
_ASSETS_DIRECTIVE = re.compile(r"""([ \t]*)@vite::assets?\(['"]?([^'")]*)['"]?\)([ \t]*)""")
_HMR_DIRECTIVE = re.compile(r"([ \t]*)@vite::hmr([ \t]*)")
_REACT_DIRECTIVE = re.compile(r"([ \t]*)@vite::react([ \t]*)")


def expand_vite_directive(html: str, loader: "ViteAssetLoader") -> str:
    """Expand ``@vite`` into the tags for the loader's mode.

    Raises:
        ManifestNotFoundError: If in manifest mode without a manifest.

    Returns:
        The expanded HTML.
    """
    if not _VITE_DIRECTIVE.search(html):
        return html
    tags = loader.get_resolved_vite_scripts()
    return _VITE_DIRECTIVE.sub(lambda match: f"{match[1]}{tags}{match[2]}{match[3]}", html)


def expand_assets_directive(html: str, loader: "ViteAssetLoader") -> str:
    """Expand ``@vite::asset("path")`` into the asset URL.

    Unresolvable assets expand to an empty string.

    Returns:
        The expanded HTML.
    """

    def _replace(match: "re.Match[str]") -> str:
        try:
            url = loader.get_asset_url(match[2])
        except ViteBridgeError:
            url = ""
        return f"{match[1]}{url}{match[3]}"

    return _ASSETS_DIRECTIVE.sub(_replace, html)


def expand_hmr_directive(html: str, loader: "ViteAssetLoader") -> str:
    """Expand ``@vite::hmr`` into the HMR client script.

    Returns:
        The expanded HTML.
    """
    if loader.mode is ViteMode.MANIFEST:
        return _HMR_DIRECTIVE.sub("", html)
    script = loader.get_hmr_script()
    return _HMR_DIRECTIVE.sub(lambda match: f"{match[1]}{script}{match[2]}", html)


def expand_react_directive(html: str, loader: "ViteAssetLoader") -> str:
    """Expand ``@vite::react`` into the React Fast Refresh preamble.

    Returns:
        The expanded HTML.
    """
    if loader.mode is ViteMode.MANIFEST:
        return _REACT_DIRECTIVE.sub("", html)
    script = loader.get_react_script()
    return _REACT_DIRECTIVE.sub(lambda match: f"{match[1]}{script}{match[2]}", html)


def expand_directives(html: str, loader: "ViteAssetLoader") -> str:
    """Expand every Vite directive in ``html``.

    Namespaced directives are expanded before ``@vite``.

    Returns:
        The expanded HTML.
    """
    html = expand_react_directive(html, loader)
    html = expand_hmr_directive(html, loader)
    html = expand_assets_directive(html, loader)
    return expand_vite_directive(html, loader)
