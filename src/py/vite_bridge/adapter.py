"""Bundler plugin adapter.

:class:`ViteBridgeAdapter` implements the bundler's plugin hooks. It hands the
bundler the build input, output directory, manifest flag and public base
derived from :class:`~vite_bridge.config.PluginInput`, then patches the dev
server origin into served code.

The dev server origin is not known when the bundler computes its settings, so
``server.origin`` is set to :data:`~vite_bridge.config.ORIGIN_PLACEHOLDER` and
``transform`` replaces the placeholder with the configured dev server URL.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal, Protocol, runtime_checkable

from vite_bridge.base import resolve_base
from vite_bridge.config import ORIGIN_PLACEHOLDER, PluginInput, resolve_assets_endpoint, resolve_input
from vite_bridge.exceptions import AdapterStateError, ConfigurationError

if TYPE_CHECKING:
    from vite_bridge.config import PluginInputValue, ResolvedConfig, RunContext

__all__ = (
    "AdapterPhase",
    "BundlerPlugin",
    "FullReloadPlugin",
    "TransformResult",
    "ViteBridgeAdapter",
    "merge_config",
    "vite_bridge",
)

logger = logging.getLogger("vite_bridge")


@dataclass(frozen=True)
class TransformResult:
    """Code returned by a ``transform`` hook."""

    code: str

    def to_dict(self) -> "dict[str, Any]":
        return {"code": self.code}


@runtime_checkable
class BundlerPlugin(Protocol):
    """Plugin contract of the host bundler."""

    name: str
    enforce: "Literal['pre', 'post'] | None"

    def config(self, host_config: "Mapping[str, Any]", context: "RunContext") -> "dict[str, Any]":
        """Return configuration overrides before the bundler commits its settings."""
        ...

    def config_resolved(self, final_config: "Mapping[str, Any]") -> None:
        """Receive the bundler's committed settings."""
        ...

    def transform(self, code: str, module_id: "str | None" = None) -> "TransformResult | None":
        """Transform a source unit. ``None`` leaves it unchanged."""
        ...


class AdapterPhase(str, Enum):
    CONFIGURING = "configuring"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class FullReloadPlugin:
    """Descriptor of the external full-reload watcher.

    File watching happens in the bundler; this only carries the watch set it
    is configured with.
    """

    paths: "list[str]"
    config: "Mapping[str, Any] | None" = None
    name: str = field(default="vite-plugin-full-reload")

    def to_dict(self) -> "dict[str, Any]":
        data: dict[str, Any] = {"name": self.name, "paths": list(self.paths)}
        if self.config is not None:
            data["config"] = dict(self.config)
        return data


class ViteBridgeAdapter:
    """Bundler plugin wiring the bundle to the backend."""

    __slots__ = ("_config", "_final_config", "_input", "_phase")

    name = "vite-bridge"
    enforce: "Literal['pre', 'post'] | None" = "post"

    def __init__(self, config: "PluginInputValue") -> None:
        """Initialize the adapter.

        Args:
            config: Plugin configuration, or the path of the single entrypoint.
        """
        self._input = PluginInput.from_value(config)
        self._config = resolve_input(self._input)
        self._final_config: Mapping[str, Any] | None = None
        self._phase = AdapterPhase.CONFIGURING

    @property
    def resolved_config(self) -> "ResolvedConfig":
        return self._config

    @property
    def phase(self) -> AdapterPhase:
        return self._phase

    @property
    def command(self) -> "str | None":
        """The bundler command captured by :meth:`config_resolved`."""
        if self._final_config is None:
            return None
        return self._final_config.get("command")

    def config(self, host_config: "Mapping[str, Any]", context: "RunContext") -> "dict[str, Any]":
        """Compute the overrides merged into the bundler configuration.

        Only ``base``, ``build.outDir``, ``build.rollupOptions.input`` and the
        ``build.manifest`` and ``server.origin`` defaults are produced; the
        bundler keeps every other setting. ``host_config`` is not modified.

        Args:
            host_config: The user's bundler configuration.
            context: The bundler run context.

        Returns:
            The configuration overrides.
        """
        self._config = replace(
            self._config, assets_endpoint=resolve_assets_endpoint(self._input.assets_endpoint, context)
        )
        build = host_config.get("build") or {}
        server = host_config.get("server") or {}
        manifest = build.get("manifest")
        origin = server.get("origin")
        overrides = {
            "base": resolve_base(host_config.get("base"), self._config, context),
            "build": {
                "outDir": self._config.out_dir,
                "rollupOptions": {"input": list(self._config.entrypoints)},
                "manifest": True if manifest is None else manifest,
            },
            "server": {"origin": ORIGIN_PLACEHOLDER if origin is None else origin},
        }
        logger.debug("Bundler overrides for %s (%s): %s", context.command, context.mode, overrides)
        return overrides

    def config_resolved(self, final_config: "Mapping[str, Any]") -> None:
        """Capture the bundler's committed configuration.

        Args:
            final_config: The resolved bundler configuration. Must carry ``command``.

        Raises:
            ConfigurationError: If the configuration has no valid ``command``.
        """
        if final_config.get("command") not in {"serve", "build"}:
            msg = f"Resolved bundler configuration has no valid command: {final_config.get('command')!r}."
            raise ConfigurationError(msg)
        self._final_config = final_config
        self._phase = AdapterPhase.RESOLVED

    def transform(self, code: str, module_id: "str | None" = None) -> "TransformResult | None":
        """Replace the origin placeholder with the dev server URL while serving.

        Args:
            code: The source unit.
            module_id: Identifier of the source unit.

        Raises:
            AdapterStateError: If called before :meth:`config_resolved`.

        Returns:
            The transformed code while serving, ``None`` otherwise.
        """
        if self._phase is not AdapterPhase.RESOLVED:
            msg = "transform() called before config_resolved()."
            raise AdapterStateError(msg)
        if self.command != "serve":
            return None
        return TransformResult(code=code.replace(ORIGIN_PLACEHOLDER, self._config.dev_server_url))


def merge_config(base: "Mapping[str, Any]", overrides: "Mapping[str, Any]") -> "dict[str, Any]":
    """Deep merge bundler configuration the way the bundler applies plugin overrides.

    Nested mappings are merged; any other value in ``overrides`` replaces the
    one in ``base``. Neither argument is modified.

    Returns:
        The merged configuration.
    """
    result = dict(base)
    for key, value in overrides.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = merge_config(current, value)
        else:
            result[key] = value
    return result


def vite_bridge(config: "PluginInputValue") -> "tuple[ViteBridgeAdapter, FullReloadPlugin]":
    """Create the bundler plugins.

    Args:
        config: Plugin configuration, or the path of the single entrypoint.

    Returns:
        The adapter and the full-reload watcher watching the refresh paths.
    """
    adapter = ViteBridgeAdapter(config)
    refresh = adapter.resolved_config.refresh
    return adapter, FullReloadPlugin(paths=list(refresh.paths), config=refresh.extra_config)
