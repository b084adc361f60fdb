"""Bundler plugin configuration and its resolution."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal, Union
from urllib.parse import urlsplit

from vite_bridge.config._constants import (
    ASSET_URL_ENV,
    DEFAULT_DEV_SERVER_URL,
    DEFAULT_OUT_DIR,
    DEFAULT_PUBLIC_ENDPOINT,
)
from vite_bridge.exceptions import ConfigurationError, InvalidRefreshError, MissingEntrypointsError
from vite_bridge.paths import normalize

if TYPE_CHECKING:
    from vite_bridge.config._runtime import RunContext

__all__ = (
    "PluginInput",
    "PluginInputValue",
    "RefreshConfig",
    "RefreshKind",
    "ResolvedConfig",
    "classify_refresh",
    "resolve_assets_endpoint",
    "resolve_input",
    "resolve_refresh",
)


@dataclass(frozen=True)
class RefreshConfig:
    """Files watched by the full-reload watcher while the dev server runs.

    Attributes:
        paths: Paths or globs that trigger a full page reload when they change.
        extra_config: Options handed to the watcher untouched.
    """

    paths: "list[str]"
    extra_config: "Mapping[str, Any] | None" = None

    def to_dict(self) -> "dict[str, Any]":
        data: dict[str, Any] = {"paths": list(self.paths)}
        if self.extra_config is not None:
            data["config"] = dict(self.extra_config)
        return data


RefreshValue = Union[None, str, Sequence[str], RefreshConfig, Mapping[str, Any]]


@dataclass
class PluginInput:
    """User supplied plugin configuration.

    Only ``entrypoints`` is required; every other field falls back to a default
    when the configuration is resolved.
    """

    entrypoints: "str | Sequence[str]" = field(default_factory=list)
    """Entry modules of the bundle. Set as the bundler's ``build.rollupOptions.input``."""
    dev_server_url: "str | None" = None
    """The dev server URL. Defaults to ``http://localhost:5173``."""
    refresh: RefreshValue = None
    """Files that trigger a full reload: a path, a list of paths or a ``{paths, config}`` record.

    Defaults to the entrypoints.
    """
    out_dir: "str | None" = None
    """Directory the bundle is written to. Overrides the bundler's ``build.outDir``. Defaults to ``dist``."""
    public_endpoint: "str | None" = None
    """Endpoint serving the bundler's public directory. Defaults to ``/``."""
    assets_endpoint: "str | Literal[False] | None" = None
    """Endpoint serving built assets.

    When unset, ``ASSET_URL`` is used for production builds. ``False`` disables
    it, in which case the base is built from ``public_endpoint`` and ``out_dir``.
    """

    @classmethod
    def from_value(cls, value: "PluginInputValue") -> "PluginInput":
        """Build a :class:`PluginInput` from any accepted configuration shape.

        A raw string is shorthand for the entrypoint. Mappings may use the
        bundler's camelCase keys or snake_case keys.

        Raises:
            ConfigurationError: If the value has an unsupported type or unknown keys.

        Returns:
            The plugin input.
        """
        if isinstance(value, PluginInput):
            return value
        if isinstance(value, str):
            return cls(entrypoints=value)
        if isinstance(value, Mapping):
            known = {f.name for f in fields(cls)}
            kwargs: dict[str, Any] = {}
            for key, item in value.items():
                name = _INPUT_KEY_ALIASES.get(key, key)
                if name not in known:
                    msg = f"Unknown plugin option {key!r}."
                    raise ConfigurationError(msg)
                kwargs[name] = item
            return cls(**kwargs)
        msg = f"Plugin configuration must be a string, a mapping or a PluginInput, got {type(value).__name__}."
        raise ConfigurationError(msg)


PluginInputValue = Union[PluginInput, str, Mapping[str, Any]]

_INPUT_KEY_ALIASES = {
    "devServerUrl": "dev_server_url",
    "outDir": "out_dir",
    "publicEndpoint": "public_endpoint",
    "assetsEndpoint": "assets_endpoint",
}


@dataclass(frozen=True)
class ResolvedConfig:
    """Plugin configuration with every default applied."""

    dev_server_url: str
    entrypoints: "list[str]"
    refresh: RefreshConfig
    out_dir: str
    public_endpoint: str
    assets_endpoint: "str | Literal[False]"

    def to_dict(self) -> "dict[str, Any]":
        """Serialize using the bundler's option names.

        Returns:
            The configuration as a JSON compatible dictionary.
        """
        return {
            "devServerUrl": self.dev_server_url,
            "entrypoints": list(self.entrypoints),
            "refresh": self.refresh.to_dict(),
            "outDir": self.out_dir,
            "publicEndpoint": self.public_endpoint,
            "assetsEndpoint": self.assets_endpoint,
        }


class RefreshKind(str, Enum):
    """Shapes accepted for the ``refresh`` option."""

    UNSET = "unset"
    SINGLE_PATH = "single_path"
    PATH_LIST = "path_list"
    EXPLICIT = "explicit"


def classify_refresh(value: object) -> RefreshKind:
    """Identify the shape of a ``refresh`` value.

    Raises:
        InvalidRefreshError: If the value matches none of the accepted shapes.

    Returns:
        The refresh kind.
    """
    if value is None:
        return RefreshKind.UNSET
    if isinstance(value, str):
        return RefreshKind.SINGLE_PATH
    if isinstance(value, RefreshConfig):
        return RefreshKind.EXPLICIT
    if isinstance(value, Mapping):
        if "paths" in value and _is_path_list(value["paths"]):
            return RefreshKind.EXPLICIT
        raise InvalidRefreshError(value)
    if _is_path_list(value):
        return RefreshKind.PATH_LIST
    raise InvalidRefreshError(value)


def resolve_refresh(value: RefreshValue, entrypoints: "list[str]") -> RefreshConfig:
    """Resolve the full-reload watch set.

    Args:
        value: The user supplied ``refresh`` option.
        entrypoints: The resolved entrypoints, watched when nothing else is configured.

    Returns:
        The refresh configuration.
    """
    kind = classify_refresh(value)
    if kind is RefreshKind.UNSET:
        return RefreshConfig(paths=list(entrypoints))
    if kind is RefreshKind.SINGLE_PATH:
        return RefreshConfig(paths=[value])  # type: ignore[list-item]
    if kind is RefreshKind.PATH_LIST:
        return RefreshConfig(paths=list(value))  # type: ignore[arg-type]
    if isinstance(value, RefreshConfig):
        return value
    record: Mapping[str, Any] = value  # type: ignore[assignment]
    return RefreshConfig(paths=list(record["paths"]), extra_config=record.get("config", record.get("extraConfig")))


def resolve_assets_endpoint(
    value: "str | Literal[False] | None", context: "RunContext | None" = None
) -> "str | Literal[False]":
    """Resolve the endpoint serving built assets.

    An explicit ``False`` disables the endpoint and an explicit path wins over
    the environment. ``ASSET_URL`` is only honoured for production builds.

    Args:
        value: The user supplied ``assets_endpoint`` option.
        context: The bundler run context, when known.

    Raises:
        ConfigurationError: If the value is neither a string, False nor None.

    Returns:
        The normalized endpoint with a trailing slash, or ``False``.
    """
    if value is False:
        return False
    _check_optional_str("assets_endpoint", value, allow_false=True)
    if value:
        return f"{normalize(value)}/"
    if context is not None and context.is_production_build:
        env_value = context.environ.get(ASSET_URL_ENV)
        if env_value:
            return f"{normalize(env_value)}/"
    return False


def resolve_input(value: "PluginInputValue", context: "RunContext | None" = None) -> ResolvedConfig:
    """Merge user configuration with the defaults.

    Args:
        value: A :class:`PluginInput`, a mapping, or an entrypoint path.
        context: The bundler run context. Without it, ``ASSET_URL`` is not consulted.

    Raises:
        ConfigurationError: If an option has the wrong type or no entrypoint is set.

    Returns:
        The fully populated configuration.
    """
    plugin_input = PluginInput.from_value(value)
    _check_optional_str("out_dir", plugin_input.out_dir)
    _check_optional_str("public_endpoint", plugin_input.public_endpoint)
    entrypoints = _resolve_entrypoints(plugin_input.entrypoints)
    return ResolvedConfig(
        dev_server_url=_resolve_dev_server_url(plugin_input.dev_server_url),
        entrypoints=entrypoints,
        refresh=resolve_refresh(plugin_input.refresh, entrypoints),
        out_dir=normalize(plugin_input.out_dir) if plugin_input.out_dir else DEFAULT_OUT_DIR,
        public_endpoint=DEFAULT_PUBLIC_ENDPOINT if plugin_input.public_endpoint is None else plugin_input.public_endpoint,
        assets_endpoint=resolve_assets_endpoint(plugin_input.assets_endpoint, context),
    )


def _is_path_list(value: object) -> bool:
    return (
        isinstance(value, Sequence)
        and not isinstance(value, (str, bytes))
        and all(isinstance(item, str) for item in value)
    )


def _resolve_entrypoints(value: "str | Sequence[str] | None") -> "list[str]":
    if isinstance(value, str):
        entrypoints = [value] if value else []
    elif value is None:
        entrypoints = []
    elif _is_path_list(value):
        entrypoints = list(value)
    else:
        msg = f"Entrypoints must be a path or a list of paths, got {value!r}."
        raise ConfigurationError(msg)
    if not entrypoints:
        raise MissingEntrypointsError
    return entrypoints


def _check_optional_str(name: str, value: object, allow_false: bool = False) -> None:
    if value is None or isinstance(value, str) or (allow_false and value is False):
        return
    expected = "a string, False or None" if allow_false else "a string or None"
    msg = f"Option {name!r} must be {expected}, got {type(value).__name__}."
    raise ConfigurationError(msg)


def _resolve_dev_server_url(value: "str | None") -> str:
    if value is not None and not isinstance(value, str):
        msg = f"Invalid dev server URL {value!r}. Expected 'http://host:port' or 'https://host:port'."
        raise ConfigurationError(msg)
    if value is None:
        return DEFAULT_DEV_SERVER_URL
    parts = urlsplit(value)
    if parts.scheme not in {"http", "https"} or not parts.hostname:
        msg = f"Invalid dev server URL {value!r}. Expected 'http://host:port' or 'https://host:port'."
        raise ConfigurationError(msg)
    return value
