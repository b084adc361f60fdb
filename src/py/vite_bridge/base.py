"""Public base path resolution."""

from typing import TYPE_CHECKING

from vite_bridge.paths import join_endpoint

if TYPE_CHECKING:
    from vite_bridge.config import ResolvedConfig, RunContext

__all__ = ("resolve_base",)


def resolve_base(host_base: "str | None", config: "ResolvedConfig", context: "RunContext") -> str:
    """Compute the public base path handed to the bundler.

    The precedence is fixed:

    1. a base set in the bundler configuration is always kept;
    2. the dev server serves from its root, so serving yields ``""``;
    3. an assets endpoint, when configured;
    4. ``public_endpoint`` joined with ``out_dir``.

    Args:
        host_base: The ``base`` option from the bundler configuration.
        config: The resolved plugin configuration.
        context: The bundler run context.

    Returns:
        The base path.
    """
    if host_base:
        return host_base
    if context.is_serve:
        return ""
    if config.assets_endpoint is not False:
        return config.assets_endpoint
    return join_endpoint(config.public_endpoint, config.out_dir)
