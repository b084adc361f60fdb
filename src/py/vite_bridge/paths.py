"""Endpoint and path normalization."""

import posixpath
import re

__all__ = ("join_endpoint", "normalize")

_LEADING_SLASHES = re.compile(r"^/+")


def normalize(path: str) -> str:
    """Normalize an endpoint or directory path.

    Backslashes become forward slashes and every surrounding slash is removed,
    so ``"/dist/"``, ``"\\dist"`` and ``"dist"`` all normalize to ``"dist"`` while
    ``"/"`` and ``"//"`` normalize to an empty string. Runs of slashes are
    stripped whole, not one at a time: ``"///x//"`` normalizes to ``"x"``, so
    normalizing twice gives the same result as normalizing once.

    Args:
        path: The path to normalize.

    Returns:
        The normalized path.
    """
    return path.replace("\\", "/").strip("/")


def join_endpoint(*parts: str) -> str:
    """Join URL path segments the way the bundler joins its public paths.

    A leading run of slashes collapses to one, so the result is never a
    protocol-relative URL.

    Returns:
        The joined and collapsed path, e.g. ``/dist`` for ``("/", "dist")`` or ``("//", "dist")``.
    """
    joined = posixpath.normpath(posixpath.join(*(part.replace("\\", "/") for part in parts)))
    return _LEADING_SLASHES.sub("/", joined)
