"""Page component lookup."""

from collections.abc import Callable, Mapping
from typing import TypeVar, Union

from vite_bridge.exceptions import PageNotFoundError

__all__ = ("resolve_page_component",)

T = TypeVar("T")


def resolve_page_component(path: "str | list[str]", pages: "Mapping[str, Union[T, Callable[[], T]]]") -> T:
    """Resolve a page component by name, trying fallbacks in order.

    Args:
        path: A page name or an ordered list of candidate names.
        pages: Mapping of page names to components, or to callables producing them.

    Raises:
        PageNotFoundError: If none of the candidates exist in ``pages``.

    Returns:
        The first matching component. Callables are invoked and their result returned.

    Example::

        pages = {"Pages/Home.vue": lambda: import_module("pages.home")}
        resolve_page_component(["Pages/Dashboard.vue", "Pages/Home.vue"], pages)
    """
    candidates = [path] if isinstance(path, str) else list(path)
    for candidate in candidates:
        if candidate not in pages:
            continue
        page = pages[candidate]
        return page() if callable(page) else page  # type: ignore[return-value]
    raise PageNotFoundError(candidates)
