from unittest.mock import Mock

import pytest

from vite_bridge.exceptions import PageNotFoundError
from vite_bridge.helpers import resolve_page_component


def test_single_page() -> None:
    assert resolve_page_component("Pages/Home.vue", {"Pages/Home.vue": "home"}) == "home"


def test_fallback_order() -> None:
    pages = {"Pages/Home.vue": "home", "Pages/Index.vue": "index"}

    assert resolve_page_component(["Pages/Missing.vue", "Pages/Index.vue", "Pages/Home.vue"], pages) == "index"


def test_callable_page_is_invoked() -> None:
    loader = Mock(return_value="dashboard")
    other = Mock(return_value="other")

    page = resolve_page_component("Pages/Dashboard.vue", {"Pages/Dashboard.vue": loader, "Pages/Other.vue": other})

    assert page == "dashboard"
    loader.assert_called_once_with()
    other.assert_not_called()


def test_page_not_found() -> None:
    with pytest.raises(PageNotFoundError, match=r"^Page not found: Pages/A.vue$"):
        resolve_page_component("Pages/A.vue", {})


def test_page_not_found_lists_candidates() -> None:
    with pytest.raises(PageNotFoundError) as exc_info:
        resolve_page_component(["Pages/A.vue", "Pages/B.vue"], {"Pages/C.vue": "c"})

    assert str(exc_info.value) == "Page not found: Pages/A.vue, Pages/B.vue"
    assert exc_info.value.candidates == ["Pages/A.vue", "Pages/B.vue"]
    assert isinstance(exc_info.value, LookupError)
