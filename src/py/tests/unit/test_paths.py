import pytest

from vite_bridge.paths import join_endpoint, normalize


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/dist/", "dist"),
        ("/dist", "dist"),
        ("dist/", "dist"),
        ("dist", "dist"),
        ("\\dist\\", "dist"),
        ("\\", ""),
        ("/build/assets/", "build/assets"),
        ("/", ""),
        ("//", ""),
        ("", ""),
        ("///x//", "x"),
    ],
)
def test_normalize(path: str, expected: str) -> None:
    assert normalize(path) == expected


@pytest.mark.parametrize("path", ["//dist//", "\\\\cdn\\assets\\", "a/b", "/", "///"])
def test_normalize_is_idempotent(path: str) -> None:
    assert normalize(normalize(path)) == normalize(path)


@pytest.mark.parametrize(
    ("parts", "expected"),
    [
        (("/", "dist"), "/dist"),
        (("//", "dist"), "/dist"),
        (("///", "build"), "/build"),
        (("/public/", "build"), "/public/build"),
        (("/", "build/assets"), "/build/assets"),
        (("", "dist"), "dist"),
    ],
)
def test_join_endpoint(parts: "tuple[str, ...]", expected: str) -> None:
    assert join_endpoint(*parts) == expected
