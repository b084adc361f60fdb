from collections.abc import Generator
from pathlib import Path

import pytest

from vite_bridge.config import ViteConfig

# Environment variables that may affect test behavior - clear before each test
_VITE_ENV_VARS = [
    "ASSET_URL",
    "APP_URL",
    "VITE_DEV_SERVER_URL",
    "VITE_ENABLE_DEV_SERVER",
    "APP_ENV",
    "NODE_ENV",
    "LITESTAR_ENV",
]

MANIFEST = """{
  "resources/js/main.ts": {
    "file": "assets/main-4a1b.js",
    "src": "resources/js/main.ts",
    "isEntry": true,
    "imports": ["_shared-9f2c.js"],
    "css": ["assets/main-77aa.css"],
    "assets": ["assets/logo-5e1d.svg"]
  },
  "_shared-9f2c.js": {
    "file": "assets/shared-9f2c.js",
    "css": ["assets/shared-12ef.css"]
  },
  "resources/css/app.css": {
    "file": "assets/app-3c3c.css",
    "src": "resources/css/app.css",
    "isEntry": true
  },
  "resources/images/logo.svg": {
    "file": "assets/logo-5e1d.svg",
    "src": "resources/images/logo.svg"
  }
}
"""


@pytest.fixture(autouse=True)
def clean_vite_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear Vite-related environment variables before each test for isolation."""
    for var in _VITE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def manifest_path(tmp_path: Path) -> Generator[Path, None, None]:
    path = tmp_path / "dist" / ".vite" / "manifest.json"
    path.parent.mkdir(parents=True)
    path.write_text(MANIFEST, encoding="utf-8")
    yield path


@pytest.fixture
def vite_config(tmp_path: Path, manifest_path: Path) -> Generator[ViteConfig, None, None]:
    yield ViteConfig(
        manifest_path=manifest_path,
        bundle_dir=tmp_path / "dist",
        entrypoints=["resources/js/main.ts"],
        force_mode="manifest",
        app_url=None,
    )
