import hashlib
import logging
from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from vite_bridge.config import ViteConfig, ViteMode
from vite_bridge.exceptions import ManifestNotFoundError
from vite_bridge.loader import (
    Asset,
    AssetKind,
    ViteAssetLoader,
    check_heart_beat,
    check_heart_beat_async,
    is_production_environment,
)

pytestmark = pytest.mark.anyio


def test_parse_manifest_when_file_exists(vite_config: ViteConfig, manifest_path: Path) -> None:
    loader = ViteAssetLoader.initialize_loader(config=vite_config)

    assert loader.mode is ViteMode.MANIFEST
    assert loader._manifest is not None
    assert loader._manifest["resources/js/main.ts"]["file"] == "assets/main-4a1b.js"
    assert loader.manifest_content == manifest_path.read_text(encoding="utf-8")


def test_parse_manifest_when_file_not_exists(tmp_path: Path) -> None:
    config = ViteConfig(manifest_path=tmp_path / "missing.json", force_mode="manifest")

    with pytest.raises(ManifestNotFoundError, match="Did you forget to build your assets"):
        ViteAssetLoader.initialize_loader(config=config)


def test_parse_manifest_invalid_json(tmp_path: Path) -> None:
    manifest = tmp_path / "manifest.json"
    manifest.write_text("{not json", encoding="utf-8")

    with pytest.raises(ManifestNotFoundError):
        ViteAssetLoader.initialize_loader(config=ViteConfig(manifest_path=manifest, force_mode="manifest"))


def test_mode_before_initialize(vite_config: ViteConfig) -> None:
    with pytest.raises(RuntimeError, match="not been initialized"):
        _ = ViteAssetLoader(vite_config).mode


def test_generate_asset_tags(vite_config: ViteConfig) -> None:
    loader = ViteAssetLoader.initialize_loader(config=vite_config)

    assert loader.get_tags().splitlines() == [
        '<link rel="stylesheet" href="/dist/assets/main-77aa.css" />',
        '<link rel="stylesheet" href="/dist/assets/shared-12ef.css" />',
        '<script type="module" src="/dist/assets/main-4a1b.js"></script>',
        '<link rel="preload" as="image" href="/dist/assets/logo-5e1d.svg" />',
        '<link rel="modulepreload" href="/dist/assets/shared-9f2c.js" />',
    ]
    assert loader.get_resolved_vite_scripts() == loader.get_tags()


def test_generate_asset_tags_with_app_url_and_prefix(vite_config: ViteConfig) -> None:
    vite_config.app_url = "https://app.test/"
    vite_config.prefix = "/static/"
    loader = ViteAssetLoader.initialize_loader(config=vite_config)

    assert '<script type="module" src="https://app.test/static/assets/main-4a1b.js"></script>' in loader.get_tags()


def test_generate_asset_tags_without_prefix(vite_config: ViteConfig) -> None:
    vite_config.prefix = "/"
    loader = ViteAssetLoader.initialize_loader(config=vite_config)

    assert '<script type="module" src="/assets/main-4a1b.js"></script>' in loader.get_tags()


def test_entrypoints_from_manifest(vite_config: ViteConfig) -> None:
    vite_config.entrypoints = None
    loader = ViteAssetLoader.initialize_loader(config=vite_config)

    assert loader.entrypoints == ["resources/js/main.ts", "resources/css/app.css"]
    tags = loader.get_tags().splitlines()
    assert tags[0] == '<link rel="stylesheet" href="/dist/assets/app-3c3c.css" />'
    assert tags.count('<script type="module" src="/dist/assets/main-4a1b.js"></script>') == 1


def test_tags_are_deduplicated(vite_config: ViteConfig) -> None:
    vite_config.entrypoints = ["resources/js/main.ts", "resources/js/main.ts"]
    loader = ViteAssetLoader.initialize_loader(config=vite_config)

    assert len(loader.get_tags().splitlines()) == 5


def test_unknown_entrypoint_is_skipped(vite_config: ViteConfig, caplog: pytest.LogCaptureFixture) -> None:
    vite_config.entrypoints = ["resources/js/missing.ts", "resources/css/app.css"]
    loader = ViteAssetLoader.initialize_loader(config=vite_config)

    with caplog.at_level(logging.WARNING, logger="vite_bridge"):
        tags = loader.get_tags()

    assert tags == '<link rel="stylesheet" href="/dist/assets/app-3c3c.css" />'
    assert "resources/js/missing.ts" in caplog.text


def test_empty_manifest(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    manifest = tmp_path / "manifest.json"
    manifest.write_text("{}", encoding="utf-8")
    loader = ViteAssetLoader.initialize_loader(
        config=ViteConfig(manifest_path=manifest, force_mode="manifest", entrypoints=["a.ts"])
    )

    with caplog.at_level(logging.ERROR, logger="vite_bridge"):
        assert loader.get_tags() == ""

    assert "empty" in caplog.text


def test_version_id(vite_config: ViteConfig, manifest_path: Path) -> None:
    loader = ViteAssetLoader.initialize_loader(config=vite_config)

    assert loader.version_id == hashlib.md5(manifest_path.read_bytes()).hexdigest()  # noqa: S324


def test_development_mode(vite_config: ViteConfig) -> None:
    vite_config.force_mode = ViteMode.DEVELOPMENT
    vite_config.entrypoints = ["resources/js/main.ts", "resources/css/app.css"]
    loader = ViteAssetLoader.initialize_loader(config=vite_config)

    assert loader.version_id is None
    assert loader.get_development_scripts() == (
        '<script type="module" src="http://localhost:5173/resources/js/main.ts"></script>\n'
        '<link rel="stylesheet" href="http://localhost:5173/resources/css/app.css" />'
    )
    assert loader.get_hmr_script() == '<script type="module" src="http://localhost:5173/@vite/client"></script>'
    assert loader.get_resolved_vite_scripts().endswith(loader.get_hmr_script())
    assert "import RefreshRuntime from 'http://localhost:5173/@react-refresh'" in loader.get_react_script()


def test_manifest_mode_has_no_dev_scripts(vite_config: ViteConfig) -> None:
    loader = ViteAssetLoader.initialize_loader(config=vite_config)

    assert loader.get_hmr_script() == ""
    assert loader.get_react_script() == ""


def test_get_asset_url(vite_config: ViteConfig, caplog: pytest.LogCaptureFixture) -> None:
    loader = ViteAssetLoader.initialize_loader(config=vite_config)

    assert loader.get_asset_url("/resources/images/logo.svg") == "/dist/assets/logo-5e1d.svg"
    assert loader.get_asset_url("'resources/images/logo.svg'") == "/dist/assets/logo-5e1d.svg"
    with caplog.at_level(logging.WARNING, logger="vite_bridge"):
        assert loader.get_asset_url("resources/images/missing.png") == ""
    assert "resources/images/missing.png" in caplog.text


def test_get_asset_url_development(vite_config: ViteConfig) -> None:
    vite_config.force_mode = ViteMode.DEVELOPMENT
    loader = ViteAssetLoader.initialize_loader(config=vite_config)

    assert loader.get_asset_url("resources/images/logo.svg") == "http://localhost:5173/resources/images/logo.svg"


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("/a.js", '<link rel="modulepreload" href="/a.js" />'),
        ("/a.mjs", '<link rel="modulepreload" href="/a.mjs" />'),
        ("/a.css", '<link rel="preload" as="style" href="/a.css" />'),
        ("/a.webp", '<link rel="preload" as="image" href="/a.webp" />'),
        ("/a.woff2", '<link rel="preload" as="font" href="/a.woff2" />'),
        ("/a.mp4", '<link rel="preload" as="video" href="/a.mp4" />'),
        ("/a.mp3", '<link rel="preload" as="audio" href="/a.mp3" />'),
        ("/a.txt", ""),
    ],
)
def test_preload_tags(url: str, expected: str) -> None:
    assert Asset(AssetKind.PRELOAD, url).to_html() == expected


@pytest.mark.parametrize(
    ("env", "expected"),
    [
        ({}, False),
        ({"APP_ENV": "production"}, True),
        ({"NODE_ENV": "production"}, True),
        ({"LITESTAR_ENV": "true"}, True),
        ({"APP_ENV": "development"}, False),
    ],
)
def test_is_production_environment(monkeypatch: pytest.MonkeyPatch, env: "dict[str, str]", expected: bool) -> None:
    for key, value in env.items():
        monkeypatch.setenv(key, value)

    assert is_production_environment() is expected


def test_check_heart_beat() -> None:
    with patch("vite_bridge.loader.httpx.get", return_value=Mock(status_code=200)) as mock_get:
        assert check_heart_beat("http://localhost:5173/", timeout=0.5) is True

    mock_get.assert_called_once_with("http://localhost:5173/@vite/client", timeout=0.5)

    with patch("vite_bridge.loader.httpx.get", return_value=Mock(status_code=404)):
        assert check_heart_beat("http://localhost:5173") is False


def test_check_heart_beat_unreachable(caplog: pytest.LogCaptureFixture) -> None:
    with patch("vite_bridge.loader.httpx.get", side_effect=httpx.ConnectError("refused")):
        assert check_heart_beat("http://localhost:5173") is False

    assert "Failed to reach the Vite dev server" in caplog.text


async def test_check_heart_beat_async() -> None:
    with patch.object(httpx.AsyncClient, "get", AsyncMock(return_value=Mock(status_code=200))):
        assert await check_heart_beat_async("http://localhost:5173") is True

    with patch.object(httpx.AsyncClient, "get", AsyncMock(side_effect=httpx.ConnectError("refused"))):
        assert await check_heart_beat_async("http://localhost:5173") is False


def test_mode_discovery_uses_heart_beat(vite_config: ViteConfig) -> None:
    vite_config.force_mode = None

    with patch("vite_bridge.loader.check_heart_beat", return_value=True) as heart_beat:
        loader = ViteAssetLoader.initialize_loader(config=vite_config)

    heart_beat.assert_called_once_with("http://localhost:5173", 10.0)
    assert loader.mode is ViteMode.DEVELOPMENT

    with patch("vite_bridge.loader.check_heart_beat", return_value=False):
        assert ViteAssetLoader.initialize_loader(config=vite_config).mode is ViteMode.MANIFEST


@pytest.mark.parametrize(
    ("overrides", "env", "expected"),
    [
        ({"use_heart_beat_check": False}, {}, ViteMode.DEVELOPMENT),
        ({"enable_dev_server": False}, {}, ViteMode.MANIFEST),
        ({}, {"APP_ENV": "production"}, ViteMode.MANIFEST),
        ({"force_mode": ViteMode.DEVELOPMENT, "enable_dev_server": False}, {}, ViteMode.DEVELOPMENT),
    ],
)
def test_mode_discovery_without_heart_beat(
    monkeypatch: pytest.MonkeyPatch,
    vite_config: ViteConfig,
    overrides: "dict[str, object]",
    env: "dict[str, str]",
    expected: ViteMode,
) -> None:
    vite_config.force_mode = None
    for key, value in overrides.items():
        setattr(vite_config, key, value)
    for key, value in env.items():
        monkeypatch.setenv(key, value)

    with patch("vite_bridge.loader.check_heart_beat") as heart_beat:
        loader = ViteAssetLoader.initialize_loader(config=vite_config)

    heart_beat.assert_not_called()
    assert loader.mode is expected


async def test_initialize_async(vite_config: ViteConfig, manifest_path: Path) -> None:
    vite_config.force_mode = None

    with patch("vite_bridge.loader.check_heart_beat_async", AsyncMock(return_value=False)) as heart_beat:
        loader = ViteAssetLoader(vite_config)
        await loader.initialize()
        await loader.initialize()

    heart_beat.assert_awaited_once()
    assert loader.mode is ViteMode.MANIFEST
    assert loader.manifest_content == manifest_path.read_text(encoding="utf-8")
    assert "/dist/assets/main-4a1b.js" in loader.get_tags()


async def test_initialize_async_missing_manifest(tmp_path: Path) -> None:
    loader = ViteAssetLoader(ViteConfig(manifest_path=tmp_path / "missing.json", force_mode="manifest"))

    with pytest.raises(ManifestNotFoundError):
        await loader.initialize()
