from pathlib import Path

from litestar import Litestar, get
from litestar.response import Template

from vite_bridge import ViteConfig, VitePlugin

here = Path(__file__).parent


@get("/")
async def index() -> Template:
    return Template(template_name="index.html", context={"title": "Vite + Litestar App"})


vite = VitePlugin(
    config=ViteConfig(
        manifest_path=here / "public" / ".vite" / "manifest.json",
        bundle_dir=here / "public",
        prefix="public",
        template_dir=here / "templates",
        root_dir=here,
        frontend={
            "entrypoints": ["resources/main.ts", "resources/styles.css"],
            "outDir": "public",
            "refresh": ["templates/**"],
        },
    )
)

app = Litestar(
    route_handlers=[index],
    plugins=[vite],
    debug=True,
)
