from pathlib import Path
from typing import TYPE_CHECKING, Optional

from click import Choice, group, option
from click import Path as ClickPath
from litestar.cli._utils import LitestarGroup  # pyright: ignore[reportPrivateImportUsage]

if TYPE_CHECKING:
    from litestar import Litestar


@group(cls=LitestarGroup, name="assets")
def vite_group() -> None:
    """Manage Vite Tasks."""


@vite_group.command(
    name="config",
    help="Print the configuration the bundler plugin contributes, as JSON.",
)
@option(
    "--command",
    "bundler_command",
    type=Choice(["serve", "build"]),
    help="The bundler command to resolve the configuration for.",
    default="build",
    show_default=True,
)
@option("--mode", type=str, help="The bundler mode. Defaults to the command's default mode.", default=None)
@option(
    "--host-config",
    type=ClickPath(dir_okay=False, file_okay=True, exists=True, path_type=Path),
    help="A JSON file holding the bundler configuration to merge the overrides onto.",
    default=None,
    required=False,
)
@option(
    "--output",
    type=ClickPath(dir_okay=False, path_type=Path),
    help="Write the JSON to this file instead of printing it.",
    default=None,
    required=False,
)
def vite_config(
    app: "Litestar",
    bundler_command: str,
    mode: "Optional[str]",
    host_config: "Optional[Path]",
    output: "Optional[Path]",
) -> None:
    """Print the bundler configuration."""
    from litestar.cli._utils import LitestarCLIException, console  # pyright: ignore[reportPrivateImportUsage]
    from litestar.serialization import decode_json

    from vite_bridge.commands import build_bundler_config, to_json
    from vite_bridge.exceptions import ConfigurationError
    from vite_bridge.plugin import VitePlugin

    plugin = app.plugins.get(VitePlugin)
    if plugin.config.frontend is None:
        msg = "No bundler plugin configuration. Set `ViteConfig.frontend`."
        raise LitestarCLIException(msg)
    host = decode_json(host_config.read_text(encoding="utf-8")) if host_config is not None else None
    try:
        data = build_bundler_config(plugin.config.frontend, bundler_command, mode, host)  # type: ignore[arg-type]
    except ConfigurationError as e:
        raise LitestarCLIException(str(e)) from e
    if output is None:
        console.print_json(to_json(data))
        return
    output.write_text(to_json(data), encoding="utf-8")
    console.print(f"[green]Bundler configuration written to {output}[/]")


@vite_group.command(
    name="clean",
    help="Remove the built frontend assets.",
)
@option(
    "--build-dir",
    type=ClickPath(dir_okay=True, file_okay=False, path_type=Path),
    help="The directory to remove. Defaults to the bundler output directory.",
    default=None,
    required=False,
)
def vite_clean(app: "Litestar", build_dir: "Optional[Path]") -> None:
    """Remove the build output directory."""
    from litestar.cli._utils import console  # pyright: ignore[reportPrivateImportUsage]

    from vite_bridge.commands import clean_build_dir
    from vite_bridge.config import resolve_input
    from vite_bridge.plugin import VitePlugin

    config = app.plugins.get(VitePlugin).config
    if build_dir is None:
        root_dir = Path(config.root_dir or Path.cwd())
        build_dir = (
            root_dir / resolve_input(config.frontend).out_dir
            if config.frontend is not None
            else Path(config.bundle_dir)
        )
    if clean_build_dir(build_dir):
        console.print(f"[green]Removed {build_dir}[/]")
    else:
        console.print(f"[yellow]Nothing to remove at {build_dir}[/]")


@vite_group.command(
    name="status",
    help="Check the status of the Vite integration.",
)
def vite_status(app: "Litestar") -> None:
    """Check the status of the Vite integration."""
    from litestar.cli._utils import console  # pyright: ignore[reportPrivateImportUsage]
    from rich.table import Table

    from vite_bridge.loader import check_heart_beat, is_production_environment
    from vite_bridge.plugin import VitePlugin

    config = app.plugins.get(VitePlugin).config

    console.rule("[yellow]Vite Integration Status[/]", align="left")
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="dim")
    table.add_column("Value")
    table.add_row("Forced Mode", str(config.force_mode.value if config.force_mode else None))  # type: ignore[union-attr]
    table.add_row("Dev Server Enabled", str(config.enable_dev_server))
    table.add_row("Production Environment", str(is_production_environment()))
    table.add_row("Asset Prefix", config.asset_path)
    console.print(table)

    manifest_path = Path(config.manifest_path)
    if manifest_path.exists():
        console.print(f"[green]✓ Manifest found at {manifest_path}[/]")
    else:
        console.print(f"[red]✗ Manifest not found at {manifest_path}[/]")

    if config.enable_dev_server:
        if check_heart_beat(config.dev_server_url, timeout=0.5):
            console.print(f"[green]✓ Vite server running at {config.dev_server_url}[/]")
        else:
            console.print(f"[red]✗ Vite server not reachable at {config.dev_server_url}[/]")


@vite_group.command(
    name="build",
    help="Building frontend assets with Vite.",
)
@option("--verbose", type=bool, help="Enable verbose output.", default=False, is_flag=True)
def vite_build(app: "Litestar", verbose: "bool") -> None:
    """Run vite build."""
    from litestar.cli._utils import console  # pyright: ignore[reportPrivateImportUsage]

    from vite_bridge.commands import execute_command
    from vite_bridge.exceptions import ViteExecutionError
    from vite_bridge.plugin import VitePlugin

    if verbose:
        app.debug = True
    console.rule("[yellow]Starting Vite build process[/]", align="left")
    config = app.plugins.get(VitePlugin).config
    try:
        execute_command(config.build_command, cwd=Path(config.root_dir or Path.cwd()))
        console.print("[bold green] Assets built.[/]")
    except ViteExecutionError as e:
        console.print(f"[bold red] There was an error building the assets: {e!s}[/]")


@vite_group.command(
    name="serve",
    help="Serving frontend assets with Vite.",
)
@option("--verbose", type=bool, help="Enable verbose output.", default=False, is_flag=True)
def vite_serve(app: "Litestar", verbose: "bool") -> None:
    """Run vite serve."""
    from litestar.cli._utils import console  # pyright: ignore[reportPrivateImportUsage]

    from vite_bridge.commands import execute_command
    from vite_bridge.exceptions import ViteExecutionError
    from vite_bridge.plugin import VitePlugin

    if verbose:
        app.debug = True
    console.rule("[yellow]Starting Vite dev server[/]", align="left")
    config = app.plugins.get(VitePlugin).config
    try:
        execute_command(config.run_command, cwd=Path(config.root_dir or Path.cwd()))
        console.print("[yellow]Vite process stopped.[/]")
    except ViteExecutionError as e:
        console.print(f"[bold red] Vite process failed: {e!s}[/]")
