"""Vite commands module.

Helpers behind the ``litestar assets`` commands.
"""

import os
import platform
import shutil
import subprocess
import time
from typing import TYPE_CHECKING, Any

from litestar.serialization import encode_json

from vite_bridge.adapter import merge_config, vite_bridge
from vite_bridge.config import RunContext
from vite_bridge.exceptions import ViteExecutionError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from vite_bridge.config import Command, PluginInputValue


def to_json(value: Any) -> str:
    """Serialize JSON field values.

    Args:
        value: Any json serializable value.

    Returns:
        JSON string.
    """
    return encode_json(value).decode("utf-8")


def build_bundler_config(
    frontend: "PluginInputValue",
    command: "Command",
    mode: "str | None" = None,
    host_config: "Mapping[str, Any] | None" = None,
    environ: "Mapping[str, str] | None" = None,
) -> "dict[str, Any]":
    """Compute what the bundler plugins contribute for a run.

    Args:
        frontend: The bundler plugin configuration.
        command: ``serve`` or ``build``.
        mode: The bundler mode. Defaults from ``command``.
        host_config: The user's bundler configuration the overrides are merged onto.
        environ: Environment to resolve ``ASSET_URL`` from. Defaults to the process environment.

    Returns:
        The resolved plugin options, the overrides, the merged configuration and the full-reload watch set.
    """
    context = RunContext(command=command, mode=mode, environ=dict(os.environ if environ is None else environ))
    adapter, full_reload = vite_bridge(frontend)
    host_config = host_config or {}
    overrides = adapter.config(host_config, context)
    return {
        "command": context.command,
        "mode": context.mode,
        "plugin": adapter.resolved_config.to_dict(),
        "overrides": overrides,
        "config": merge_config(host_config, overrides),
        "fullReload": full_reload.to_dict(),
    }


def clean_build_dir(build_dir: "Path", max_retries: int = 3, retry_delay: float = 0.1) -> bool:
    """Remove a build output directory.

    Args:
        build_dir: The directory to remove.
        max_retries: How many times a failed removal is retried.
        retry_delay: Seconds to wait between attempts.

    Raises:
        OSError: If the directory still cannot be removed after the last retry.

    Returns:
        True if the directory existed and was removed.
    """
    if not build_dir.exists():
        return False
    for attempt in range(max_retries + 1):
        try:
            shutil.rmtree(build_dir)
        except FileNotFoundError:
            return True
        except OSError:
            if attempt == max_retries:
                raise
            time.sleep(retry_delay)
        else:
            return True
    return True


def execute_command(command_to_run: "list[str]", cwd: "Path | None" = None) -> "subprocess.CompletedProcess[bytes]":
    """Run a frontend command in a subprocess.

    Raises:
        ViteExecutionError: If the command exits with a non-zero status.

    Returns:
        The completed process.
    """
    process = subprocess.run(command_to_run, check=False, cwd=cwd, shell=platform.system() == "Windows")  # noqa: S603
    if process.returncode != 0:
        raise ViteExecutionError(command_to_run, process.returncode)
    return process
