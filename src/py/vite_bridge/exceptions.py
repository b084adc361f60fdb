"""Vite-Bridge exception classes."""

__all__ = [
    "AdapterStateError",
    "ConfigurationError",
    "InvalidRefreshError",
    "ManifestNotFoundError",
    "MissingEntrypointsError",
    "PageNotFoundError",
    "ViteBridgeError",
    "ViteExecutionError",
]


class ViteBridgeError(Exception):
    """Base exception for Vite-Bridge related errors."""


class ConfigurationError(ViteBridgeError, ValueError):
    """Raised when the plugin or backend configuration is invalid."""


class MissingEntrypointsError(ConfigurationError):
    """Raised when no entrypoint was configured."""

    def __init__(self) -> None:
        super().__init__("At least one entrypoint is required. Set `entrypoints` to a path or a list of paths.")


class InvalidRefreshError(ConfigurationError, TypeError):
    """Raised when ``refresh`` is neither a path, a list of paths nor a ``{paths, config}`` record."""

    def __init__(self, value: object) -> None:
        super().__init__(
            f"Invalid refresh configuration {value!r} ({type(value).__name__}). "
            "Expected a path, a list of paths or a mapping with a 'paths' key."
        )
        self.value = value


class AdapterStateError(ViteBridgeError, RuntimeError):
    """Raised when a bundler hook is invoked before the hook it depends on."""


class PageNotFoundError(ViteBridgeError, LookupError):
    """Raised when none of the candidate page names exist."""

    def __init__(self, candidates: "list[str]") -> None:
        super().__init__(f"Page not found: {', '.join(candidates)}")
        self.candidates = candidates


class ManifestNotFoundError(ViteBridgeError):
    """Raised when the manifest file is not found or cannot be parsed."""

    def __init__(self, manifest_path: str) -> None:
        super().__init__(f"Vite manifest file not found at {manifest_path!r}. Did you forget to build your assets?")
        self.manifest_path = manifest_path


class ViteExecutionError(ViteBridgeError):
    """Raised when a frontend command fails."""

    def __init__(self, command: "list[str]", return_code: int, stderr: str = "") -> None:
        super().__init__(f"Command {command!r} failed with return code {return_code}.\nStderr: {stderr}")
        self.command = command
        self.return_code = return_code
        self.stderr = stderr
