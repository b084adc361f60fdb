"""Constants shared by the configuration objects."""

__all__ = (
    "ASSET_URL_ENV",
    "DEFAULT_DEV_SERVER_URL",
    "DEFAULT_OUT_DIR",
    "DEFAULT_PUBLIC_ENDPOINT",
    "HMR_CLIENT_PATH",
    "ORIGIN_PLACEHOLDER",
    "PRODUCTION_ENV_VARS",
    "TRUE_VALUES",
)

TRUE_VALUES = {"True", "true", "1", "yes", "Y", "T"}

DEFAULT_DEV_SERVER_URL = "http://localhost:5173"
DEFAULT_OUT_DIR = "dist"
DEFAULT_PUBLIC_ENDPOINT = "/"

ASSET_URL_ENV = "ASSET_URL"
"""Environment variable holding the default assets endpoint for production builds."""

PRODUCTION_ENV_VARS = ("APP_ENV", "NODE_ENV", "LITESTAR_ENV")

ORIGIN_PLACEHOLDER = "__vite_bridge_origin_placeholder__"
"""Written into the bundler's ``server.origin`` and replaced with the dev server URL while serving."""

HMR_CLIENT_PATH = "@vite/client"
