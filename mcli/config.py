# SPDX-License-Identifier: MIT
"""Configuration reader for mcli.

Settings come from three places, highest priority first: environment
variables (optionally loaded from a .env file), the JSON settings file,
and built-in defaults.
"""
import json
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from .paths import PathResolver

DEFAULT_API_BASE_URL = "http://localhost:3000"
DEFAULT_REQUEST_TIMEOUT = 10.0


def get_settings_path() -> Path:
    """Get path to the mcli settings.json.

    Returns:
        Path to settings.json, respecting MCLI_SETTINGS env var.
    """
    custom = os.environ.get("MCLI_SETTINGS")
    if custom:
        return Path(custom)
    return PathResolver.config_dir() / "settings.json"


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value by dot-notation key.

    Args:
        key: Dot-notation key like "api.baseUrl"
        default: Default value if key not found

    Returns:
        Setting value or default
    """
    settings_path = get_settings_path()

    if not settings_path.exists():
        return default

    try:
        with open(settings_path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError):
        return default

    current = data
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]

    return current


def get_int_setting(key: str, default: int = 0) -> int:
    """Get an integer setting, falling back to default if conversion fails."""
    value = get_setting(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def load_env_file(path: Optional[Path] = None) -> bool:
    """Load a .env file into the environment without overriding set vars.

    Looks in the current directory first, then the config directory.

    Returns:
        True if a file was loaded.
    """
    candidates = [path] if path else [Path.cwd() / ".env", PathResolver.config_dir() / ".env"]
    for candidate in candidates:
        if candidate.is_file():
            return load_dotenv(candidate, override=False)
    return False


def get_api_base_url() -> str:
    """Resolve the events API base URL.

    Resolution order:
    1. API_BASE_URL env var (a .env file may provide it)
    2. "api.baseUrl" setting
    3. http://localhost:3000
    """
    load_env_file()
    url = os.environ.get("API_BASE_URL") or get_setting("api.baseUrl") or DEFAULT_API_BASE_URL
    return str(url).rstrip("/")


def get_request_timeout() -> float:
    """Per-request timeout in seconds from the "api.timeout" setting."""
    value = get_setting("api.timeout", DEFAULT_REQUEST_TIMEOUT)
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        return DEFAULT_REQUEST_TIMEOUT
    return timeout if timeout > 0 else DEFAULT_REQUEST_TIMEOUT
