"""Configuration management for Salary Calc.

Configuration is split into two files:

1. settings.json - Machine-specific settings
   - api_url: base URL of the calculation service
   - timeout: request timeout in seconds
   - profile: path to profile.yaml (optional, if not colocated)

2. profile.yaml - User's form defaults
   - state, filing_status, pay_frequency, allowances
   - pension_percent, hsa_contribution, tax_year

Config directory resolution:
1. SALARY_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/salary-calc/ (XDG_CONFIG_HOME fallback)

API URL resolution:
1. SALARY_CALC_API_URL environment variable (if set)
2. settings.json "api_url" key
3. http://localhost:8080
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

import yaml


APP_NAME = "salary-calc"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"

DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_TIMEOUT = 30.0

# Keys allowed in settings.json and their types
SETTINGS_SCHEMA = {
    "api_url": str,
    "timeout": float,
    "profile": str,
}

# Keys allowed in profile.yaml and their types
PROFILE_SCHEMA = {
    "state": str,
    "filing_status": str,
    "pay_frequency": str,
    "allowances": int,
    "pension_percent": float,
    "hsa_contribution": float,
    "tax_year": int,
}


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. SALARY_CALC_CONFIG_PATH environment variable
    2. ~/.config/salary-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("SALARY_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def unset_setting(key: str) -> bool:
    """Remove a setting from settings.json.

    Returns:
        True if the key was present and removed
    """
    settings = load_settings()
    if key not in settings:
        return False
    del settings[key]
    save_settings(settings)
    return True


def get_api_url() -> str:
    """Get the calculation service base URL (env > settings > default)."""
    env_url = os.environ.get("SALARY_CALC_API_URL")
    if env_url:
        return env_url
    return get_setting("api_url") or DEFAULT_API_URL


def get_timeout() -> float:
    """Get the request timeout in seconds."""
    timeout = get_setting("timeout")
    if timeout is None:
        return DEFAULT_TIMEOUT
    return float(timeout)


def get_profile_path(require_exists: bool = False) -> Path:
    """Get the path to the profile.yaml file.

    Resolution order:
    1. settings.json "profile" key (if set)
    2. profile.yaml in config directory

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    custom_profile = load_settings().get("profile")
    if custom_profile:
        profile_path = Path(custom_profile)
        if require_exists and not profile_path.exists():
            raise ProfileNotFoundError(
                f"Profile not found at configured path: {profile_path}\n\n"
                f"Update with: salary-calc settings set profile /path/to/profile.yaml"
            )
        return profile_path

    profile_path = get_config_dir() / PROFILE_FILENAME
    if require_exists and not profile_path.exists():
        raise ProfileNotFoundError(
            f"No profile found at {profile_path}\n\n"
            f"Create one with: salary-calc profile set state CA"
        )

    return profile_path


def load_profile(require_exists: bool = True) -> dict:
    """Load form defaults from profile.yaml.

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Returns:
        Profile dictionary (empty dict if not required and not found)
    """
    profile_path = get_profile_path(require_exists=require_exists)

    if not profile_path.exists():
        return {}

    with open(profile_path, "r") as f:
        return yaml.safe_load(f) or {}


def save_profile(profile: dict, path: Optional[Path] = None) -> Path:
    """Save form defaults to profile.yaml.

    Returns:
        Path to the saved profile file
    """
    if path is None:
        path = get_profile_path(require_exists=False)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(profile, f, default_flow_style=False, sort_keys=False)

    return path


def get_profile_value(key: str, default: Any = None) -> Any:
    """Get a profile value, or default if unset."""
    profile = load_profile(require_exists=False)
    return profile.get(key, default)


def set_profile_value(key: str, value: Any) -> Path:
    """Set a profile value.

    Returns:
        Path to the saved profile file
    """
    profile = load_profile(require_exists=False)
    profile[key] = value
    return save_profile(profile)


def unset_profile_value(key: str) -> bool:
    """Remove a profile value.

    Returns:
        True if the key was present and removed
    """
    profile = load_profile(require_exists=False)
    if key not in profile:
        return False
    del profile[key]
    save_profile(profile)
    return True


def validate_profile_key(key: str) -> tuple[bool, str]:
    """Validate that a key is allowed in profile.yaml.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if key not in PROFILE_SCHEMA:
        valid_keys = ", ".join(PROFILE_SCHEMA.keys())
        return False, f"Unknown profile key '{key}'. Valid keys: {valid_keys}"
    return True, ""


def validate_setting_key(key: str) -> tuple[bool, str]:
    """Validate that a key is allowed in settings.json.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if key not in SETTINGS_SCHEMA:
        valid_keys = ", ".join(SETTINGS_SCHEMA.keys())
        return False, f"Unknown setting '{key}'. Valid keys: {valid_keys}"
    return True, ""


def coerce_value(key: str, raw: str, schema: dict) -> Any:
    """Convert a command-line string to the type the schema expects.

    Raises:
        ValueError: If the key is unknown or raw can't be converted
    """
    expected_type = schema.get(key)
    if expected_type is None:
        raise ValueError(f"Unknown key '{key}'")
    try:
        return expected_type(raw)
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must be of type {expected_type.__name__}, got '{raw}'")


def coerce_profile_value(key: str, raw: str) -> Any:
    """Convert a command-line string to the type profile.yaml expects for key."""
    return coerce_value(key, raw, PROFILE_SCHEMA)


def coerce_setting_value(key: str, raw: str) -> Any:
    """Convert a command-line string to the type settings.json expects for key."""
    return coerce_value(key, raw, SETTINGS_SCHEMA)
