"""Configuration management for Cash Forecast.

Configuration is split into two files:

1. settings.json - Machine-specific, ephemeral settings
   - profile: path to profile.yaml (optional, if not colocated)
   - horizon_months: forecast length (default 12)

2. profile.yaml - User's personal configuration
   - user_settings: starting balance, minimum buffer
   - paycheck_config: pay inputs, deductions, frequency, next pay date
   - expenses: recurring and one-off obligations

Config directory resolution:
1. CASH_FORECAST_CONFIG_PATH environment variable (if set)
2. ~/.config/cash-forecast/ (XDG_CONFIG_HOME fallback)

Profile resolution:
1. settings.json "profile" key (if set via CLI)
2. profile.yaml in same config directory
"""

import json
import os
from pathlib import Path
from typing import Any, List, Optional

import yaml

from .forecast import DEFAULT_HORIZON_MONTHS
from .schemas import Expense, ForecastProfile


APP_NAME = "cash-forecast"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. CASH_FORECAST_CONFIG_PATH environment variable
    2. ~/.config/cash-forecast/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    # 1. Check environment variable
    env_path = os.environ.get("CASH_FORECAST_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    # 2. Fall back to XDG config path
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

    Args:
        settings: Settings dictionary to save

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


def get_horizon_months() -> int:
    """Forecast horizon length from settings, falling back to 12 months."""
    value = get_setting("horizon_months", DEFAULT_HORIZON_MONTHS)
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return DEFAULT_HORIZON_MONTHS


def get_profile_path(require_exists: bool = False) -> Path:
    """Get the path to the profile.yaml file.

    Resolution order:
    1. settings.json "profile" key (if set)
    2. profile.yaml in config directory

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Returns:
        Path to profile.yaml

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    config_dir = get_config_dir()

    # 1. Check settings.json for custom profile path
    settings = load_settings()
    custom_profile = settings.get("profile")
    if custom_profile:
        profile_path = Path(custom_profile)
        if require_exists and not profile_path.exists():
            raise ProfileNotFoundError(
                f"Profile not found at configured path: {profile_path}\n\n"
                f"Update with: cash-forecast profile use /path/to/profile.yaml"
            )
        return profile_path

    # 2. Check for profile.yaml in config directory
    profile_path = config_dir / PROFILE_FILENAME
    if require_exists and not profile_path.exists():
        raise ProfileNotFoundError(
            f"No profile found. Checked:\n"
            f"  1. settings.json 'profile' key (not set)\n"
            f"  2. {profile_path} (not found)\n\n"
            f"Create a profile with: cash-forecast profile init\n"
            f"Or set a custom path: cash-forecast profile use /path/to/profile.yaml"
        )

    return profile_path


def load_profile(require_exists: bool = True) -> dict:
    """Load the raw profile dictionary from profile.yaml.

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
    """Save the raw profile dictionary to profile.yaml.

    Args:
        profile: Profile dictionary to save
        path: Optional custom path (uses default if not specified)

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
    """Get a profile value by dot-notation key.

    Args:
        key: Dot-notation key (e.g., "user_settings.minimum_buffer")
        default: Default value if key not found
    """
    profile = load_profile(require_exists=False)

    parts = key.split(".")
    value = profile

    for part in parts:
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default

    return value


def set_profile_value(key: str, value: Any) -> Path:
    """Set a profile value by dot-notation key.

    Returns:
        Path to the saved profile file
    """
    profile = load_profile(require_exists=False)

    parts = key.split(".")
    current = profile

    # Navigate/create nested structure
    for part in parts[:-1]:
        if part not in current or not isinstance(current[part], dict):
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value

    return save_profile(profile)


# =============================================================================
# Typed profile access
# =============================================================================

def load_forecast_profile(require_exists: bool = True) -> ForecastProfile:
    """Load and validate profile.yaml as a ForecastProfile.

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
        pydantic.ValidationError: If the profile has the wrong shape
    """
    return ForecastProfile.model_validate(load_profile(require_exists=require_exists))


def save_forecast_profile(profile: ForecastProfile, path: Optional[Path] = None) -> Path:
    """Write a ForecastProfile back to profile.yaml."""
    return save_profile(profile.model_dump(mode="json"), path)


def add_expense(expense: Expense) -> Path:
    """Append an expense to the profile.

    Raises:
        ValueError: If an expense with the same id already exists
    """
    profile = load_forecast_profile(require_exists=False)
    if any(existing.id == expense.id for existing in profile.expenses):
        raise ValueError(f"Expense id already exists: {expense.id}")
    profile.expenses.append(expense)
    return save_forecast_profile(profile)


def remove_expense(expense_id: str) -> Optional[Expense]:
    """Remove an expense by id (or unique id prefix).

    Returns:
        The removed expense, or None if nothing matched
    """
    profile = load_forecast_profile(require_exists=True)
    matches = find_expenses(profile.expenses, expense_id)
    if len(matches) != 1:
        return None
    removed = matches[0]
    profile.expenses = [e for e in profile.expenses if e.id != removed.id]
    save_forecast_profile(profile)
    return removed


def find_expenses(expenses: List[Expense], id_or_prefix: str) -> List[Expense]:
    """Expenses whose id equals, or starts with, the given value."""
    exact = [e for e in expenses if e.id == id_or_prefix]
    if exact:
        return exact
    return [e for e in expenses if e.id.startswith(id_or_prefix)]

