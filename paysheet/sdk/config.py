"""Configuration management for Pay Sheet.

Configuration is split into two files:

1. settings.json - Machine-specific settings
   - profile: path to profile.yaml (optional, if not colocated)
   - data_dir: where exported timesheets are written
   - timezone: override for the profile timezone on this machine

2. profile.yaml - The employee's configuration
   - employee: name and email of the person filing timesheets
   - recipients: who receives the submitted timesheet
   - smtp: outgoing mail server
   - timesheet: hours_per_day
   - timezone: IANA zone the schedule runs in

Config directory resolution:
1. PAY_SHEET_CONFIG_PATH environment variable (if set)
2. ~/.config/pay-sheet/ (XDG_CONFIG_HOME fallback)

Profile resolution:
1. settings.json "profile" key (if set via CLI)
2. profile.yaml in same config directory

Data path follows XDG spec:
- settings.json "data_dir", else XDG_DATA_HOME/pay-sheet/ or ~/.local/share/pay-sheet/
"""

import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .resolver import DEFAULT_TIMEZONE


APP_NAME = "pay-sheet"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"

DEFAULT_HOURS_PER_DAY = 7.5

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ConfigNotFoundError(Exception):
    """Raised when required configuration is missing."""
    pass


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. PAY_SHEET_CONFIG_PATH environment variable
    2. ~/.config/pay-sheet/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("PAY_SHEET_CONFIG_PATH")
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
    config_dir = get_config_dir()

    custom_profile = load_settings().get("profile")
    if custom_profile:
        profile_path = Path(custom_profile)
        if require_exists and not profile_path.exists():
            raise ProfileNotFoundError(
                f"Profile not found at configured path: {profile_path}\n\n"
                f"Update with: pay-sheet profile use /path/to/profile.yaml"
            )
        return profile_path

    profile_path = config_dir / PROFILE_FILENAME
    if profile_path.exists():
        return profile_path

    if require_exists:
        raise ProfileNotFoundError(
            f"No profile found. Checked:\n"
            f"  1. settings.json 'profile' key (not set)\n"
            f"  2. {profile_path} (not found)\n\n"
            f"Create a profile with: pay-sheet profile init"
        )

    return profile_path


def load_profile(require_exists: bool = True) -> dict:
    """Load the employee profile from profile.yaml.

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


def read_profile_file(path: Path) -> dict:
    """Parse a profile.yaml that is not (yet) the active profile.

    Raises:
        ProfileNotFoundError: If the file does not exist
        ConfigNotFoundError: If it is not a non-empty YAML mapping
    """
    path = Path(path)
    if not path.is_file():
        raise ProfileNotFoundError(f"Profile file not found: {path}")
    if path.suffix not in (".yaml", ".yml"):
        raise ConfigNotFoundError(f"Expected a .yaml or .yml profile, got {path.name}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigNotFoundError(f"{path} is not valid YAML: {e}")

    if not isinstance(data, dict) or not data:
        raise ConfigNotFoundError(f"{path} must contain a YAML mapping of profile sections")
    return data


def save_profile(profile: dict, path: Optional[Path] = None) -> Path:
    """Save the employee profile to profile.yaml.

    Returns:
        Path to the saved profile file
    """
    if path is None:
        path = get_profile_path(require_exists=False)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(profile, f, default_flow_style=False, sort_keys=False)

    return path


def get_profile_value(key: str, default: Any = None, profile: Optional[dict] = None) -> Any:
    """Get a profile value by dot-notation key (e.g., "smtp.host")."""
    if profile is None:
        profile = load_profile(require_exists=False)

    value = profile
    for part in key.split("."):
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

    for part in parts[:-1]:
        if part not in current:
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value

    return save_profile(profile)


def get_timezone(profile: Optional[dict] = None) -> str:
    """Effective schedule timezone.

    Resolution order:
    1. settings.json "timezone" key
    2. profile.yaml "timezone" key
    3. DEFAULT_TIMEZONE
    """
    override = get_setting("timezone")
    if override:
        return override
    if profile is None:
        profile = load_profile(require_exists=False)
    return profile.get("timezone") or DEFAULT_TIMEZONE


def get_hours_per_day(profile: dict) -> float:
    return float(get_profile_value("timesheet.hours_per_day", DEFAULT_HOURS_PER_DAY, profile=profile))


# =============================================================================
# XDG path helpers
# =============================================================================

def get_data_path() -> Path:
    """Get the data directory path.

    settings.json "data_dir" wins over XDG_DATA_HOME/pay-sheet/.

    Returns:
        Path to the data directory (created if doesn't exist)
    """
    custom = get_setting("data_dir")
    if custom:
        data_path = Path(custom).expanduser()
    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
        data_path = Path(xdg_data_home) / APP_NAME
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path


def get_year_data_path(year: int) -> Path:
    """Get data path for a specific year (created if doesn't exist)."""
    path = get_data_path() / str(year)
    path.mkdir(parents=True, exist_ok=True)
    return path


# =============================================================================
# Profile validation and feature readiness
# =============================================================================

@dataclass
class ProfileValidationResult:
    """Value errors/warnings plus per-feature readiness for one profile.

    `features` maps a feature name ("timesheet", "email") to
    {"ready": bool, "missing": [str], "message": str}. `location_type` is
    "central" (config dir) or "custom" (settings.json "profile").
    """

    location_type: str
    location_path: Path
    features: dict
    profile: dict
    errors: list = field(default_factory=list)
    warnings: list = field(default_factory=list)

    @property
    def all_ready(self) -> bool:
        return all(status["ready"] for status in self.features.values())

    def is_ready(self, feature: str) -> bool:
        return self.features.get(feature, {}).get("ready", False)

    def require_feature(self, feature: str) -> None:
        """Raise ConfigNotFoundError unless `feature` can run with this profile.

        Invalid values block every feature, since a bad timezone or address
        would fail the scheduled job later anyway.
        """
        if self.errors:
            lines = "".join(f"\n  ! {e}" for e in self.errors)
            raise ConfigNotFoundError(
                f"Profile has validation errors:{lines}\n\n"
                f"Fix {self.location_path} (see 'pay-sheet profile show')"
            )

        status = self.features.get(feature)
        if status is None:
            raise ConfigNotFoundError(f"Unknown feature: {feature}")
        if not status["ready"]:
            lines = "".join(f"\n  - {m}" for m in status["missing"])
            raise ConfigNotFoundError(
                f"Profile not configured for '{feature}'. Missing:{lines}\n\n"
                f"Profile: {self.location_path}"
            )


def validate_profile(profile: Optional[dict] = None) -> ProfileValidationResult:
    """Validate profile values and check feature readiness.

    Args:
        profile: Optional profile dict (loads from file if not provided)

    Raises:
        ProfileNotFoundError: If no profile exists and none was provided
    """
    custom_profile_setting = get_setting("profile")
    if custom_profile_setting:
        location_type = "custom"
        location_path = Path(custom_profile_setting)
    else:
        location_type = "central"
        location_path = get_config_dir() / PROFILE_FILENAME

    if profile is None:
        profile = load_profile(require_exists=True)

    errors, warnings = _validate_values(profile)

    features = {
        "timesheet": _validate_timesheet(profile),
        "email": _validate_email(profile),
    }

    return ProfileValidationResult(
        location_type=location_type,
        location_path=location_path,
        features=features,
        profile=profile,
        errors=errors,
        warnings=warnings,
    )


def validate_timezone(value: str) -> tuple[bool, str]:
    """Check that a value names an IANA timezone."""
    if not isinstance(value, str) or not value:
        return False, "Timezone must be a non-empty string"
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        return False, f"Unknown timezone '{value}' (expected an IANA name like {DEFAULT_TIMEZONE})"
    return True, ""


def validate_email_address(value: str) -> tuple[bool, str]:
    if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
        return False, f"Not an email address: {value!r}"
    return True, ""


def _as_list(value) -> list:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def _validate_values(profile: dict) -> tuple[list, list]:
    """Check values that would break a run even if present.

    Returns:
        Tuple of (errors, warnings) lists
    """
    errors = []
    warnings = []

    timezone = profile.get("timezone")
    if timezone is not None:
        ok, msg = validate_timezone(timezone)
        if not ok:
            errors.append(f"timezone: {msg}")
    else:
        warnings.append(f"timezone not set, using {DEFAULT_TIMEZONE}")

    employee_email = get_profile_value("employee.email", profile=profile)
    if employee_email is not None:
        ok, msg = validate_email_address(employee_email)
        if not ok:
            errors.append(f"employee.email: {msg}")

    for slot in ("to", "cc"):
        for address in _as_list(get_profile_value(f"recipients.{slot}", profile=profile)):
            ok, msg = validate_email_address(address)
            if not ok:
                errors.append(f"recipients.{slot}: {msg}")

    hours = get_profile_value("timesheet.hours_per_day", profile=profile)
    if hours is not None:
        try:
            hours_value = float(hours)
        except (TypeError, ValueError):
            errors.append(f"timesheet.hours_per_day: not a number: {hours!r}")
        else:
            if not 0 < hours_value <= 24:
                errors.append(f"timesheet.hours_per_day: must be between 0 and 24, got {hours_value}")

    port = get_profile_value("smtp.port", profile=profile)
    if port is not None and not isinstance(port, int):
        errors.append(f"smtp.port: must be an integer, got {port!r}")

    return errors, warnings


def _validate_timesheet(profile: dict) -> dict:
    """Validate configuration for rendering timesheets."""
    missing = []

    if not get_profile_value("employee.name", profile=profile):
        missing.append("employee.name (name printed on the timesheet)")

    if missing:
        return {
            "ready": False,
            "missing": missing,
            "message": "Timesheet rendering requires the employee name",
        }

    return {
        "ready": True,
        "missing": [],
        "message": f"Ready ({get_profile_value('timesheet.hours_per_day', DEFAULT_HOURS_PER_DAY, profile=profile)} hours/day)",
    }


def _validate_email(profile: dict) -> dict:
    """Validate configuration for sending reminder and submission emails."""
    missing = []

    if not get_profile_value("employee.email", profile=profile):
        missing.append("employee.email (reminder recipient)")
    if not _as_list(get_profile_value("recipients.to", profile=profile)):
        missing.append("recipients.to (timesheet recipients)")
    if not get_profile_value("smtp.host", profile=profile):
        missing.append("smtp.host (outgoing mail server)")

    if missing:
        return {
            "ready": False,
            "missing": missing,
            "message": "Email requires employee address, recipients and SMTP host",
        }

    recipients = _as_list(get_profile_value("recipients.to", profile=profile))
    return {
        "ready": True,
        "missing": [],
        "message": f"Ready ({len(recipients)} recipient(s) via {get_profile_value('smtp.host', profile=profile)})",
    }


# =============================================================================
# Profile schema validation
# =============================================================================

# Valid top-level keys and their allowed nested keys
PROFILE_SCHEMA = {
    "employee": {
        "name": str,
        "email": str,
    },
    "recipients": {
        "to": list,
        "cc": list,
    },
    "smtp": {
        "host": str,
        "port": int,
        "username": str,
        "password_env": str,
        "use_tls": bool,
        "sender": str,
    },
    "timesheet": {
        "hours_per_day": float,
    },
    "timezone": str,
}


def validate_profile_key(key: str) -> tuple[bool, str]:
    """Validate that a dot-notation key is allowed by the schema.

    Returns:
        Tuple of (is_valid, error_message)
    """
    parts = key.split(".")
    top_level = parts[0]

    if top_level not in PROFILE_SCHEMA:
        valid_keys = ", ".join(PROFILE_SCHEMA.keys())
        return False, f"Unknown top-level key '{top_level}'. Valid keys: {valid_keys}"

    schema_section = PROFILE_SCHEMA[top_level]

    if not isinstance(schema_section, dict):
        if len(parts) == 1:
            return True, ""
        return False, f"'{top_level}' has no sub-keys"

    if len(parts) != 2:
        return False, f"Expected '{top_level}.<key>', got '{key}'"

    if parts[1] not in schema_section:
        valid_keys = ", ".join(schema_section.keys())
        return False, f"Unknown key '{parts[1]}' under '{top_level}'. Valid keys: {valid_keys}"

    return True, ""


def coerce_profile_value(key: str, raw: str) -> Any:
    """Convert a CLI string to the type the schema expects for a key."""
    parts = key.split(".")
    expected = PROFILE_SCHEMA[parts[0]]
    if isinstance(expected, dict):
        expected = expected[parts[1]]

    if expected is int:
        return int(raw)
    if expected is float:
        return float(raw)
    if expected is bool:
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if expected is list:
        return [item.strip() for item in raw.split(",") if item.strip()]
    return raw


PROFILE_TEMPLATE = {
    "employee": {
        "name": "Your Name",
        "email": "you@example.com",
    },
    "recipients": {
        "to": ["payroll@example.com"],
        "cc": [],
    },
    "smtp": {
        "host": "smtp.example.com",
        "port": 587,
        "username": "you@example.com",
        "password_env": "PAY_SHEET_SMTP_PASSWORD",
        "use_tls": True,
    },
    "timesheet": {
        "hours_per_day": DEFAULT_HOURS_PER_DAY,
    },
    "timezone": DEFAULT_TIMEZONE,
}
