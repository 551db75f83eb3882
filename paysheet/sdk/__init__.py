"""Pay Sheet SDK - pay period dates, timesheets and their delivery."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_profile_path,
    load_profile,
    save_profile,
    get_profile_value,
    set_profile_value,
    get_timezone,
    get_hours_per_day,
    ConfigNotFoundError,
    ProfileNotFoundError,
    # Profile validation
    validate_profile,
    ProfileValidationResult,
    validate_profile_key,
    validate_timezone,
    coerce_profile_value,
    PROFILE_TEMPLATE,
    # XDG paths
    get_data_path,
    get_year_data_path,
)

from .holidays import (
    HolidayRecord,
    good_friday,
    nth_weekday,
    observed_holiday,
    holidays_for_year,
    holiday_on,
    day_of_week,
    ROLL_FORWARD,
    SATURDAY_BACK,
)

from .periods import (
    PayPeriod,
    InvalidPeriodError,
    select_period,
    last_day_of_month,
    periods_for_year,
    next_period,
)

from .resolver import (
    PeriodDates,
    HolidayRule,
    HOLIDAY_RULES,
    DEFAULT_TIMEZONE,
    resolve,
    resolve_period,
    matching_rule,
    holiday_context,
)

from .retry import RateLimitedError, with_retry
from .export import ExportError, export_pdf
from .mailer import DeliveryError, SmtpMailer, SmtpSettings, OutboxMailer
from .timesheet import Timesheet, build_timesheet, write_workbook
from .schedule import (
    ScheduledJob,
    InMemoryScheduler,
    ApschedulerBackend,
    plan_jobs,
    install_schedule,
)
from .workflow import send_reminder, send_timesheet, render_timesheet

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_profile_path",
    "load_profile",
    "save_profile",
    "get_profile_value",
    "set_profile_value",
    "get_timezone",
    "get_hours_per_day",
    "ConfigNotFoundError",
    "ProfileNotFoundError",
    "validate_profile",
    "ProfileValidationResult",
    "validate_profile_key",
    "validate_timezone",
    "coerce_profile_value",
    "PROFILE_TEMPLATE",
    "get_data_path",
    "get_year_data_path",
    # Holidays
    "HolidayRecord",
    "good_friday",
    "nth_weekday",
    "observed_holiday",
    "holidays_for_year",
    "holiday_on",
    "day_of_week",
    "ROLL_FORWARD",
    "SATURDAY_BACK",
    # Periods
    "PayPeriod",
    "InvalidPeriodError",
    "select_period",
    "last_day_of_month",
    "periods_for_year",
    "next_period",
    # Resolver
    "PeriodDates",
    "HolidayRule",
    "HOLIDAY_RULES",
    "DEFAULT_TIMEZONE",
    "resolve",
    "resolve_period",
    "matching_rule",
    "holiday_context",
    # Delivery
    "RateLimitedError",
    "with_retry",
    "ExportError",
    "export_pdf",
    "DeliveryError",
    "SmtpMailer",
    "SmtpSettings",
    "OutboxMailer",
    "Timesheet",
    "build_timesheet",
    "write_workbook",
    # Schedule
    "ScheduledJob",
    "InMemoryScheduler",
    "ApschedulerBackend",
    "plan_jobs",
    "install_schedule",
    # Workflow
    "send_reminder",
    "send_timesheet",
    "render_timesheet",
]
