"""Pay Sheet - semi-monthly timesheet scheduling and delivery."""

__version__ = "0.3.0"
