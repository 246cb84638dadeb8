"""Jobs driven by cron expressions, delays or fixed intervals, with tick-based due checks."""

__version__ = "0.14.0"