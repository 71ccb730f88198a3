"""Activity logging package."""

from finance_tracker.activity.logger import ActivityLogger, configure_log_level

__all__ = ["ActivityLogger", "configure_log_level"]
