"""
DA Dashboard Module Core Package.

Contains configuration and authentication dependencies.
"""

from modules.da_dashboard.core.config import DashboardSettings, get_dashboard_settings

__all__ = ["DashboardSettings", "get_dashboard_settings"]
