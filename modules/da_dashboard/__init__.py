"""
DA Reporting Dashboard Module.

Role-scoped reporting over Development Agent (DA) records.
"""

from modules.da_dashboard.dashboard_module import DADashboardModule, create_module

__all__ = ["DADashboardModule", "create_module"]
