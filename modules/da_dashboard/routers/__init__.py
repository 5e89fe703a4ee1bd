"""
DA Dashboard Module Routers.
"""

from modules.da_dashboard.routers.auth import router as auth_router
from modules.da_dashboard.routers.da_users import router as da_users_router
from modules.da_dashboard.routers.stats import router as stats_router

__all__ = ["auth_router", "da_users_router", "stats_router"]
