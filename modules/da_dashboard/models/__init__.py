"""
DA Dashboard Database Models.
"""

from modules.da_dashboard.models.da_user import ACTIVE_STATUS, DAUser
from modules.da_dashboard.models.woreda_manager import WoredaManager
from modules.da_dashboard.models.woreda_rep import WoredaRep

__all__ = ["ACTIVE_STATUS", "DAUser", "WoredaManager", "WoredaRep"]
