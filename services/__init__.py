"""
Business logic services.

Each service handles one domain area.
"""

from services.load_plan_service import LoadPlanService, get_load_plan_service

__all__ = [
    "LoadPlanService",
    "get_load_plan_service",
]
