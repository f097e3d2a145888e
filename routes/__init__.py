"""
API routes module.
"""

from routes.load_plans import router as load_plans_router

__all__ = [
    "load_plans_router",
]
