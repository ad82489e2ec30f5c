"""
API route modules.

Contains FastAPI routers for projections and tax lookups.
"""

from investisizer.api.routes import projections, tax

__all__ = ["projections", "tax"]
