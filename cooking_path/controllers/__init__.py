"""
Controllers Package - The 'C' in MVC

Each controller is a FastAPI APIRouter that defines endpoints
for a specific feature area.
"""

from cooking_path.controllers.cooking_path import router as cooking_path_router

__all__ = ["cooking_path_router"]
