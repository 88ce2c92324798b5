"""Route modules."""

from .analyze_image import router as analysis_router
from .pages import router as pages_router

__all__ = ["analysis_router", "pages_router"]
