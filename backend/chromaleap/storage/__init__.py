"""Storage capabilities: uploaded images and analysis records."""

from .files import LocalImageStorage, UPLOADS_ROUTE, random_filename
from .records import ANALYSES_TABLE, AnalysisRepository

__all__ = [
    "ANALYSES_TABLE",
    "AnalysisRepository",
    "LocalImageStorage",
    "UPLOADS_ROUTE",
    "random_filename",
]
