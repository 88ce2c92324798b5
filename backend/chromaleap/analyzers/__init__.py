"""Vision model analysis and reply parsing."""

from .response_extractor import extract_json_payload, find_json_candidate
from .vision_analyzer import VisionAnalyzer

__all__ = ["VisionAnalyzer", "extract_json_payload", "find_json_candidate"]
