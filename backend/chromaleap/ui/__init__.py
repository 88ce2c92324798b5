"""Server rendered upload and results views."""

from .results_view import export_analysis, render_results_page
from .session import AnalysisSession
from .upload_flow import FlowOutcome, FlowState, UploadFlow, UploadedFile
from .upload_view import render_upload_page

__all__ = [
    "AnalysisSession",
    "FlowOutcome",
    "FlowState",
    "UploadFlow",
    "UploadedFile",
    "export_analysis",
    "render_results_page",
    "render_upload_page",
]
