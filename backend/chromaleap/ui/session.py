# -*- coding: utf-8 -*-
"""Page level state for the one analysis shown at a time."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from chromaleap.models import AnalysisResult


@dataclass
class AnalysisSession:
    """Holds the active analysis and the image it belongs to.

    Created per page render and handed to the views explicitly.
    """

    analysis: Any = None
    image_url: str = ""
    analysis_id: Optional[str] = None

    @property
    def view(self) -> AnalysisResult:
        return AnalysisResult.from_payload(self.analysis)

    def complete(self, analysis: Any, image_url: str, analysis_id: Optional[str] = None) -> None:
        self.analysis = analysis
        self.image_url = image_url
        self.analysis_id = analysis_id
