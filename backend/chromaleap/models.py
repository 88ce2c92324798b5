# -*- coding: utf-8 -*-
"""Pydantic models for analysis requests, results and stored records."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class AnalysisRequest(BaseModel):
    """Body of ``POST /api/analyze-image``."""

    imageUrl: Optional[str] = None


class AnalysisMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    analysis_engine: Optional[str] = None
    timestamp_utc: Optional[str] = None

    @field_validator("analysis_engine", "timestamp_utc", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)


class PipelineStep(BaseModel):
    """One hypothesized editing operation.

    Every field is optional because the model output is only loosely
    guaranteed to follow the requested schema.
    """

    model_config = ConfigDict(extra="allow")

    step_order: Optional[int] = None
    effect_category: str = ""
    effect_name: str = ""
    software_guess: List[str] = Field(default_factory=list)
    estimated_parameters: Dict[str, Any] = Field(default_factory=dict)
    confidence: Optional[float] = None

    @field_validator("step_order", mode="before")
    @classmethod
    def _coerce_step_order(cls, value: Any) -> Optional[int]:
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return None

    @field_validator("effect_category", "effect_name", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("software_guess", mode="before")
    @classmethod
    def _coerce_software(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value.strip()] if value.strip() else []
        if isinstance(value, list):
            return [str(item).strip() for item in value if item is not None and str(item).strip()]
        return [str(value)]

    @field_validator("estimated_parameters", mode="before")
    @classmethod
    def _coerce_parameters(cls, value: Any) -> Dict[str, Any]:
        if isinstance(value, dict):
            return {str(key): item for key, item in value.items()}
        return {}

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: Any) -> Optional[float]:
        if value is None or isinstance(value, bool):
            return None
        try:
            numeric = float(value)
        except (TypeError, ValueError):
            return None
        if math.isnan(numeric) or math.isinf(numeric):
            return None
        return numeric


class AnalysisResult(BaseModel):
    """Tolerant view of a parsed model reply, used for rendering."""

    model_config = ConfigDict(extra="allow")

    analysis_metadata: AnalysisMetadata = Field(default_factory=AnalysisMetadata)
    hypothesized_pipeline: List[PipelineStep] = Field(default_factory=list)

    @field_validator("analysis_metadata", mode="before")
    @classmethod
    def _coerce_metadata(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    @field_validator("hypothesized_pipeline", mode="before")
    @classmethod
    def _coerce_pipeline(cls, value: Any) -> List[Any]:
        if not isinstance(value, list):
            return []
        steps = [item for item in value if isinstance(item, dict)]
        if len(steps) != len(value):
            logger.warning(
                "Skipping %d pipeline entries that are not objects",
                len(value) - len(steps),
            )
        return steps

    @classmethod
    def from_payload(cls, payload: Any) -> "AnalysisResult":
        """Build a view from whatever JSON value the model returned."""

        if not isinstance(payload, dict):
            return cls()
        return cls.model_validate(payload)


class AnalysisRecord(BaseModel):
    """Persisted analysis, as stored in the ``image_analyses`` table."""

    id: str
    image_url: str
    analysis_result: Any
    created_at: Optional[str] = None


class AnalysisResponse(BaseModel):
    """Success body of the analysis endpoint."""

    success: bool = True
    analysis: Any
    analysisId: Optional[str] = None


__all__ = [
    "AnalysisMetadata",
    "AnalysisRecord",
    "AnalysisRequest",
    "AnalysisResponse",
    "AnalysisResult",
    "PipelineStep",
]
