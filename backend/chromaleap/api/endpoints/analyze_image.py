# -*- coding: utf-8 -*-
"""Analysis endpoint: image URL in, editing pipeline hypothesis out."""

from __future__ import annotations

import logging
import traceback
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from chromaleap.analyzers import VisionAnalyzer
from chromaleap.config import get_settings
from chromaleap.errors import AnalysisError, MalformedResponse
from chromaleap.models import AnalysisRequest, AnalysisResponse
from chromaleap.storage import ANALYSES_TABLE, AnalysisRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analysis"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

_repository: Optional[AnalysisRepository] = None


def get_repository() -> AnalysisRepository:
    global _repository
    if _repository is None:
        _repository = AnalysisRepository(get_settings().analysis_store_dir)
    return _repository


def get_analyzer() -> VisionAnalyzer:
    return VisionAnalyzer(get_settings())


async def _persist(repository: AnalysisRepository, image_url: str, analysis: Any) -> Optional[str]:
    """Store the record; failures are logged and never reach the caller."""

    try:
        row = await run_in_threadpool(
            repository.insert,
            ANALYSES_TABLE,
            {"image_url": image_url, "analysis_result": analysis},
        )
    except Exception:
        logger.exception("Database error while storing analysis for %s", image_url)
        return None
    return row.get("id")


async def run_analysis(
    image_url: Optional[str],
    *,
    analyzer: Optional[VisionAnalyzer] = None,
    repository: Optional[AnalysisRepository] = None,
) -> Tuple[int, Dict[str, Any]]:
    """Analyze ``image_url`` and return ``(status_code, body)``."""

    if not image_url:
        return 400, {"error": "imageUrl is required"}

    analyzer = analyzer or get_analyzer()
    try:
        analysis = await run_in_threadpool(analyzer.analyze, image_url)
    except MalformedResponse as exc:
        logger.error("Failed to parse AI response for %s", image_url)
        return exc.status_code, exc.payload()
    except AnalysisError as exc:
        logger.error("Analysis failed for %s: %s", image_url, exc.message)
        return exc.status_code, exc.payload()
    except Exception as exc:
        logger.exception("Error in analyze-image endpoint")
        details = "".join(traceback.format_exception_only(type(exc), exc)).strip()
        return 500, {"error": str(exc) or "Unknown error", "details": details}

    analysis_id = await _persist(repository or get_repository(), image_url, analysis)
    body = AnalysisResponse(analysis=analysis, analysisId=analysis_id)
    return 200, body.model_dump()


@router.options("/analyze-image")
async def analyze_image_preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post("/analyze-image")
async def analyze_image(request: Request):
    try:
        body = await request.json()
    except ValueError:
        body = {}

    try:
        payload = AnalysisRequest.model_validate(body if isinstance(body, dict) else {})
    except ValidationError:
        return JSONResponse({"error": "imageUrl must be a string"}, status_code=400, headers=CORS_HEADERS)

    status_code, response_body = await run_analysis(payload.imageUrl)
    return JSONResponse(response_body, status_code=status_code, headers=CORS_HEADERS)


__all__ = ["CORS_HEADERS", "get_analyzer", "get_repository", "router", "run_analysis"]
