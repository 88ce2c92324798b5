# -*- coding: utf-8 -*-
"""Browser facing pages: upload form, upload handler and stored results."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from chromaleap.api.endpoints import analyze_image as analysis_endpoint
from chromaleap.config import get_settings
from chromaleap.models import AnalysisRecord
from chromaleap.storage import ANALYSES_TABLE, LocalImageStorage
from chromaleap.ui import (
    AnalysisSession,
    UploadFlow,
    UploadedFile,
    render_results_page,
    render_upload_page,
)
from chromaleap.ui.upload_flow import InProcessAnalysisEndpoint

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

_storage: Optional[LocalImageStorage] = None


def get_storage() -> LocalImageStorage:
    global _storage
    if _storage is None:
        settings = get_settings()
        _storage = LocalImageStorage(settings.upload_dir, settings.public_base_url)
    return _storage


def build_upload_flow() -> UploadFlow:
    return UploadFlow(
        get_storage(),
        InProcessAnalysisEndpoint(),
        max_upload_bytes=get_settings().max_upload_bytes,
    )


@router.get("/", response_class=HTMLResponse)
async def upload_page():
    return HTMLResponse(render_upload_page(max_upload_bytes=get_settings().max_upload_bytes))


@router.post("/upload", response_class=HTMLResponse)
async def upload_image(images: List[UploadFile] = File(...)):
    flow = build_upload_flow()
    files = [
        UploadedFile(filename=item.filename or "upload", content_type=item.content_type or "", data=b"")
        for item in images
    ]
    # Only the first image is read, and never past the size limit.
    chosen = next((index for index, item in enumerate(files) if item.is_image), None)
    if chosen is not None:
        data = await images[chosen].read(flow.max_upload_bytes + 1)
        files[chosen] = replace(files[chosen], data=data)

    outcome = await flow.handle_drop(files)
    if not outcome.ok:
        status_code = 400 if outcome.rejected else 200
        page = render_upload_page(error=outcome.error, max_upload_bytes=flow.max_upload_bytes)
        return HTMLResponse(page, status_code=status_code)

    session = AnalysisSession()
    session.complete(outcome.analysis, outcome.image_url or "", outcome.analysis_id)
    logger.info("Analysis complete: %s", outcome.message)
    return HTMLResponse(render_results_page(session, notice=f"Analysis complete! {outcome.message}"))


@router.get("/analyses/{analysis_id}", response_class=HTMLResponse)
async def stored_analysis(analysis_id: str):
    row = analysis_endpoint.get_repository().get(ANALYSES_TABLE, analysis_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Analysis not found.")

    try:
        record = AnalysisRecord.model_validate(row)
    except ValidationError as exc:
        logger.warning("Stored analysis %s is unreadable: %s", analysis_id, exc)
        raise HTTPException(status_code=404, detail="Analysis not found.") from exc

    session = AnalysisSession()
    session.complete(record.analysis_result, record.image_url, record.id)
    return HTMLResponse(render_results_page(session))


@router.get("/health")
async def health():
    return {"status": "ok"}


__all__ = ["build_upload_flow", "get_storage", "router"]
