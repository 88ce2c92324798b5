# -*- coding: utf-8 -*-
"""Two phase upload then analyze flow behind the upload page."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, Tuple

from fastapi.concurrency import run_in_threadpool

from chromaleap.config import DEFAULT_MAX_UPLOAD_BYTES
from chromaleap.storage import random_filename

logger = logging.getLogger(__name__)

INVALID_FILE_MESSAGE = "Please upload an image file (JPG, PNG, WEBP)"


class FlowState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    ANALYZING = "analyzing"


class FlowBusy(RuntimeError):
    """Raised when a new file arrives while a flow is still running."""


class ImageStorage(Protocol):
    def put(self, data: bytes, filename: str) -> str: ...


class AnalysisEndpoint(Protocol):
    async def invoke(self, image_url: str) -> Tuple[int, Dict[str, Any]]: ...


ProgressListener = Callable[[FlowState, int], None]


def format_size_limit(num_bytes: int) -> str:
    for unit, size in (("MB", 1024 * 1024), ("KB", 1024)):
        if num_bytes >= size:
            return f"{num_bytes // size}{unit}"
    return f"{num_bytes} bytes"


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def is_image(self) -> bool:
        return (self.content_type or "").lower().startswith("image/")


@dataclass(frozen=True)
class FlowOutcome:
    """Result of one upload and analyze run: either an analysis or an error."""

    analysis: Any = None
    image_url: Optional[str] = None
    analysis_id: Optional[str] = None
    error: Optional[str] = None
    rejected: bool = False
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class InProcessAnalysisEndpoint:
    """Calls the analysis endpoint handler without an HTTP round trip."""

    async def invoke(self, image_url: str) -> Tuple[int, Dict[str, Any]]:
        from chromaleap.api.endpoints.analyze_image import run_analysis

        return await run_analysis(image_url)


def _step_count(analysis: Any) -> int:
    if isinstance(analysis, dict):
        pipeline = analysis.get("hypothesized_pipeline")
        if isinstance(pipeline, list):
            return len(pipeline)
    return 0


class UploadFlow:
    """Drive ``IDLE -> UPLOADING -> ANALYZING -> IDLE`` for a single file.

    The flow never retries and cannot be cancelled; while it is not idle any
    further input raises :class:`FlowBusy`. Whatever happens, it ends in
    ``IDLE`` and hands a :class:`FlowOutcome` back to the awaiting caller.
    """

    def __init__(
        self,
        storage: ImageStorage,
        endpoint: AnalysisEndpoint,
        *,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        listener: Optional[ProgressListener] = None,
    ) -> None:
        self.storage = storage
        self.endpoint = endpoint
        self.max_upload_bytes = max_upload_bytes
        self.listener = listener
        self._state = FlowState.IDLE

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state is not FlowState.IDLE

    def _set_state(self, state: FlowState, progress: int = 0) -> None:
        self._state = state
        logger.debug("Upload flow state=%s progress=%s", state.value, progress)
        if self.listener is not None:
            self.listener(state, progress)

    @staticmethod
    def _reject(message: str) -> FlowOutcome:
        return FlowOutcome(error=message, rejected=True)

    async def handle_drop(self, files: Sequence[UploadedFile]) -> FlowOutcome:
        """Analyze the first image among dropped files."""

        image_file = next((item for item in files if item.is_image), None)
        if image_file is None:
            logger.info("Drop rejected: no image among %d file(s)", len(files))
            return self._reject(INVALID_FILE_MESSAGE)
        return await self.run(image_file)

    async def run(self, file: UploadedFile) -> FlowOutcome:
        if self.is_busy:
            raise FlowBusy(f"Upload flow is busy ({self._state.value})")

        if not file.is_image:
            logger.info("Upload rejected: %s (%s)", file.filename, file.content_type)
            return self._reject(INVALID_FILE_MESSAGE)
        if len(file.data) > self.max_upload_bytes:
            return self._reject(f"Image is too large (max {format_size_limit(self.max_upload_bytes)})")

        try:
            return await self._upload_and_analyze(file)
        finally:
            self._set_state(FlowState.IDLE)

    async def _upload_and_analyze(self, file: UploadedFile) -> FlowOutcome:
        self._set_state(FlowState.UPLOADING, 0)
        try:
            image_url = await run_in_threadpool(self.storage.put, file.data, random_filename(file.filename))
        except Exception as exc:
            logger.exception("Error uploading image %s", file.filename)
            return FlowOutcome(error=str(exc) or "Failed to process image")

        self._set_state(FlowState.UPLOADING, 50)
        self._set_state(FlowState.ANALYZING)
        try:
            status_code, payload = await self.endpoint.invoke(image_url)
        except Exception as exc:
            logger.exception("Error analyzing image %s", image_url)
            return FlowOutcome(image_url=image_url, error=str(exc) or "Failed to process image")

        if status_code != 200 or not payload.get("success"):
            error = payload.get("error") or "Analysis failed"
            logger.info("Analysis failed for %s (status=%s): %s", image_url, status_code, error)
            return FlowOutcome(image_url=image_url, error=error)

        analysis = payload.get("analysis")
        return FlowOutcome(
            analysis=analysis,
            image_url=image_url,
            analysis_id=payload.get("analysisId"),
            message=f"Identified {_step_count(analysis)} editing steps",
        )


__all__ = [
    "FlowBusy",
    "FlowOutcome",
    "FlowState",
    "INVALID_FILE_MESSAGE",
    "InProcessAnalysisEndpoint",
    "UploadFlow",
    "UploadedFile",
    "format_size_limit",
]
