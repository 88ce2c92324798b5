# -*- coding: utf-8 -*-
"""Error types shared by the analysis endpoint and the upload flow."""

from __future__ import annotations

from typing import Any, Dict, Optional

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
QUOTA_MESSAGE = "Payment required. Please add credits to your workspace."
PARSE_FAILURE_MESSAGE = "Failed to parse AI response"


class AnalysisError(Exception):
    """Base class for failures that map onto an HTTP status."""

    status_code = 500

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def payload(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class InvalidInput(AnalysisError):
    status_code = 400


class ConfigurationError(AnalysisError):
    """A required credential or setting is missing."""


class UpstreamRateLimited(AnalysisError):
    status_code = 429

    def __init__(self, message: str = RATE_LIMIT_MESSAGE, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class UpstreamQuotaExceeded(AnalysisError):
    status_code = 402

    def __init__(self, message: str = QUOTA_MESSAGE, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class UpstreamUnavailable(AnalysisError):
    """Gateway answered with another non-2xx status or could not be reached."""

    def __init__(self, message: str, *, status: Optional[int] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.status = status


class MalformedResponse(AnalysisError):
    """The model reply could not be parsed as JSON."""

    def __init__(self, raw_text: str) -> None:
        super().__init__(PARSE_FAILURE_MESSAGE)
        self.raw_text = raw_text

    def payload(self) -> Dict[str, Any]:
        return {"error": self.message, "rawResponse": self.raw_text}


class PersistenceFailure(AnalysisError):
    """Storing an analysis record failed. Logged, never surfaced."""


class StorageFailure(AnalysisError):
    """Uploading the image to object storage failed."""


def upstream_error_for_status(status: int, body: str = "") -> AnalysisError:
    """Map a non-2xx gateway status onto the matching error."""

    if status == 429:
        return UpstreamRateLimited()
    if status == 402:
        return UpstreamQuotaExceeded()
    return UpstreamUnavailable(f"AI Gateway error: {status}", status=status, details=body or None)


__all__ = [
    "AnalysisError",
    "ConfigurationError",
    "InvalidInput",
    "MalformedResponse",
    "PersistenceFailure",
    "StorageFailure",
    "UpstreamQuotaExceeded",
    "UpstreamRateLimited",
    "UpstreamUnavailable",
    "upstream_error_for_status",
]
