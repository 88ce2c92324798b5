"""Pytest configuration and fixtures."""
import os
import sys
import tempfile
from pathlib import Path
from types import SimpleNamespace

import httpx
import pytest

# Add backend to path
backend_path = Path(__file__).parent.parent
sys.path.insert(0, str(backend_path))

# Keep uploads and records out of the source tree while the app module loads.
_session_dir = Path(tempfile.mkdtemp(prefix="chromaleap-tests-"))
os.environ.setdefault("UPLOAD_DIR", str(_session_dir / "uploads"))
os.environ.setdefault("ANALYSIS_STORE_DIR", str(_session_dir / "records"))

from chromaleap.analyzers import VisionAnalyzer  # noqa: E402
from chromaleap.config import Settings  # noqa: E402
from chromaleap.storage import AnalysisRepository, LocalImageStorage  # noqa: E402

SCENARIO_REPLY = (
    "```json\n"
    '{"analysis_metadata":{"analysis_engine":"ChromaLeap_v1_MVP","timestamp_utc":"2024-01-01T00:00:00Z"},'
    '"hypothesized_pipeline":[{"step_order":1,"effect_category":"Basic Correction","effect_name":"Exposure",'
    '"software_guess":["Lightroom"],"estimated_parameters":{"exposure":"+0.5"},"confidence":0.8}]}'
    "\n```"
)

SCENARIO_ANALYSIS = {
    "analysis_metadata": {
        "analysis_engine": "ChromaLeap_v1_MVP",
        "timestamp_utc": "2024-01-01T00:00:00Z",
    },
    "hypothesized_pipeline": [
        {
            "step_order": 1,
            "effect_category": "Basic Correction",
            "effect_name": "Exposure",
            "software_guess": ["Lightroom"],
            "estimated_parameters": {"exposure": "+0.5"},
            "confidence": 0.8,
        }
    ],
}

GATEWAY_URL = "https://gateway.test/v1/chat/completions"


def gateway_status_error(status_code: int, body: str = "upstream says no"):
    """Build the exception the OpenAI SDK raises for a non-2xx reply."""
    from openai import APIStatusError

    response = httpx.Response(status_code, text=body, request=httpx.Request("POST", GATEWAY_URL))
    return APIStatusError(f"Error code: {status_code}", response=response, body=None)


class FakeCompletions:
    """Stands in for ``client.chat.completions`` and records every call."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_gateway_client(reply=None, error=None):
    completions = FakeCompletions(reply=reply, error=error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


@pytest.fixture
def gateway_settings(tmp_path):
    return Settings(
        vision_provider="gateway",
        gateway_api_key="test-key",
        analysis_store_dir=tmp_path / "records",
        upload_dir=tmp_path / "uploads",
    )


@pytest.fixture
def make_analyzer(gateway_settings):
    """Factory returning ``(analyzer, completions)`` around a fake gateway."""

    def _make(reply=SCENARIO_REPLY, error=None):
        client, completions = make_gateway_client(reply=reply, error=error)
        return VisionAnalyzer(gateway_settings, client=client), completions

    return _make


@pytest.fixture
def repository(tmp_path):
    return AnalysisRepository(tmp_path / "records")


@pytest.fixture
def storage(tmp_path):
    return LocalImageStorage(tmp_path / "uploads", "http://testserver")
