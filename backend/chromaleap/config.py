# -*- coding: utf-8 -*-
"""Environment driven configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

_BACKEND_DIR = Path(__file__).resolve().parent.parent

DEFAULT_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1"
DEFAULT_GATEWAY_MODEL = "google/gemini-2.5-pro"
DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_MAX_UPLOAD_BYTES = 20 * 1024 * 1024


def _split_csv(raw_value: Optional[str], fallback: List[str]) -> List[str]:
    if not raw_value:
        return list(fallback)
    return [item.strip() for item in raw_value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from the process environment."""

    vision_provider: str = "gateway"
    gateway_api_key: Optional[str] = None
    gateway_url: str = DEFAULT_GATEWAY_URL
    anthropic_api_key: Optional[str] = None
    vision_model: Optional[str] = None
    analysis_store_dir: Path = _BACKEND_DIR / "data" / "records"
    upload_dir: Path = _BACKEND_DIR / "uploads"
    public_base_url: str = "http://localhost:8000"
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @property
    def model_name(self) -> str:
        if self.vision_model:
            return self.vision_model
        if self.vision_provider == "claude":
            return DEFAULT_CLAUDE_MODEL
        return DEFAULT_GATEWAY_MODEL

    @property
    def credential_name(self) -> str:
        return "ANTHROPIC_API_KEY" if self.vision_provider == "claude" else "AI_GATEWAY_API_KEY"

    @property
    def credential(self) -> Optional[str]:
        return self.anthropic_api_key if self.vision_provider == "claude" else self.gateway_api_key


def get_settings() -> Settings:
    """Build a fresh :class:`Settings` from ``os.environ``."""

    provider = os.getenv("VISION_PROVIDER", "gateway").strip().lower() or "gateway"
    if provider not in {"gateway", "claude"}:
        provider = "gateway"

    try:
        max_upload_bytes = int(os.getenv("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES)))
    except ValueError:
        max_upload_bytes = DEFAULT_MAX_UPLOAD_BYTES

    store_env = os.getenv("ANALYSIS_STORE_DIR")
    upload_env = os.getenv("UPLOAD_DIR")

    return Settings(
        vision_provider=provider,
        gateway_api_key=os.getenv("AI_GATEWAY_API_KEY") or None,
        gateway_url=os.getenv("AI_GATEWAY_URL", DEFAULT_GATEWAY_URL),
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
        vision_model=os.getenv("VISION_MODEL") or None,
        analysis_store_dir=Path(store_env) if store_env else _BACKEND_DIR / "data" / "records",
        upload_dir=Path(upload_env) if upload_env else _BACKEND_DIR / "uploads",
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/"),
        max_upload_bytes=max_upload_bytes,
        cors_origins=_split_csv(os.getenv("CORS_ORIGINS"), ["*"]),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


__all__ = ["Settings", "get_settings"]
