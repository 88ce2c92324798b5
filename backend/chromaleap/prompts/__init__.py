"""Prompt templates for the vision analyzer."""

from .pipeline_prompt import (
    ANALYSIS_ENGINE,
    PIPELINE_USER_INSTRUCTION,
    build_system_prompt,
)

__all__ = ["ANALYSIS_ENGINE", "PIPELINE_USER_INSTRUCTION", "build_system_prompt"]
