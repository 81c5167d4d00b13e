"""
Request models for the ABA Coach API.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict


class PromptRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    prompt: Optional[str] = None


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    task: Optional[str] = None
    prompt: Optional[str] = None
    model: Optional[str] = None  # Falls back to GEMINI_ANALYSIS_MODEL
