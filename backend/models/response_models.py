"""
Response models for the ABA Coach API.
"""

from pydantic import BaseModel


class TextResponse(BaseModel):
    text: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    version: str
    text_model: str
    analysis_model: str
