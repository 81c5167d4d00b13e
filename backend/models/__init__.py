"""
ABA Coach Pydantic Models Package
All request/response models for the API.
"""

from models.request_models import (  # noqa: F401
    PromptRequest,
    AnalysisRequest,
)

from models.response_models import (  # noqa: F401
    TextResponse,
    ErrorResponse,
    HealthResponse,
)
