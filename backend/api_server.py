"""
ABA Coach API Server
FastAPI backend relaying prompts to Gemini for behavior analysis and ABA answers.
"""

import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from aws_lambda_powertools import Logger
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from errors import MethodNotAllowedError, RelayError  # noqa: E402
from gemini_client import TEXT_MODEL_ID, ANALYSIS_MODEL_ID  # noqa: E402
from models.response_models import ErrorResponse, HealthResponse  # noqa: E402
from routes import text, analysis  # noqa: E402

logger = Logger(service="abacoach")

API_VERSION = "1.0.0"

# Initialize FastAPI app
app = FastAPI(
    title="ABA Coach API",
    description="Gemini relay for behavior analysis and ABA information",
    version=API_VERSION,
)

# Configure CORS - comma separated list, local dev origins by default
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173"
    ).split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    """Render route errors as {"error": ...}, or the upstream body for UpstreamError."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Keep framework errors (unknown path etc.) in the same envelope."""
    logger.warning("HTTP error", path=request.url.path, status_code=exc.status_code)
    message = str(exc.detail)
    if exc.status_code == 405:
        message = MethodNotAllowedError().message
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        text_model=TEXT_MODEL_ID,
        analysis_model=ANALYSIS_MODEL_ID,
    )


app.include_router(text.router)
app.include_router(analysis.router)


# Run with: uvicorn api_server:app --reload --port 8000
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api_server:app", host="0.0.0.0", port=8000, reload=True)
