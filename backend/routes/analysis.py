"""
Analysis route module for ABA Coach.
Handles /api/analysis: behavior analysis (schema-constrained JSON) and
ABA information questions (plain text).

Every failure, upstream ones included, is returned as {"error": ...}.
"""

import time
import traceback

from fastapi import APIRouter, Request
from aws_lambda_powertools import Logger

from models.request_models import AnalysisRequest
from models.response_models import TextResponse
from dependencies import (
    ALL_METHODS,
    get_request_id,
    parse_request,
    read_json_body,
    require_post,
)
from errors import (
    BadRequestError,
    InternalError,
    RelayError,
    ServerMisconfigurationError,
)
from gemini_client import (
    get_api_key,
    generate_for_task,
    TASK_TEMPERATURES,
    ANALYSIS_MODEL_ID,
)

logger = Logger(service="abacoach")
router = APIRouter()

MISSING_KEY_MESSAGE = "Server configuration error: API Key missing."
INVALID_TASK_MESSAGE = "Invalid task specified"
FALLBACK_ERROR_MESSAGE = "Error processing AI request"

_FIELD_MESSAGES = {
    "task": INVALID_TASK_MESSAGE,
    "prompt": "Missing prompt",
    "model": "Invalid model",
}


@router.api_route("/api/analysis", methods=ALL_METHODS, response_model=TextResponse)
async def analyze(request: Request):
    """Run an analyzeBehavior or getABAInfo task against Gemini."""
    request_id = get_request_id()
    request_start = time.time()

    require_post(request)

    api_key = get_api_key()
    if not api_key:
        logger.error(
            "Server Error: GEMINI_API_KEY is not set in environment variables",
            request_id=request_id,
        )
        raise ServerMisconfigurationError(MISSING_KEY_MESSAGE)

    try:
        return await _handle_analysis(request, api_key, request_id, request_start)
    except RelayError:
        raise
    except Exception as e:
        logger.error(
            "Gemini API Error",
            request_id=request_id,
            error=str(e),
            traceback=traceback.format_exc(),
        )
        message = getattr(e, "message", None) or str(e) or FALLBACK_ERROR_MESSAGE
        raise InternalError(message)


async def _handle_analysis(
    request: Request,
    api_key: str,
    request_id: str,
    request_start: float,
) -> TextResponse:
    payload = await read_json_body(request)

    # Task is checked before any other field
    task = payload.get("task")
    if not isinstance(task, str) or task not in TASK_TEMPERATURES:
        raise BadRequestError(INVALID_TASK_MESSAGE)

    body = parse_request(AnalysisRequest, payload, _FIELD_MESSAGES)
    if not body.prompt:
        raise BadRequestError(_FIELD_MESSAGES["prompt"])

    model = body.model or ANALYSIS_MODEL_ID
    logger.info(
        "Analysis request started",
        request_id=request_id,
        task=body.task,
        model=model,
        prompt_chars=len(body.prompt),
    )

    text = await generate_for_task(api_key, body.task, body.prompt, model=model)

    logger.info(
        "Analysis request completed",
        request_id=request_id,
        task=body.task,
        duration_ms=int((time.time() - request_start) * 1000),
    )
    return TextResponse(text=text)
