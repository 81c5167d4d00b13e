"""
Text route module for ABA Coach.
Handles /api/gemini: one prompt in, generated text out.

Upstream failures are relayed with their own status and body.
"""

import time
import traceback

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from aws_lambda_powertools import Logger

from models.request_models import PromptRequest
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
    UpstreamError,
)
from gemini_client import (
    get_api_key,
    post_generate_content,
    extract_candidate_text,
    TEXT_MODEL_ID,
)

logger = Logger(service="abacoach")
router = APIRouter()

MISSING_KEY_MESSAGE = "Missing GEMINI_API_KEY on server"
MISSING_PROMPT_MESSAGE = "Missing prompt"


@router.api_route("/api/gemini", methods=ALL_METHODS, response_model=TextResponse)
async def generate_text(request: Request):
    """Forward a prompt to Gemini and return the concatenated text."""
    request_id = get_request_id()
    request_start = time.time()

    require_post(request)

    api_key = get_api_key()
    if not api_key:
        logger.error("GEMINI_API_KEY is not set", request_id=request_id)
        raise ServerMisconfigurationError(MISSING_KEY_MESSAGE)

    try:
        return await _handle_text(request, api_key, request_id, request_start)
    except RelayError:
        raise
    except Exception as e:
        logger.error(
            "Unhandled exception in /api/gemini",
            request_id=request_id,
            error=str(e),
            traceback=traceback.format_exc(),
        )
        raise InternalError(f"{type(e).__name__}: {e}")


async def _handle_text(
    request: Request,
    api_key: str,
    request_id: str,
    request_start: float,
) -> TextResponse:
    payload = await read_json_body(request)
    body = parse_request(PromptRequest, payload, {"prompt": MISSING_PROMPT_MESSAGE})

    if not body.prompt:
        raise BadRequestError(MISSING_PROMPT_MESSAGE)

    logger.info(
        "Text request started",
        request_id=request_id,
        model=TEXT_MODEL_ID,
        prompt_chars=len(body.prompt),
    )

    response = await run_in_threadpool(post_generate_content, api_key, body.prompt)
    data = response.json()

    if not 200 <= response.status_code < 300:
        logger.warning(
            "Gemini returned an error",
            request_id=request_id,
            status_code=response.status_code,
        )
        raise UpstreamError(response.status_code, data)

    text = extract_candidate_text(data)
    logger.info(
        "Text request completed",
        request_id=request_id,
        text_chars=len(text),
        duration_ms=int((time.time() - request_start) * 1000),
    )
    return TextResponse(text=text)
