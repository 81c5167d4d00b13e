"""
Gemini Client - REST and google-genai SDK access to the Gemini API.

The text route talks to the REST endpoint directly so that upstream errors can
be relayed as-is. The analysis route uses the SDK, which raises on upstream
errors.
"""

import os
import time
from typing import Optional, Dict, Any

import requests

# NEW SDK - google-genai (not google-generativeai)
from google import genai
from google.genai import types
from dotenv import load_dotenv

# Structured logging
from aws_lambda_powertools import Logger

from analysis_schema import get_analysis_schema

# Load environment variables
load_dotenv()

logger = Logger(service="abacoach")

# Configuration
GEMINI_API_BASE = os.getenv(
    "GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta"
).rstrip("/")

# Model IDs
TEXT_MODEL_ID = os.getenv("GEMINI_TEXT_MODEL", "gemini-1.5-flash")
ANALYSIS_MODEL_ID = os.getenv("GEMINI_ANALYSIS_MODEL", "gemini-2.5-flash")

# Unset means no client-side timeout; the platform request timeout applies
_timeout = os.getenv("UPSTREAM_TIMEOUT_SECONDS", "")
UPSTREAM_TIMEOUT: Optional[float] = float(_timeout) if _timeout else None

# Tasks accepted by the analysis route
TASK_ANALYZE_BEHAVIOR = "analyzeBehavior"
TASK_ABA_INFO = "getABAInfo"

TASK_TEMPERATURES = {
    TASK_ANALYZE_BEHAVIOR: 0.7,
    TASK_ABA_INFO: 0.1,
}


def get_api_key() -> Optional[str]:
    """Read GEMINI_API_KEY for the current request. Empty counts as missing."""
    return os.getenv("GEMINI_API_KEY") or None


# ============================================
# REST path (text route)
# ============================================

def build_generate_url(model: str = TEXT_MODEL_ID) -> str:
    return f"{GEMINI_API_BASE}/models/{model}:generateContent"


def build_text_payload(prompt: str) -> Dict[str, Any]:
    """Wrap the prompt as a single user-role message."""
    return {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}


def post_generate_content(
    api_key: str,
    prompt: str,
    model: str = TEXT_MODEL_ID,
) -> requests.Response:
    """
    Issue one generateContent POST. No retries.

    The key goes in the `key` URL parameter. Status handling is left to the
    caller so non-2xx bodies can be relayed verbatim.
    """
    start = time.time()
    response = requests.post(
        build_generate_url(model),
        params={"key": api_key},
        headers={"Content-Type": "application/json"},
        json=build_text_payload(prompt),
        timeout=UPSTREAM_TIMEOUT,
    )
    logger.info(
        "Gemini REST call completed",
        model=model,
        status_code=response.status_code,
        duration_ms=int((time.time() - start) * 1000),
    )
    return response


def extract_candidate_text(data: Any) -> str:
    """Concatenate the text parts of the first candidate ("" when absent)."""
    if not isinstance(data, dict):
        return ""
    candidates = data.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return ""
    content = candidates[0].get("content") or {}
    parts = content.get("parts") or []
    return "".join(
        part.get("text") or "" for part in parts if isinstance(part, dict)
    )


# ============================================
# SDK path (analysis route)
# ============================================

def build_task_config(task: str) -> Optional[types.GenerateContentConfig]:
    """Generation config for a task, or None if the task is unknown."""
    if task == TASK_ANALYZE_BEHAVIOR:
        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=get_analysis_schema(),
            temperature=TASK_TEMPERATURES[task],
        )
    if task == TASK_ABA_INFO:
        return types.GenerateContentConfig(temperature=TASK_TEMPERATURES[task])
    return None


def get_client(api_key: str) -> genai.Client:
    """Create a Gemini client for one request."""
    return genai.Client(api_key=api_key)


async def generate_for_task(
    api_key: str,
    task: str,
    prompt: str,
    model: str = ANALYSIS_MODEL_ID,
) -> str:
    """
    Run one SDK generate_content call for the given task.

    Returns the raw response text ("" when the model returned none). For
    analyzeBehavior this is JSON text that is not parsed here.
    Raises ValueError for an unknown task; SDK errors propagate.
    """
    config = build_task_config(task)
    if config is None:
        raise ValueError(f"Unknown task: {task}")

    start = time.time()
    async with get_client(api_key).aio as aclient:
        response = await aclient.models.generate_content(
            model=model,
            contents=prompt,
            config=config,
        )
    logger.info(
        "Gemini SDK call completed",
        task=task,
        model=model,
        duration_ms=int((time.time() - start) * 1000),
    )
    return response.text or ""
