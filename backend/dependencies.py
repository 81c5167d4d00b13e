"""
Request helpers shared by the ABA Coach routes.
Method gate, JSON body parsing and field validation.
"""

import json
import uuid
from typing import Any, Dict, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from errors import BadRequestError, MethodNotAllowedError

ModelT = TypeVar("ModelT", bound=BaseModel)

# Every method reaches the route handler; require_post produces the 405
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_request_id() -> str:
    """Short id used to correlate log lines of one request."""
    return str(uuid.uuid4())[:8]


def require_post(request: Request) -> None:
    if request.method != "POST":
        raise MethodNotAllowedError()


async def read_json_body(request: Request) -> Dict[str, Any]:
    """
    Parse the request body as JSON.

    An empty body or a JSON value that is not an object yields {}.
    Malformed JSON raises json.JSONDecodeError for the caller's error boundary.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    payload = json.loads(raw)
    return payload if isinstance(payload, dict) else {}


def parse_request(
    model_cls: Type[ModelT],
    payload: Dict[str, Any],
    messages: Dict[str, str],
) -> ModelT:
    """
    Validate a payload into model_cls.

    A field of the wrong type raises BadRequestError with the message
    registered for that field in `messages`.
    """
    try:
        return model_cls.model_validate(payload)
    except ValidationError as e:
        loc = e.errors()[0].get("loc") or ("",)
        raise BadRequestError(messages.get(str(loc[0]), "Invalid request body"))
