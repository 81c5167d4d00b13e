"""
Lambda Handler - Wraps FastAPI for AWS Lambda deployment using Mangum.

Cold Start Optimization:
- Heavy imports (FastAPI app, google-genai SDK) happen at module level
  during the init phase, not on each request
"""
import os
import time
_init_start = time.time()

from mangum import Mangum  # noqa: E402
from aws_lambda_powertools import Logger  # noqa: E402
from api_server import app  # noqa: E402

logger = Logger(service="abacoach")

# Strips the stage name (e.g. /production) from the path
API_GATEWAY_BASE_PATH = os.getenv("API_GATEWAY_BASE_PATH", "/")

_init_ms = int((time.time() - _init_start) * 1000)
logger.info("Lambda init completed", init_ms=_init_ms)

# Mangum adapter for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off", api_gateway_base_path=API_GATEWAY_BASE_PATH)
