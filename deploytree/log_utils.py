import json
import logging
import time
import uuid

from starlette.requests import Request
from starlette.responses import Response

from deploytree.config import Settings

logger = logging.getLogger("deploytree")


def setup_logging(level: str | None = None):
    logging.basicConfig(level=level or Settings.from_env().log_level)


async def inject_request_id(request: Request, call_next):
    req_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
    request.state.req_id = req_id
    started = time.perf_counter()
    response: Response = await call_next(request)
    response.headers["X-Request-Id"] = req_id
    # one json line per request; upstream failures surface as 5xx here
    logger.log(
        logging.WARNING if response.status_code >= 500 else logging.INFO,
        json.dumps({
            "msg": "request",
            "req_id": req_id,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 1),
        }),
    )
    return response
