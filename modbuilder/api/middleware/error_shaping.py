from __future__ import annotations

import logging
import traceback
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from modbuilder.core.errors import AssemblyError, ConfigError

log = logging.getLogger("modbuilder.errors")


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id")


def _shaped(status_code: int, detail: str, rid: Optional[str]) -> JSONResponse:
    payload = {"detail": detail}
    headers = {}
    if rid:
        payload["request_id"] = rid
        headers["X-Request-Id"] = rid
    return JSONResponse(status_code=status_code, content=payload, headers=headers)


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    - AssemblyError / ConfigError -> 400 with the build message as detail
    - anything else -> 500 "Internal Server Error", traceback logged server-side only
    - request_id is kept in the body and the X-Request-Id header
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except (AssemblyError, ConfigError) as e:
            rid = _request_id(request)
            log.warning("Module build rejected: %s rid=%s path=%s", str(e), rid, request.url.path)
            return _shaped(400, str(e), rid)
        except Exception as e:
            rid = _request_id(request)
            log.error(
                "Unhandled error: %s rid=%s path=%s\n%s",
                str(e),
                rid,
                request.url.path,
                traceback.format_exc(),
            )
            return _shaped(500, "Internal Server Error", rid)
