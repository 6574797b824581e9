from __future__ import annotations

from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from product_ratings.core.logging import logger, request_id_var


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an X-Request-Id (client supplied or generated)."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        logger.info(
            "request start %s %s",
            request.method,
            request.url.path,
            extra={"requestId": request_id},
        )

        try:
            response: Response = await call_next(request)
        except Exception:
            # The app-level handler renders the 500 and adds the header.
            logger.info(
                "request end %s %s -> unhandled error",
                request.method,
                request.url.path,
                extra={"requestId": request_id},
            )
            raise
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-Id"] = request_id

        logger.info(
            "request end %s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={"requestId": request_id},
        )

        return response
