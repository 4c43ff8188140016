"""
Webhook Signature Middleware
============================
Rejects webhook deliveries whose signature does not verify.

Usage:
    from fintecture_core.middleware import WebhookSignatureMiddleware

    app.add_middleware(
        WebhookSignatureMiddleware,
        config=FintectureConfig.from_env(),
        paths={"/webhook"},
    )
"""

from typing import Optional, Set

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from .config import FintectureConfig
from .exceptions import AuthenticationError
from .signing.verifier import SignatureVerifier

logger = structlog.get_logger(__name__)


class WebhookSignatureMiddleware(BaseHTTPMiddleware):
    """
    Authenticates POST requests on webhook paths.

    Any verification failure answers 401; other requests pass through.
    The request body stays readable for the downstream handler.
    """

    DEFAULT_PATHS: Set[str] = {"/webhook"}

    def __init__(
        self,
        app,
        config: FintectureConfig,
        paths: Optional[Set[str]] = None,
    ):
        super().__init__(app)
        self.verifier = SignatureVerifier(config)
        self.paths = paths or self.DEFAULT_PATHS

    def _is_webhook(self, request: Request) -> bool:
        return request.method == "POST" and request.url.path.rstrip("/") in {
            p.rstrip("/") for p in self.paths
        }

    async def dispatch(self, request: Request, call_next):
        """Verify webhook deliveries before handing them on."""
        if not self._is_webhook(request):
            return await call_next(request)

        body = await request.body()
        try:
            self.verifier.authenticate(dict(request.headers), body)
        except AuthenticationError as e:
            logger.warning(
                "webhook_rejected",
                path=request.url.path,
                code=e.code,
            )
            return self._unauthorized_response(e)

        return await call_next(request)

    def _unauthorized_response(self, error: AuthenticationError) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content={
                "error": "unauthorized",
                "message": "Webhook signature could not be verified.",
                "code": error.code,
            },
        )
