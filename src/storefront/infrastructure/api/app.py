"""FastAPI application: inbound payment gateway webhooks.

Routes are plain ``def`` functions, so FastAPI runs them in its threadpool
and each request gets its own handler and unit of work.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI, Header, Request, Response
from fastapi.responses import JSONResponse

from storefront.domain.exceptions import (
    ConcurrentModificationError,
    DomainException,
    EntityNotFoundError,
    PaymentGatewayError,
    ValidationError,
    WebhookSignatureError,
)
from storefront.infrastructure.bootstrap import Container

logger = structlog.get_logger(__name__)

_STATUS_BY_ERROR: list[tuple[type[DomainException], int]] = [
    (WebhookSignatureError, 400),
    (ValidationError, 400),
    (EntityNotFoundError, 404),
    (ConcurrentModificationError, 409),
    (PaymentGatewayError, 502),
]


def status_for(exc: DomainException) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def create_app(container: Container | None = None, run_worker: bool = True) -> FastAPI:
    container = container or Container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if run_worker:
            container.restock_worker.start()
        try:
            yield
        finally:
            if run_worker:
                container.restock_worker.stop()

    app = FastAPI(title="Storefront orders", lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(DomainException)
    async def domain_error_handler(request: Request, exc: DomainException) -> JSONResponse:
        status_code = status_for(exc)
        if status_code >= 500 or isinstance(exc, ConcurrentModificationError):
            logger.error("Request failed", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=status_code, content={"error": str(exc)})

    @app.get("/health")
    def health() -> dict:
        return {
            "status": "ok",
            "restock_worker": container.restock_worker.is_running,
            "restock_queue": container.restock_queue.pending(),
        }

    @app.post("/payments/webhook")
    def payment_webhook(
        payload: bytes = Depends(_raw_body),
        stripe_signature: str | None = Header(default=None),
    ) -> Response:
        outcome = container.payment_webhook().handle(payload, stripe_signature)
        logger.debug("Webhook handled", outcome=outcome.value)
        return Response(status_code=200)

    return app


async def _raw_body(request: Request) -> bytes:
    # Signature verification needs the exact bytes Stripe signed.
    return await request.body()
