"""
Store Credit Risk Engine

A FastAPI-based service that scores a store's credit book. Store owners
extend credit to their customers and record payments and credit increases;
this service turns those records into:

1. A payment probability for each outstanding credit
2. A risk profile with suggested actions for each customer
3. A recommended amount for a customer's next credit

The service is stateless: every request carries the owner's records, already
fetched from the store's data layer, and nothing is persisted here.
"""
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from credit_risk import metrics
from credit_risk.api import router
from credit_risk.config import settings
from credit_risk.logging import bind_request, clear_request, configure_logging, get_logger, new_request_id
from credit_risk.services.portfolio import CreditNotFoundError

configure_logging(settings.log_level)
logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
UNTRACED_PATHS = ("/health", "/metrics")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "service_started",
        service_name=settings.service_name,
        payment_matching=settings.payment_matching,
        payment_match_window_days=settings.payment_match_window_days,
        default_language=settings.default_language,
    )
    yield
    logger.info("service_stopping", service_name=settings.service_name)


app = FastAPI(
    title="Store Credit Risk Engine",
    description="Payment prediction and customer risk scoring for store credit",
    version="0.1.0",
    lifespan=lifespan,
)


@app.middleware("http")
async def trace_requests(request: Request, call_next):
    """
    Tag each scoring request with a request id and record its outcome.

    The id is taken from the X-Request-ID header when the caller sends one,
    bound to every log entry of the request, and echoed on the response.
    Health and metrics probes are passed through untouched.
    """
    if request.url.path in UNTRACED_PATHS:
        return await call_next(request)

    request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
    request.state.request_id = request_id
    bind_request(request_id)
    logger.info("request_received", method=request.method, path=request.url.path)
    started = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception as exc:
        _observe(request, 500, started, error=str(exc))
        raise
    finally:
        clear_request()

    _observe(request, response.status_code, started)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def _observe(request: Request, status_code: int, started: float, error: Optional[str] = None) -> None:
    elapsed = time.perf_counter() - started
    route = request.scope.get("route")
    endpoint = getattr(route, "path", request.url.path)

    fields = dict(
        method=request.method,
        path=request.url.path,
        status_code=status_code,
        duration_ms=round(elapsed * 1000, 2),
        request_id=request.state.request_id,
    )
    if error is None:
        logger.info("request_completed", **fields)
    else:
        logger.error("request_failed", error=error, **fields)

    metrics.record_http_request(request.method, endpoint, status_code, elapsed)


@app.exception_handler(CreditNotFoundError)
async def credit_not_found_handler(request: Request, exc: CreditNotFoundError):
    logger.warning("credit_not_found", credit_id=exc.credit_id)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail},
        headers={REQUEST_ID_HEADER: getattr(request.state, "request_id", "unknown")},
    )


app.include_router(router)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "ok", "service": settings.service_name}


@app.get("/metrics")
async def metrics_endpoint():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
