from fastapi import FastAPI
from fastapi.responses import Response

from .config import Settings
from .infrastructure.stores import InMemoryTokenStore, SlidingWindowRateLimiter
from .logging_config import get_logger
from .ports.delivery import MessageDeliverer
from .services.submission_service import SubmissionService

logger = get_logger(__name__)


def _create_minimal_app(settings: Settings, deliverer: MessageDeliverer) -> FastAPI:
    """Create the FastAPI app object and its in-process gate state.

    Building the stores is cheap and side-effect free, so tests can call this
    (through create_app) without running startup events.
    """
    app = FastAPI(title="contactgate")

    gate = settings.gate_config()
    token_store = InMemoryTokenStore(ttl=gate.token_ttl, bind_to_owner=gate.bind_token_to_owner)
    rate_limiter = SlidingWindowRateLimiter(
        max_requests=gate.max_requests, window=gate.window_duration
    )

    app.state.settings = settings
    app.state.token_store = token_store
    app.state.rate_limiter = rate_limiter
    app.state.deliverer = deliverer
    app.state.submission_service = SubmissionService(token_store, rate_limiter, deliverer)
    return app


def create_app(
    settings: Settings | None = None, deliverer: MessageDeliverer | None = None
) -> FastAPI:
    """Create and wire a FastAPI application.

    This returns a fully routed app (routers + middleware) but intentionally
    doesn't start background tasks, which the composition root does at startup.
    """
    if settings is None:
        from .deps.providers import get_settings

        settings = get_settings()
    if deliverer is None:
        from .deps.providers import build_deliverer

        deliverer = build_deliverer(settings)

    app = _create_minimal_app(settings, deliverer)

    from .metrics import metrics_response
    from .middleware.metrics_middleware import MetricsMiddleware
    from .middleware.security_headers import SecurityHeadersMiddleware
    from .routers import contact, health

    app.include_router(health.router)
    app.include_router(contact.router)

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, environment=settings.environment)

    @app.get("/metrics")
    async def _metrics():
        data, content_type = metrics_response()
        return Response(content=data, media_type=content_type)

    logger.info(
        "app_created",
        deliverer=type(deliverer).__name__,
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    return app


__all__ = ["create_app", "_create_minimal_app"]
