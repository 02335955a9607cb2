from __future__ import annotations

"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests can build isolated instances with patched settings.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adgen.api.routes import ads_router, health_router
from adgen.core.config import settings
from adgen.core.cors import cors_kwargs
from adgen.core.exception_handlers import setup_exception_handlers
from adgen.core.logging import configure_logging
from adgen.core.middleware import request_id_middleware, security_headers_middleware
from adgen.core.openapi import apply_openapi_customizations


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Ad Generator Proxy",
        description=(
            "Edge proxy that turns a local business promotion (name, type, city, "
            "offer, language, tone) into WhatsApp, Instagram, poster and hashtag "
            "copy via a generative-text API. Requests are rate limited per client "
            "IP with a sliding window."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    # Middleware: the last one added runs first, so preflight replies from
    # CORS still pass through the security headers and request id layers
    app.add_middleware(CORSMiddleware, **cors_kwargs(settings.app.allowed_origins))
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(ads_router)
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
