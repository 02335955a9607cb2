from __future__ import annotations

from fastapi import APIRouter

from adgen.core.rate_limit import store_backend_name

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe.

    Reports whether rate limiting is active and which store backs it; with no
    store the limiter admits everything.
    """

    return {"status": "ok", "rate_limit_store": store_backend_name()}
