from __future__ import annotations

from adgen.api.routes.ads import router as ads_router
from adgen.api.routes.health import router as health_router

__all__ = ["ads_router", "health_router"]
