"""CORS policy for the browser front-end."""

from __future__ import annotations

ALLOWED_METHODS = ["GET", "POST", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "api-subscription-key"]
PREFLIGHT_MAX_AGE = 86400


def parse_origins(raw: str | None) -> list[str]:
    """Split a comma-separated origin list, dropping blanks."""
    if not raw:
        return []
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def cors_kwargs(allowed_origins: str | None) -> dict:
    """Build ``CORSMiddleware`` arguments from the configured origins.

    - ``"*"``: any origin, answered with a literal ``*``
    - unset/empty: the caller's Origin is reflected
    - comma list: only listed origins are allowed
    """
    origins = parse_origins(allowed_origins)

    kwargs: dict = {
        "allow_methods": ALLOWED_METHODS,
        "allow_headers": ALLOWED_HEADERS,
        "max_age": PREFLIGHT_MAX_AGE,
        "expose_headers": ["Retry-After", "X-Request-ID"],
    }
    if origins == ["*"]:
        kwargs["allow_origins"] = ["*"]
    elif not origins:
        kwargs["allow_origin_regex"] = ".*"
    else:
        kwargs["allow_origins"] = origins
    return kwargs
