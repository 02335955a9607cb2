"""OpenAPI customization.

Adds tag descriptions and documents the 429 throttling reply on the
rate-limited generate endpoint, which FastAPI cannot infer from the
dependency.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {
        "name": "Ads",
        "description": "Ad copy generation for local business promotions.",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]

RATE_LIMITED_PATHS = ("/generate-ad",)

_TOO_MANY_REQUESTS = {
    "description": "Rate limit exceeded. Retry after the number of seconds in Retry-After.",
    "headers": {
        "Retry-After": {
            "description": "Seconds to wait; equals the rate limit window.",
            "schema": {"type": "integer"},
        }
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation with tags and 429 responses."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for path in RATE_LIMITED_PATHS:
            operation = schema.get("paths", {}).get(path, {}).get("post")
            if isinstance(operation, dict):
                operation.setdefault("responses", {}).setdefault("429", _TOO_MANY_REQUESTS)

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
