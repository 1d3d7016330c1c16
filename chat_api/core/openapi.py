"""OpenAPI customization.

Adds tag metadata, registers the chat request body schema (the chat route
parses its body by hand) and documents the rate limit response headers on
the throttled chat operation.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

from chat_api.schemas.chat import ChatRequest

TAGS_METADATA = [
    {
        "name": "Chat",
        "description": "Send text and/or image messages to the generative model.",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]

RATE_LIMIT_HEADERS = {
    "Retry-After": {
        "description": "Seconds until the current window resets.",
        "schema": {"type": "integer"},
    },
    "X-RateLimit-Limit": {
        "description": "Requests admitted per window.",
        "schema": {"type": "integer"},
    },
    "X-RateLimit-Remaining": {
        "description": "Requests left in the current window.",
        "schema": {"type": "integer"},
    },
    "X-RateLimit-Reset": {
        "description": "Window reset time as UNIX epoch milliseconds.",
        "schema": {"type": "integer"},
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation with tags and rate limit headers."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        component_schemas = schema.setdefault("components", {}).setdefault("schemas", {})
        request_schema = ChatRequest.model_json_schema(ref_template="#/components/schemas/{model}")
        component_schemas.update(request_schema.pop("$defs", {}))
        component_schemas.setdefault("ChatRequest", request_schema)

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for methods in schema.get("paths", {}).values():
            for method_obj in methods.values():
                if not isinstance(method_obj, dict):
                    continue
                throttled = method_obj.get("responses", {}).get("429")
                if throttled is not None:
                    throttled.setdefault("headers", RATE_LIMIT_HEADERS)

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
