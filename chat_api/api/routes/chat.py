from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from chat_api.adapters.llm.factory import create_llm_client
from chat_api.adapters.rate_limit.base import RateLimitResult
from chat_api.core.errors import LLMAppError, ValidationAppError
from chat_api.core.rate_limit import enforce_rate_limit
from chat_api.schemas.chat import ChatRequest, ChatResponse
from chat_api.services.chat_service import ChatService

router = APIRouter(tags=["Chat"])


def get_chat_service(request: Request) -> ChatService:
    """Return the app's chat service, creating the LLM client on first use.

    The client is built lazily so the API boots (and /health answers) without
    provider credentials.

    Raises:
        LLMAppError: If the LLM provider is not configured.
    """
    service: ChatService | None = getattr(request.app.state, "chat_service", None)
    if service is not None:
        return service

    try:
        llm = create_llm_client()
    except ValidationAppError as exc:
        raise LLMAppError(
            code="llm_not_configured",
            message="The chat model is not configured.",
        ) from exc

    service = ChatService(llm=llm)
    request.app.state.chat_service = service
    return service


async def parse_chat_request(request: Request) -> ChatRequest:
    """Read and validate the chat body from the raw request.

    Parsing happens inside the handler, after the rate limit dependency, so
    bodies that are not even JSON still consume quota and still get a 429
    once the caller is throttled.

    Raises:
        RequestValidationError: If the body is not valid JSON or fails the schema.
    """
    raw = await request.body()
    try:
        return ChatRequest.model_validate_json(raw)
    except ValidationError as exc:
        errors = [
            {**err, "loc": ("body", *err.get("loc", ()))}
            for err in exc.errors(include_url=False, include_input=False)
        ]
        raise RequestValidationError(errors) from exc


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        400: {"description": "Invalid request body"},
        413: {"description": "Inline image too large"},
        429: {"description": "Rate limit exceeded; see details.reset_at and Retry-After"},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": {"$ref": "#/components/schemas/ChatRequest"}},
            },
        }
    },
)
async def chat(
    request: Request,
    rate_limit: Annotated[RateLimitResult | None, Depends(enforce_rate_limit)],
) -> ChatResponse:
    """Answer the last message of a chat conversation.

    The caller is throttled per client address before the body is read.
    Admitted responses report how many requests remain in the caller's window.

    Args:
        request: FastAPI request carrying the JSON conversation.
        rate_limit: Admission result from the rate limit dependency.

    Returns:
        ChatResponse: Model reply and remaining quota.
    """
    body = await parse_chat_request(request)
    service = get_chat_service(request)
    reply = await service.reply(body.messages)
    return ChatResponse(
        reply=reply,
        remaining=rate_limit.remaining if rate_limit is not None else None,
    )
