"""AI relay endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from chat_relay.dependencies import get_relay_service
from chat_relay.exceptions import BadRequestError
from chat_relay.models import (
    MAX_PROMPT_LENGTH,
    RelayRequest,
    RelayResponse,
    utf16_length,
)
from chat_relay.routes.common import apply_cors_headers, parse_body, preflight_response
from chat_relay.services.relay_service import RelayService

router = APIRouter(prefix="/ai-relay", dependencies=[Depends(apply_cors_headers)])


@router.post("", response_model=RelayResponse)
async def relay_prompt(
    request: Request,
    relay_service: Annotated[RelayService, Depends(get_relay_service)],
) -> RelayResponse:
    """Forward a prompt to the selected model.

    Provider failures are reported in ``response`` with status 200; only
    malformed requests produce an error status.
    """

    payload = await parse_body(request, RelayRequest)

    if not payload.model or not payload.message:
        raise BadRequestError("Missing model or message")
    if not isinstance(payload.message, str) or not payload.message.strip():
        raise BadRequestError("Message must be a non-empty string")
    if utf16_length(payload.message) > MAX_PROMPT_LENGTH:
        raise BadRequestError(f"Message too long (max {MAX_PROMPT_LENGTH} chars)")

    text = await relay_service.ask(payload.model, payload.message, payload.api_keys)
    return RelayResponse(response=text)


@router.options("")
async def relay_preflight() -> Response:
    return preflight_response()
