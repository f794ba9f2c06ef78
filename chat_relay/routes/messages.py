"""Shared message board endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from chat_relay.dependencies import get_message_board
from chat_relay.exceptions import BadRequestError
from chat_relay.models import (
    DEFAULT_AUTHOR,
    MAX_AUTHOR_LENGTH,
    MAX_TEXT_LENGTH,
    MessageCreated,
    MessageIn,
    MessageList,
    utf16_length,
)
from chat_relay.routes.common import apply_cors_headers, parse_body, preflight_response
from chat_relay.services.message_store import MessageBoard

router = APIRouter(prefix="/messages", dependencies=[Depends(apply_cors_headers)])


@router.get("", response_model=MessageList)
async def list_messages(
    board: Annotated[MessageBoard, Depends(get_message_board)],
) -> MessageList:
    """Return the stored messages, newest first."""

    return MessageList(messages=await board.list_messages())


@router.post("", status_code=201, response_model=MessageCreated)
async def create_message(
    request: Request,
    board: Annotated[MessageBoard, Depends(get_message_board)],
) -> MessageCreated:
    payload = await parse_body(request, MessageIn)

    if not payload.text:
        raise BadRequestError("Text is required")
    if utf16_length(payload.text) > MAX_TEXT_LENGTH:
        raise BadRequestError(f"Text too long (max {MAX_TEXT_LENGTH} chars)")
    if utf16_length(payload.author) > MAX_AUTHOR_LENGTH:
        raise BadRequestError(f"Author too long (max {MAX_AUTHOR_LENGTH} chars)")

    message = await board.add_message(payload.text, payload.author or DEFAULT_AUTHOR)
    return MessageCreated(message=message)


@router.options("")
async def messages_preflight() -> Response:
    return preflight_response()
