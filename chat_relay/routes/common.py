"""Helpers shared by the HTTP routes."""

from typing import TypeVar

from fastapi import Request, Response
from pydantic import BaseModel, ValidationError

from chat_relay.exceptions import BadRequestError

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

ModelT = TypeVar("ModelT", bound=BaseModel)


async def apply_cors_headers(response: Response) -> None:
    """Router dependency adding the cross-origin headers to every reply."""

    response.headers.update(CORS_HEADERS)


def preflight_response() -> Response:
    """Empty 204 reply for browser preflight requests."""

    return Response(status_code=204, headers=CORS_HEADERS)


async def parse_body(request: Request, model: type[ModelT]) -> ModelT:
    """Read the raw request body into ``model``.

    The body is parsed by hand rather than through FastAPI's validation so
    that clients get the plain ``{"error": ...}`` messages documented for
    these endpoints.
    """

    body = await request.body()
    if not body.strip():
        raise BadRequestError("Missing body")

    try:
        return model.model_validate_json(body)
    except ValidationError as exc:
        raise BadRequestError("Invalid JSON") from exc
