"""Pydantic models shared across application layers."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_MESSAGES = 200
MAX_TEXT_LENGTH = 2000
MAX_AUTHOR_LENGTH = 50
MAX_PROMPT_LENGTH = 4000
DEFAULT_AUTHOR = "anon"


def utf16_length(text: str) -> int:
    """Length in UTF-16 code units, the unit browser clients count limits in."""

    return len(text.encode("utf-16-le", errors="surrogatepass")) // 2


class Message(BaseModel):
    """A stored board message. Never modified after creation."""

    id: str
    text: str
    author: str
    timestamp: int = Field(description="Milliseconds since the Unix epoch.")


class MessageIn(BaseModel):
    """Incoming message payload.

    Non-string values are treated as absent rather than rejected: a missing
    ``text`` surfaces as "Text is required" and a missing ``author`` falls back
    to the default author.
    """

    text: str = ""
    author: str = DEFAULT_AUTHOR

    @field_validator("text", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return value.strip() if isinstance(value, str) else ""

    @field_validator("author", mode="before")
    @classmethod
    def _coerce_author(cls, value: Any) -> str:
        return value.strip() if isinstance(value, str) else DEFAULT_AUTHOR


class MessageList(BaseModel):
    messages: list[Message]


class MessageCreated(BaseModel):
    message: Message


class RelayRequest(BaseModel):
    """Incoming AI relay payload. Field checks happen in the route."""

    model_config = ConfigDict(populate_by_name=True)

    model: Any = None
    message: Any = None
    api_keys: dict[str, str] = Field(default_factory=dict, alias="apiKeys")

    @field_validator("api_keys", mode="before")
    @classmethod
    def _usable_keys(cls, value: Any) -> dict[str, str]:
        if not isinstance(value, dict):
            return {}
        return {
            str(name): key.strip()
            for name, key in value.items()
            if isinstance(key, str) and key.strip()
        }


class RelayResponse(BaseModel):
    """Provider reply text, or a human-readable diagnostic in its place."""

    response: str


class ErrorResponse(BaseModel):
    """Error body returned to HTTP clients."""

    error: str
    details: str | None = None
