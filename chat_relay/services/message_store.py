"""Bounded, newest-first message board and the list stores behind it."""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from chat_relay.config import Settings
from chat_relay.exceptions import MessageStoreError
from chat_relay.models import MAX_MESSAGES, Message

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


class ListStore(Protocol):
    """Minimal list capability shared by every message backend."""

    async def push_front(self, item: str) -> None:
        ...

    async def trim(self, length: int) -> None:
        ...

    async def range(self, count: int) -> list[str]:
        ...


class InMemoryListStore:
    """Process-local list. Not shared between processes and lost on restart."""

    def __init__(self) -> None:
        self._items: list[str] = []

    async def push_front(self, item: str) -> None:
        self._items.insert(0, item)

    async def trim(self, length: int) -> None:
        del self._items[length:]

    async def range(self, count: int) -> list[str]:
        return self._items[:count]


class UpstashListStore:
    """List store speaking the Upstash Redis REST command protocol."""

    def __init__(self, client: httpx.AsyncClient, url: str, token: str, key: str) -> None:
        self._client = client
        self._url = url
        self._token = token
        self._key = key

    async def push_front(self, item: str) -> None:
        await self._command("LPUSH", self._key, item)

    async def trim(self, length: int) -> None:
        await self._command("LTRIM", self._key, "0", str(length - 1))

    async def range(self, count: int) -> list[str]:
        result = await self._command("LRANGE", self._key, "0", str(count - 1))
        if result is None:
            return []
        if not isinstance(result, list):
            raise MessageStoreError("List-store returned a malformed LRANGE result")
        return [item for item in result if isinstance(item, str)]

    async def _command(self, *command: str) -> Any:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._client.post(
                self._url, headers=headers, json={"command": list(command)}
            )
        except httpx.HTTPError as exc:
            logger.error("List-store request failed", extra={"command": command[0]})
            raise MessageStoreError(f"List-store request failed: {exc}") from exc

        if response.is_error:
            logger.error(
                "List-store returned an error status",
                extra={"command": command[0], "status_code": response.status_code},
            )
            raise MessageStoreError(f"Upstash HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise MessageStoreError("List-store returned malformed JSON") from exc

        if not isinstance(data, dict):
            raise MessageStoreError("List-store returned malformed JSON")
        if data.get("error"):
            raise MessageStoreError(str(data["error"]))
        if "result" not in data:
            raise MessageStoreError("List-store returned malformed JSON")
        return data["result"]


def create_list_store(client: httpx.AsyncClient, settings: Settings) -> ListStore:
    """Pick the external list-store when configured, otherwise process memory."""

    if settings.list_store_configured:
        logger.info("Using Upstash list-store for messages", extra={"key": settings.list_store_key})
        return UpstashListStore(
            client,
            url=settings.list_store_url,
            token=settings.list_store_token,
            key=settings.list_store_key,
        )

    logger.info("List-store not configured; messages kept in process memory")
    return InMemoryListStore()


def _to_base36(number: int) -> str:
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


def now_millis() -> int:
    return int(time.time() * 1000)


def generate_id(timestamp: int | None = None) -> str:
    """Random base-36 fragment followed by a time-derived one.

    Collisions are unlikely but possible; ids are not meant to be secrets.
    """

    millis = now_millis() if timestamp is None else timestamp
    random_part = _to_base36(random.randrange(36**8)).rjust(8, "0")
    return f"{random_part}{_to_base36(millis)[-6:]}"


class MessageBoard:
    """Append and list board messages over an injected :class:`ListStore`."""

    def __init__(self, store: ListStore, capacity: int = MAX_MESSAGES) -> None:
        self._store = store
        self._capacity = capacity

    async def list_messages(self) -> list[Message]:
        raw_items = await self._store.range(self._capacity)
        messages = []
        for raw in raw_items:
            try:
                messages.append(Message.model_validate_json(raw))
            except ValidationError:
                logger.warning("Skipping unreadable stored message")
        return messages

    async def add_message(self, text: str, author: str) -> Message:
        timestamp = now_millis()
        message = Message(
            id=generate_id(timestamp),
            text=text,
            author=author,
            timestamp=timestamp,
        )
        await self._store.push_front(message.model_dump_json())
        await self._store.trim(self._capacity)
        logger.info("Message stored", extra={"message_id": message.id, "author": message.author})
        return message
