"""Dependency providers for the FastAPI application."""

import httpx
from fastapi import Depends
from starlette.requests import HTTPConnection

from chat_relay.config import Settings, get_settings
from chat_relay.services.message_store import ListStore, MessageBoard
from chat_relay.services.relay_service import RelayService


async def get_http_client(connection: HTTPConnection) -> httpx.AsyncClient:
    """Retrieve the shared AsyncClient from application state."""

    return connection.app.state.http_client  # type: ignore[return-value]


async def get_list_store(connection: HTTPConnection) -> ListStore:
    """Retrieve the list store selected at startup."""

    return connection.app.state.list_store  # type: ignore[return-value]


async def get_message_board(store: ListStore = Depends(get_list_store)) -> MessageBoard:
    """Dependency provider for MessageBoard."""

    return MessageBoard(store)


async def get_relay_service(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> RelayService:
    """Dependency provider for RelayService."""

    return RelayService(client=client, settings=settings)
