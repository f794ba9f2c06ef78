"""Run the service with uvicorn: ``python -m chat_relay``."""

import uvicorn

from chat_relay.config import get_settings


def main() -> None:
    settings = get_settings()
    # Logging is configured by the application factory; keep uvicorn from replacing it.
    uvicorn.run(
        "chat_relay.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
