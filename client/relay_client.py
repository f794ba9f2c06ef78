"""Simple HTTP client for manual testing."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import time
from typing import Any

import httpx

DEFAULT_URL = "http://127.0.0.1:8000"


async def run_client(args: argparse.Namespace) -> Any:
    """Issue one request against a running service and return the decoded body."""

    logger = logging.getLogger("relay_client")
    start = time.perf_counter()

    async with httpx.AsyncClient(base_url=args.url, timeout=args.timeout) as client:
        if args.command == "list":
            response = await client.get("/messages")
        elif args.command == "post":
            response = await client.post(
                "/messages", json={"text": args.text, "author": args.author}
            )
        else:
            payload: dict[str, Any] = {"model": args.model, "message": args.message}
            if args.api_key:
                payload["apiKeys"] = {args.model: args.api_key}
            response = await client.post("/ai-relay", json=payload)

    elapsed = time.perf_counter() - start
    logger.info("HTTP %d in %.2fs", response.status_code, elapsed)

    data = response.json()
    if response.is_error:
        logger.error("Request failed: %s", data)
        raise SystemExit(1)
    return data


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Test client for the chat relay service.")
    parser.add_argument("--url", default=DEFAULT_URL, help="Service base URL (default: %(default)s)")
    parser.add_argument(
        "--timeout", type=float, default=60.0, help="Seconds to wait for a reply."
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level.")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="Show stored messages.")

    post = commands.add_parser("post", help="Store a message.")
    post.add_argument("--text", required=True)
    post.add_argument("--author", default="anon")

    ask = commands.add_parser("ask", help="Send a prompt through the AI relay.")
    ask.add_argument("--model", required=True, help="claude, gpt, gemini or deepseek.")
    ask.add_argument("--message", required=True)
    ask.add_argument("--api-key", help="Per-request credential for the chosen model.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    try:
        data = asyncio.run(run_client(args))
    except KeyboardInterrupt:  # pragma: no cover - manual usage only
        return

    if args.command == "ask":
        print(data["response"])
    else:
        print(json.dumps(data, indent=2))


if __name__ == "__main__":  # pragma: no cover
    main()
