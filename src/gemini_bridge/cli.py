"""Command line interface for trying the bridge in demo mode."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Sequence

from .config import BridgeConfig
from .core.adapters import ModelAdapter, replay_stream
from .core.errors import BridgeError
from .factory import create_adapter

DEFAULT_MODEL = "gemini-1.5-flash"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Claude Messages front end for Gemini models")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("models", help="list the demo models")

    chat_parser = subparsers.add_parser("chat", help="send one prompt to the demo adapter")
    chat_parser.add_argument("prompt", help="User message to send")
    chat_parser.add_argument("-m", "--model", default=DEFAULT_MODEL, help="Model name")
    chat_parser.add_argument(
        "-s",
        "--stream",
        action="store_true",
        help="Print streamed events, one JSON object per line",
    )
    chat_parser.add_argument("--seed", type=int, help="Seed for the template choice")
    chat_parser.add_argument(
        "--no-delay",
        action="store_true",
        help="Skip the simulated latency",
    )

    return parser


def _demo_adapter(args: argparse.Namespace) -> ModelAdapter:
    config = BridgeConfig(mode="demo", demo_seed=getattr(args, "seed", None))
    if getattr(args, "no_delay", False):
        config.demo_response_delay = 0.0
        config.demo_word_delay = 0.0
    return create_adapter(config)


async def _handle_models(args: argparse.Namespace) -> int:
    adapter = _demo_adapter(args)
    models = await adapter.list_models()
    sys.stdout.write(json.dumps(models.to_dict(), indent=2) + "\n")
    return 0


async def _handle_chat(args: argparse.Namespace) -> int:
    adapter = _demo_adapter(args)
    request = {
        "model": args.model,
        "stream": args.stream,
        "messages": [{"role": "user", "content": args.prompt}],
    }

    if args.stream:
        events = await replay_stream(adapter.generate_content_stream(args.model, request))
        for event in events:
            sys.stdout.write(json.dumps(event.to_dict()) + "\n")
        return 1 if events and events[-1].type == "error" else 0

    try:
        message = await adapter.generate_content(args.model, request)
    except BridgeError as exc:
        sys.stderr.write(json.dumps({"type": "error", "error": exc.error.to_dict()}) + "\n")
        return 1
    sys.stdout.write(message.model_dump_json(indent=2) + "\n")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))
    if args.command == "models":
        return asyncio.run(_handle_models(args))
    if args.command == "chat":
        return asyncio.run(_handle_chat(args))
    parser.error("no command provided")
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
