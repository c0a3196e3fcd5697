"""
Talkcore Shell
==============

Usage:
    python -m talkcore.main --corpus examples/en.yaml [--config settings.yaml] [--debug]
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .channels import ShellChannel
from .chatbot import Bot, BotMiddleware, BotRequest, BotResponse
from .config import load_settings, setup_logging
from .corpus import load_corpus
from .error_handling import TalkcoreError

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK = "Sorry, I don't understand you."


def fallback_middleware(answer: str) -> BotMiddleware:
    """Create a middleware filling in answer when the bot has none."""
    def middleware(bot: Bot, request: BotRequest, response: BotResponse, stop):
        if not response.answer:
            response.answer = answer
    return middleware


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="talkcore", description="Chat with a corpus-driven bot.")
    parser.add_argument("--corpus", required=True, help="YAML corpus file")
    parser.add_argument("--config", default=None, help="YAML settings file")
    parser.add_argument("--debug", action="store_true", help="Show intents, scores and entities")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
        setup_logging(settings.observability)

        bot = Bot.from_settings(settings)
        corpus = load_corpus(args.corpus, bot, settings.entities.min_threshold)
        bot.add_middleware(fallback_middleware(corpus.fallback or DEFAULT_FALLBACK))
        bot.train()
    except TalkcoreError as e:
        logger.error(f"Failed to start: {e.message}")
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    shell = ShellChannel(
        bot,
        user_id=settings.shell.user_id,
        prompt=settings.shell.prompt,
        debug=args.debug or settings.shell.debug,
    )
    try:
        asyncio.run(shell.start())
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
