"""
Shell Channel
=============

Interactive command-line conversation with a bot.
"""

import asyncio
import logging
from typing import Callable

from ..chatbot import Bot, BotRequest, BotResponse
from ..error_handling import TalkcoreError

logger = logging.getLogger(__name__)

QUIT_COMMAND = "/quit"


class ShellChannel:
    """
    Line based bot shell.

    The bot is trained on start if it is not trained yet. The session ends on
    end of input or the /quit command, and the bot is closed with it. Failed
    requests are reported and the shell keeps prompting.
    """

    def __init__(self, bot: Bot, user_id: str = "user", prompt: str = "User> ",
                 debug: bool = False, input_func: Callable[[str], str] = input,
                 output: Callable[[str], None] = print):
        self.bot = bot
        self.user_id = user_id
        self.prompt = prompt
        self.debug = debug
        self.input_func = input_func
        self.output = output

    async def handle(self, text: str) -> str:
        """Process one line of user input and render the bot reply."""
        response = await self.bot.process(BotRequest(text=text, user_id=self.user_id))
        return self.render(response)

    def render(self, response: BotResponse) -> str:
        lines = [f"Bot> {response.answer}"]
        if self.debug:
            scores = ", ".join(
                f"{match.language}/{match.intent} {match.score:.2f}"
                for match in response.classifications
            )
            entities = ", ".join(
                f"{match.label}={match.option} {match.score:.2f}" for match in response.entities
            )
            lines.append(f"     intent: {response.intent} ({response.language})")
            lines.append(f"     scores: {scores or '-'}")
            lines.append(f"     entities: {entities or '-'}")
        return "\n".join(lines)

    async def start(self):
        """Run the shell until end of input."""
        if not self.bot.is_trained:
            self.bot.train()

        loop = asyncio.get_running_loop()
        logger.info(f"Shell session started for user {self.user_id}")
        try:
            while True:
                try:
                    text = await loop.run_in_executor(None, self.input_func, self.prompt)
                except EOFError:
                    break
                if text.strip() == QUIT_COMMAND:
                    break
                if not text.strip():
                    continue
                try:
                    reply = await self.handle(text)
                except TalkcoreError as e:
                    logger.error(f"Failed to process {text!r} for user {self.user_id}: {e.message}")
                    reply = f"Error: {e.message}"
                self.output(reply)
                self.output("")
        finally:
            self.bot.close()
            logger.info(f"Shell session finished for user {self.user_id}")
