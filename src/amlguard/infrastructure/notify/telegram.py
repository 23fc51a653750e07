# src/amlguard/infrastructure/notify/telegram.py

import logging

from telegram import Bot
from telegram.constants import ParseMode
from telegram.error import TelegramError

from amlguard.domain.errors import SendError

log = logging.getLogger(__name__)


class TelegramNotifier:
    """
    Delivers dispatcher replies through the Bot API.
    A failed delivery is raised as SendError and never retried here.
    """

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_text(self, chat_id: int, text: str) -> None:
        try:
            await self.bot.send_message(
                chat_id=chat_id,
                text=text,
                parse_mode=ParseMode.HTML,
            )
        except TelegramError as e:
            log.warning(f"send_message to chat {chat_id} failed: {e}")
            raise SendError(f"failed to send message: {e}", chat_id=chat_id) from e
