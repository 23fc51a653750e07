# src/amlguard/interfaces/telegram/handlers.py
"""
Connects python-telegram-bot updates to the MessageDispatcher.

A single MessageHandler receives every new message (commands included) so
command routing stays in one place. The Application processes updates one at
a time, which keeps dispatch sequential.
"""

import logging
from typing import Optional

from telegram import Update
from telegram.ext import Application, ContextTypes, MessageHandler, filters

from amlguard.domain.errors import SendError
from amlguard.interfaces.telegram.dispatcher import InboundMessage, MessageDispatcher
from .errors import register_error_handler

log = logging.getLogger(__name__)


def inbound_from_update(update: Update) -> Optional[InboundMessage]:
    message = update.message
    if message is None or message.chat is None:
        return None
    user = message.from_user
    return InboundMessage(
        chat_id=message.chat.id,
        text=message.text or message.caption or "",
        language_code=user.language_code if user else None,
    )


def build_message_callback(dispatcher: MessageDispatcher):
    async def on_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        inbound = inbound_from_update(update)
        if inbound is None:
            return
        try:
            await dispatcher.handle_message(inbound)
        except SendError as e:
            log.error(f"Failed to handle message: {e} (chat_id={inbound.chat_id}, text={inbound.text!r})")

    return on_message


def register_all_handlers(application: Application, dispatcher: MessageDispatcher) -> None:
    application.add_handler(
        MessageHandler(filters.UpdateType.MESSAGE, build_message_callback(dispatcher))
    )
    register_error_handler(application)
