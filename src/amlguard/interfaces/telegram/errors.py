import logging
from telegram import Update
from telegram.ext import Application, ContextTypes

log = logging.getLogger(__name__)


async def _error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    # Anything a handler did not turn into a reply ends up here; the update loop keeps running.
    if isinstance(update, Update) and update.effective_message:
        msg = update.effective_message
        log.error(
            f"Unhandled error for chat_id={msg.chat_id} text={msg.text!r}",
            exc_info=context.error,
        )
    else:
        log.error("Unhandled Telegram error", exc_info=context.error)


def register_error_handler(application: Application) -> None:
    application.add_error_handler(_error_handler)
