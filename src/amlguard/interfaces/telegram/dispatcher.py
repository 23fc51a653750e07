# src/amlguard/interfaces/telegram/dispatcher.py
"""
Routes an inbound chat message to the matching command and sends one reply.

The dispatcher keeps no per-chat state: every message is handled on its own.
Check failures are logged and turned into a localized error reply; only a
failure to deliver the reply itself (SendError) reaches the caller.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from amlguard.application.services.aml_service import AMLService
from amlguard.domain.errors import AMLBotError
from amlguard.interfaces.telegram.formatters import format_check_error, format_check_result
from amlguard.interfaces.telegram.translations import TranslationStore
from amlguard.monitoring.metrics import Metrics

log = logging.getLogger(__name__)

SendText = Callable[[int, str], Awaitable[Any]]


@dataclass(frozen=True)
class InboundMessage:
    chat_id: int
    text: str = ""
    language_code: Optional[str] = None

    @property
    def command(self) -> Optional[str]:
        """'/Check@SomeBot 0xabc' -> 'check'; None when the text is not a command."""
        text = self.text.strip()
        if not text.startswith("/"):
            return None
        token = text.split(maxsplit=1)[0][1:]
        token = token.split("@", 1)[0].lower()
        return token or None

    @property
    def arguments(self) -> str:
        parts = self.text.strip().split(maxsplit=1)
        return parts[1].strip() if len(parts) > 1 and self.command else ""


class MessageDispatcher:
    def __init__(
        self,
        aml_service: AMLService,
        translations: TranslationStore,
        send_text: SendText,
        metrics: Optional[Metrics] = None,
    ):
        self.aml_service = aml_service
        self.translations = translations
        self.send_text = send_text
        self.metrics = metrics

    async def handle_message(self, message: InboundMessage) -> None:
        """Builds the reply for ``message`` and sends it. Raises SendError if delivery fails."""
        if self.metrics is not None:
            self.metrics.increment_bot_requests()
        reply = await self._build_reply(message)
        await self.send_text(message.chat_id, reply)

    async def _build_reply(self, message: InboundMessage) -> str:
        lang = message.language_code
        command = message.command

        if command is None:
            return self.translations.get(lang, "use_command")
        if command == "start":
            return self.translations.get(lang, "welcome")
        if command == "check":
            return await self._run_check(message, "check_usage", self.aml_service.check_address)
        if command == "checktx":
            return await self._run_check(message, "checktx_usage", self.aml_service.check_transaction)

        log.info(f"Unknown command /{command} in chat {message.chat_id}.")
        return self.translations.get(lang, "unknown_command")

    async def _run_check(self, message: InboundMessage, usage_key: str, check) -> str:
        lang = message.language_code
        args = message.arguments.split()
        if len(args) != 1:
            return self.translations.get(lang, usage_key)

        target = args[0]
        try:
            result = await check(target)
        except AMLBotError as e:
            log.error(
                f"AML check failed for chat {message.chat_id} (text={message.text!r}): "
                f"{e.__class__.__name__}: {e}"
            )
            return format_check_error(self.translations, lang, target, e)

        log.info(f"Checked {target} for chat {message.chat_id}: risk={result.risk_score:.2f}")
        return format_check_result(self.translations, lang, result)
