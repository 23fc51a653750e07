# src/amlguard/domain/errors.py
"""
Error taxonomy shared by every layer.
Provider errors travel unchanged up to the dispatcher, which is the only
place that turns them into user-facing text.
"""

from typing import Optional


class AMLBotError(Exception):
    """Base class for all errors raised by amlguard."""


class ConfigError(AMLBotError):
    """Configuration could not be loaded or is incomplete. Fatal at startup."""


class TranslationError(ConfigError):
    """Translation tables are missing, malformed, or lack a requested key."""


class InvalidInputError(AMLBotError):
    """The address or transaction hash supplied by the user is empty."""


class UpstreamError(AMLBotError):
    """The AML provider could not be reached or answered with a non-200 status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(AMLBotError):
    """The AML provider answered 200 with a body that does not match the schema."""


class SendError(AMLBotError):
    """The reply could not be delivered to the chat platform."""

    def __init__(self, message: str, chat_id: Optional[int] = None):
        super().__init__(message)
        self.chat_id = chat_id
