from .entities import CheckResult, AMLResult, TransactionResult
from .errors import (
    AMLBotError,
    ConfigError,
    TranslationError,
    InvalidInputError,
    UpstreamError,
    DecodeError,
    SendError,
)

__all__ = [
    "CheckResult",
    "AMLResult",
    "TransactionResult",
    "AMLBotError",
    "ConfigError",
    "TranslationError",
    "InvalidInputError",
    "UpstreamError",
    "DecodeError",
    "SendError",
]
