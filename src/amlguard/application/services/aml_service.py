# src/amlguard/application/services/aml_service.py
"""
Adapts provider verdicts to the shape the chat layer renders.
Errors from the provider are propagated unchanged.
"""

import logging
from typing import Optional, Protocol

from amlguard.domain.entities import AMLResult, CheckResult, TransactionResult
from amlguard.monitoring.metrics import Metrics

log = logging.getLogger(__name__)


class AMLProvider(Protocol):
    async def check_address(self, address: str) -> CheckResult: ...

    async def check_transaction(self, tx_hash: str) -> CheckResult: ...


class AMLService:
    def __init__(self, provider: AMLProvider, metrics: Optional[Metrics] = None):
        self.provider = provider
        self.metrics = metrics

    async def check_address(self, address: str) -> AMLResult:
        self._count()
        result = await self.provider.check_address(address)
        log.debug(f"Address {address} scored {result.risk_score} (suspicious={result.is_suspicious}).")
        return AMLResult(
            address=address,
            is_suspicious=result.is_suspicious,
            risk_score=result.risk_score,
            details=[result.details],
        )

    async def check_transaction(self, tx_hash: str) -> TransactionResult:
        self._count()
        result = await self.provider.check_transaction(tx_hash)
        log.debug(f"Transaction {tx_hash} scored {result.risk_score} (suspicious={result.is_suspicious}).")
        return TransactionResult(
            transaction_id=tx_hash,
            is_suspicious=result.is_suspicious,
            risk_score=result.risk_score,
            details=[result.details],
        )

    def _count(self) -> None:
        if self.metrics is not None:
            self.metrics.increment_aml_requests()
