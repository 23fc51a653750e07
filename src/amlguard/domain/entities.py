# src/amlguard/domain/entities.py
"""
Defines the core result entities of the AML check flow.
Results are transient: built per request, rendered, then discarded.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class CheckResult:
    """The provider-level verdict for a single address or transaction."""
    is_suspicious: bool
    risk_score: float
    details: str = ""


@dataclass(frozen=True)
class AMLResult:
    """Bot-facing result of an address check."""
    address: str
    is_suspicious: bool
    risk_score: float
    details: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class TransactionResult:
    """Bot-facing result of a transaction check, keyed by the transaction hash."""
    transaction_id: str
    is_suspicious: bool
    risk_score: float
    details: List[str] = field(default_factory=list)
