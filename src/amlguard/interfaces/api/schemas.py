from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel

from amlguard.monitoring.metrics import MetricsSnapshot


class ComponentStatus(BaseModel):
    requests_count: int
    is_connected: bool


class StatusResponse(BaseModel):
    status: str = "ok"
    timestamp: datetime
    bot: ComponentStatus
    aml: ComponentStatus

    @classmethod
    def from_snapshot(cls, snapshot: MetricsSnapshot, timestamp: datetime) -> "StatusResponse":
        return cls(
            timestamp=timestamp,
            bot=ComponentStatus(
                requests_count=snapshot.bot_requests_count,
                is_connected=snapshot.bot_connected,
            ),
            aml=ComponentStatus(
                requests_count=snapshot.aml_requests_count,
                is_connected=snapshot.aml_connected,
            ),
        )
