# src/amlguard/monitoring/metrics.py
"""
Process metrics shared by the update loop and the status endpoint.

One ``Metrics`` instance is created at startup and handed to both sides.
Counters are guarded by a lock so concurrent increments are never lost, and
every change is mirrored into a per-instance Prometheus registry that the
status app exposes on ``/metrics``.
"""

import threading
from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Gauge


@dataclass(frozen=True)
class MetricsSnapshot:
    bot_requests_count: int
    bot_connected: bool
    aml_requests_count: int
    aml_connected: bool


class Metrics:
    def __init__(self, registry: CollectorRegistry | None = None):
        self._lock = threading.Lock()
        self._bot_requests = 0
        self._aml_requests = 0
        self._bot_connected = False
        self._aml_connected = False

        self.registry = registry or CollectorRegistry()
        self._bot_counter = Counter(
            "amlguard_bot_requests", "Chat messages handled by the bot", registry=self.registry
        )
        self._aml_counter = Counter(
            "amlguard_aml_requests", "Checks sent to the AML provider", registry=self.registry
        )
        self._connected = Gauge(
            "amlguard_connected", "Connectivity flag per component", ["component"], registry=self.registry
        )
        self._connected.labels(component="bot").set(0)
        self._connected.labels(component="aml").set(0)

    def increment_bot_requests(self) -> int:
        with self._lock:
            self._bot_requests += 1
            value = self._bot_requests
        self._bot_counter.inc()
        return value

    def increment_aml_requests(self) -> int:
        with self._lock:
            self._aml_requests += 1
            value = self._aml_requests
        self._aml_counter.inc()
        return value

    def set_bot_connected(self, connected: bool) -> None:
        with self._lock:
            self._bot_connected = connected
        self._connected.labels(component="bot").set(1 if connected else 0)

    def set_aml_connected(self, connected: bool) -> None:
        with self._lock:
            self._aml_connected = connected
        self._connected.labels(component="aml").set(1 if connected else 0)

    def snapshot(self) -> MetricsSnapshot:
        """Reads all four values under one lock acquisition."""
        with self._lock:
            return MetricsSnapshot(
                bot_requests_count=self._bot_requests,
                bot_connected=self._bot_connected,
                aml_requests_count=self._aml_requests,
                aml_connected=self._aml_connected,
            )
