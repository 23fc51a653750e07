# src/amlguard/interfaces/api/status.py
"""
Read-only status endpoint.

``GET /status`` reports request counters and connectivity flags; any other
method on that path gets 405 from the router. ``GET /metrics`` exposes the
same counters in Prometheus text format. ``StatusServer`` runs the app with
uvicorn on a background thread next to the bot's update loop.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from amlguard.interfaces.api.schemas import StatusResponse
from amlguard.monitoring.metrics import Metrics

log = logging.getLogger(__name__)

DEFAULT_GRACE_PERIOD = 5.0


def create_status_app(metrics: Metrics) -> FastAPI:
    app = FastAPI(title="AMLGuard Status", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.metrics = metrics

    @app.get("/status", response_model=StatusResponse)
    def status() -> StatusResponse:
        return StatusResponse.from_snapshot(metrics.snapshot(), datetime.now(timezone.utc))

    @app.get("/metrics")
    def prometheus_metrics() -> Response:
        return Response(generate_latest(metrics.registry), media_type=CONTENT_TYPE_LATEST)

    return app


class StatusServer:
    def __init__(self, metrics: Metrics, host: str = "0.0.0.0", port: int = 8080):
        config = uvicorn.Config(
            create_status_app(metrics),
            host=host,
            port=port,
            log_level="warning",
            access_log=False,
        )
        self._server = uvicorn.Server(config)
        self._thread: Optional[threading.Thread] = None

    @property
    def started(self) -> bool:
        return self._server.started

    def start(self) -> None:
        # uvicorn only installs signal handlers on the main thread, so the
        # process-level SIGINT/SIGTERM handling stays with the bot loop.
        self._thread = threading.Thread(target=self._server.run, name="status-server", daemon=True)
        self._thread.start()
        log.info(f"Status endpoint listening on {self._server.config.host}:{self._server.config.port}")

    def stop(self, grace: float = DEFAULT_GRACE_PERIOD) -> bool:
        """Stops the server; returns False if open connections had to be aborted."""
        if self._thread is None:
            return True
        self._server.should_exit = True
        self._thread.join(timeout=grace)
        if self._thread.is_alive():
            log.warning(f"Status server still busy after {grace}s, forcing shutdown.")
            self._server.force_exit = True
            self._thread.join(timeout=1.0)
            return False
        log.info("Status server stopped.")
        return True
