# tests/conftest.py
"""
Fixtures and test setup for the Pytest suite.
"""

import json
from typing import Callable, List

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock

from amlguard.application.services.aml_service import AMLService
from amlguard.domain.entities import CheckResult
from amlguard.infrastructure.aml.provider_client import AMLProviderClient
from amlguard.interfaces.telegram.dispatcher import MessageDispatcher
from amlguard.interfaces.telegram.translations import TranslationStore
from amlguard.monitoring.metrics import Metrics

BASE_URL = "https://aml.test"
API_KEY = "test-api-key"


@pytest.fixture
def metrics() -> Metrics:
    return Metrics()


@pytest.fixture(scope="session")
def translations() -> TranslationStore:
    """The real translation tables shipped with the package."""
    return TranslationStore.load()


@pytest.fixture
def recorded_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_provider(recorded_requests: List[httpx.Request]) -> Callable[..., AMLProviderClient]:
    """
    Returns a factory building an AMLProviderClient whose HTTP traffic is served
    by ``handler`` through httpx.MockTransport. Every request is recorded.
    """
    def factory(handler) -> AMLProviderClient:
        def transport_handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(transport_handler))
        return AMLProviderClient(api_key=API_KEY, base_url=BASE_URL, http_client=http_client)

    return factory


def json_response(payload, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    body = json.dumps(payload).encode()
    return lambda request: httpx.Response(status_code, content=body, headers={"Content-Type": "application/json"})


@pytest.fixture
def mock_provider() -> MagicMock:
    provider = MagicMock()
    provider.check_address = AsyncMock(
        return_value=CheckResult(is_suspicious=False, risk_score=0.1, details="clean")
    )
    provider.check_transaction = AsyncMock(
        return_value=CheckResult(is_suspicious=True, risk_score=0.8, details="high risk")
    )
    return provider


@pytest.fixture
def aml_service(mock_provider: MagicMock, metrics: Metrics) -> AMLService:
    return AMLService(mock_provider, metrics=metrics)


@pytest.fixture
def send_text() -> AsyncMock:
    return AsyncMock(return_value=None)


@pytest.fixture
def dispatcher(aml_service: AMLService, translations: TranslationStore, send_text: AsyncMock, metrics: Metrics) -> MessageDispatcher:
    return MessageDispatcher(
        aml_service=aml_service,
        translations=translations,
        send_text=send_text,
        metrics=metrics,
    )
