# src/amlguard/infrastructure/aml/provider_client.py
"""
HTTP client for the external AML risk-scoring API.

Every call is a single authenticated GET with a fixed timeout. Nothing is
retried or cached: a transport failure or a non-200 status surfaces as
UpstreamError, a body that does not match the expected schema as DecodeError.
"""

import logging
from typing import Annotated, List, Optional, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError

from amlguard.config import DEFAULT_AML_BASE_URL
from amlguard.domain.entities import CheckResult
from amlguard.domain.errors import DecodeError, InvalidInputError, UpstreamError

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class ProviderResponse(BaseModel):
    """Wire shape of ``/check/address/*`` and ``/check/transaction/*`` bodies."""
    model_config = ConfigDict(extra="ignore")

    address: Optional[str] = None
    is_suspicious: StrictBool
    # JSON integers are accepted as floats; strings, NaN and infinities are not.
    risk_score: Annotated[float, Field(strict=True, allow_inf_nan=False)]
    details: Union[List[str], str, None] = None

    def first_detail(self) -> str:
        if self.details is None:
            return ""
        if isinstance(self.details, str):
            return self.details
        return self.details[0] if self.details else ""


class AMLProviderClient:
    """
    Async client for the AML provider.
    Pass ``http_client`` to supply a preconfigured httpx.AsyncClient (tests use
    a MockTransport); otherwise the client creates and owns its own.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_AML_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def check_address(self, address: str) -> CheckResult:
        if not address or not address.strip():
            raise InvalidInputError("address cannot be empty")
        return await self._check("address", address)

    async def check_transaction(self, tx_hash: str) -> CheckResult:
        if not tx_hash or not tx_hash.strip():
            raise InvalidInputError("transaction hash cannot be empty")
        return await self._check("transaction", tx_hash)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AMLProviderClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.api_key}", "Accept": "application/json"}

    async def _check(self, kind: str, identifier: str) -> CheckResult:
        url = f"{self.base_url}/check/{kind}/{quote(identifier, safe='')}"
        try:
            response = await self._client.get(url, headers=self._headers(), timeout=self.timeout)
        except httpx.HTTPError as e:
            log.error(f"AML provider request failed for {kind} {identifier}: {e!r}")
            raise UpstreamError(f"failed to check {kind}: {e.__class__.__name__}") from e

        if response.status_code != httpx.codes.OK:
            log.error(
                f"AML provider returned HTTP {response.status_code} for {kind} {identifier}: "
                f"{response.text[:200]}"
            )
            raise UpstreamError(
                f"unexpected status code: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = ProviderResponse.model_validate_json(response.content)
        except ValidationError as e:
            log.error(f"AML provider sent an unreadable {kind} response for {identifier}: {e}")
            raise DecodeError(f"failed to parse {kind} response") from e

        return CheckResult(
            is_suspicious=payload.is_suspicious,
            risk_score=payload.risk_score,
            details=payload.first_detail(),
        )
