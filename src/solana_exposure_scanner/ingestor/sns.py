"""Solana Name Service lookups through the SNS SDK proxy.

Implements the name-registry provider (owned .sol domains) and the
social-link provider (X/Twitter handle linked to an address or a domain).
"""

import logging
from typing import Any

import httpx

from solana_exposure_scanner.ingestor.http import (
    JsonHttpClient,
    ProviderDecodeError,
    ProviderNotFoundError,
    with_retry,
)
from solana_exposure_scanner.ingestor.models import SolanaNetwork

logger = logging.getLogger(__name__)

DEFAULT_PROXY_URL = "https://sns-sdk-proxy.bonfida.workers.dev"
DOMAIN_SUFFIX = ".sol"


def normalize_domain(domain: str) -> str:
    """Strip whitespace and the .sol suffix from a domain name."""
    name = domain.strip().lower()
    if name.endswith(DOMAIN_SUFFIX):
        name = name[: -len(DOMAIN_SUFFIX)]
    return name


def normalize_handle(handle: str) -> str:
    return handle.strip().lstrip("@")


class SnsClient(JsonHttpClient):
    """SNS proxy wrapper.

    The public registry lives on mainnet only; devnet lookups resolve to
    nothing. Missing records (404 or a non-"ok" envelope) are not errors.
    """

    def __init__(
        self,
        *,
        proxy_url: str = DEFAULT_PROXY_URL,
        timeout_seconds: float = 15.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(name="SNS", timeout_seconds=timeout_seconds, http_client=http_client)
        self._proxy_url = proxy_url.rstrip("/")

    @with_retry()
    async def _get_result(self, path: str) -> Any:
        try:
            data = await self._get_json(f"{self._proxy_url}{path}")
        except ProviderNotFoundError:
            return None
        if not isinstance(data, dict):
            raise ProviderDecodeError("Unexpected SNS proxy response shape")
        if data.get("s") != "ok":
            return None
        return data.get("result")

    async def get_domains(
        self,
        address: str,
        *,
        network: SolanaNetwork = SolanaNetwork.MAINNET,
    ) -> list[str]:
        """Return the .sol domains owned by an address (without the suffix)."""
        if network is not SolanaNetwork.MAINNET:
            return []

        result = await self._get_result(f"/domains/{address}")
        if not result:
            return []
        if not isinstance(result, list):
            raise ProviderDecodeError("Unexpected SNS domains payload")

        domains: list[str] = []
        for entry in result:
            raw = entry.get("domain") if isinstance(entry, dict) else entry
            if not raw:
                continue
            name = normalize_domain(str(raw))
            if name and name not in domains:
                domains.append(name)
        return domains

    async def get_social_handle(
        self,
        address: str,
        *,
        network: SolanaNetwork = SolanaNetwork.MAINNET,
    ) -> str | None:
        """Return the X handle registered for an address, if any."""
        if network is not SolanaNetwork.MAINNET:
            return None
        result = await self._get_result(f"/twitter/get-handle-by-key/{address}")
        return normalize_handle(str(result)) or None if result else None

    async def get_social_handle_for_domain(
        self,
        domain: str,
        *,
        network: SolanaNetwork = SolanaNetwork.MAINNET,
    ) -> str | None:
        """Return the X handle stored in a domain's twitter record, if any."""
        if network is not SolanaNetwork.MAINNET:
            return None
        result = await self._get_result(f"/record/{normalize_domain(domain)}/twitter")
        return normalize_handle(str(result)) or None if result else None
