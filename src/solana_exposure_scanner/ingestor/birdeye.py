"""Birdeye client for optional wallet PnL data."""

import logging

import httpx

from solana_exposure_scanner.ingestor.http import (
    JsonHttpClient,
    ProviderDecodeError,
    with_retry,
)
from solana_exposure_scanner.ingestor.models import SolanaNetwork, WalletPnL

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://public-api.birdeye.so"


class BirdeyeClient(JsonHttpClient):
    """Birdeye API wrapper implementing the portfolio provider.

    Without an API key the client is disabled and every lookup returns None.
    Birdeye only indexes mainnet, so devnet lookups return None as well.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 15.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(
            name="Birdeye",
            timeout_seconds=timeout_seconds,
            headers={"X-API-KEY": api_key or "", "x-chain": "solana"},
            http_client=http_client,
        )
        self._base_url = base_url.rstrip("/")
        self._enabled = bool(api_key)
        if not self._enabled:
            logger.info("BIRDEYE_API_KEY not set. Birdeye features will be disabled.")

    @property
    def enabled(self) -> bool:
        return self._enabled

    @with_retry()
    async def get_wallet_pnl(
        self,
        address: str,
        *,
        network: SolanaNetwork = SolanaNetwork.MAINNET,
    ) -> WalletPnL | None:
        """Fetch per-token PnL for a wallet, or None when unavailable."""
        if not self._enabled or network is not SolanaNetwork.MAINNET:
            return None

        data = await self._get_json(
            f"{self._base_url}/wallet/v2/pnl",
            params={"wallet": address},
        )
        if not isinstance(data, dict) or not data.get("success") or not data.get("data"):
            return None

        items = data["data"].get("items") or []
        try:
            return WalletPnL.from_items(items)
        except (AttributeError, TypeError, ValueError, ArithmeticError) as e:
            raise ProviderDecodeError(f"Malformed Birdeye PnL payload: {e}") from e
