"""Helius client for Solana transaction history, assets and balances.

The cluster is a per-call argument, so one client instance can serve
mainnet and devnet scans concurrently.
"""

import logging
from decimal import Decimal
from typing import Any

import httpx

from solana_exposure_scanner.ingestor.http import (
    MAX_REQUESTS_PER_SECOND,
    JsonHttpClient,
    ProviderDecodeError,
    ProviderError,
    with_retry,
)
from solana_exposure_scanner.ingestor.models import (
    LAMPORTS_PER_SOL,
    Asset,
    SolanaNetwork,
    Transaction,
)

logger = logging.getLogger(__name__)

HELIUS_ENDPOINTS: dict[SolanaNetwork, dict[str, str]] = {
    SolanaNetwork.MAINNET: {
        "api": "https://api.helius.xyz",
        "rpc": "https://mainnet.helius-rpc.com",
    },
    SolanaNetwork.DEVNET: {
        "api": "https://api-devnet.helius.xyz",
        "rpc": "https://devnet.helius-rpc.com",
    },
}

DEFAULT_MAX_TRANSACTIONS = 500
DEFAULT_PAGE_SIZE = 100
ASSET_PAGE_SIZE = 1000
MAX_ASSET_PAGES = 5


class HeliusClient(JsonHttpClient):
    """Helius API wrapper implementing the transaction, asset and balance providers.

    Example:
        ```python
        async with HeliusClient(api_key="...") as helius:
            txs = await helius.get_transactions(address, network=SolanaNetwork.MAINNET)
            balance = await helius.get_balance(address, network=SolanaNetwork.MAINNET)
        ```
    """

    def __init__(
        self,
        api_key: str,
        *,
        max_transactions: int = DEFAULT_MAX_TRANSACTIONS,
        page_size: int = DEFAULT_PAGE_SIZE,
        timeout_seconds: float = 15.0,
        requests_per_second: float = MAX_REQUESTS_PER_SECOND,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Helius client.

        Args:
            api_key: Helius API key.
            max_transactions: Cap on the combined transaction history.
            page_size: Transactions requested per history page (max 100).
            timeout_seconds: Per-request HTTP timeout.
            requests_per_second: Client-side rate limit.
            http_client: Optional preconfigured httpx client (tests).
        """
        super().__init__(
            name="Helius",
            timeout_seconds=timeout_seconds,
            requests_per_second=requests_per_second,
            http_client=http_client,
        )
        if not api_key:
            logger.warning("HELIUS_API_KEY not set. Helius API calls will fail.")
        self._api_key = api_key
        self._max_transactions = max_transactions
        self._page_size = min(page_size, DEFAULT_PAGE_SIZE)

    def _api_base(self, network: SolanaNetwork) -> str:
        return HELIUS_ENDPOINTS[network]["api"]

    def _rpc_url(self, network: SolanaNetwork) -> str:
        return f"{HELIUS_ENDPOINTS[network]['rpc']}/"

    @with_retry()
    async def _get_transactions_page(
        self,
        address: str,
        *,
        network: SolanaNetwork,
        limit: int,
        before: str | None,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"api-key": self._api_key, "limit": limit}
        if before:
            params["before"] = before
        data = await self._get_json(
            f"{self._api_base(network)}/v0/addresses/{address}/transactions",
            params=params,
        )
        if not isinstance(data, list):
            raise ProviderDecodeError("Unexpected Helius transaction history shape")
        return data

    async def get_transactions(
        self,
        address: str,
        *,
        network: SolanaNetwork = SolanaNetwork.MAINNET,
    ) -> list[Transaction]:
        """Fetch enhanced transaction history, newest first.

        Pages through the history until it is exhausted or the configured
        cap is reached, and exposes one combined list.
        """
        transactions: list[Transaction] = []
        before: str | None = None
        while len(transactions) < self._max_transactions:
            limit = min(self._page_size, self._max_transactions - len(transactions))
            page = await self._get_transactions_page(
                address, network=network, limit=limit, before=before
            )
            if not page:
                break
            try:
                transactions.extend(Transaction.from_dict(item) for item in page)
            except (KeyError, TypeError, ValueError, ArithmeticError) as e:
                raise ProviderDecodeError(f"Malformed Helius transaction: {e}") from e
            if len(page) < limit:
                break
            before = transactions[-1].signature

        logger.debug(
            "Fetched %d transactions for %s on %s",
            len(transactions),
            address[:8] + "...",
            network.value,
        )
        return transactions

    @with_retry()
    async def _rpc(self, network: SolanaNetwork, method: str, params: Any, request_id: str) -> Any:
        data = await self._post_json(
            self._rpc_url(network),
            {"jsonrpc": "2.0", "id": request_id, "method": method, "params": params},
            params={"api-key": self._api_key},
        )
        if not isinstance(data, dict):
            raise ProviderDecodeError(f"Unexpected Helius RPC response for {method}")
        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise ProviderError(f"Helius RPC error: {message}")
        return data.get("result")

    async def get_assets(
        self,
        address: str,
        *,
        network: SolanaNetwork = SolanaNetwork.MAINNET,
    ) -> list[Asset]:
        """Fetch fungible and non-fungible assets owned by an address (DAS)."""
        assets: list[Asset] = []
        for page in range(1, MAX_ASSET_PAGES + 1):
            result = await self._rpc(
                network,
                "getAssetsByOwner",
                {
                    "ownerAddress": address,
                    "page": page,
                    "limit": ASSET_PAGE_SIZE,
                    "displayOptions": {"showFungible": True, "showNativeBalance": True},
                },
                "helius-assets",
            )
            items = result.get("items") or [] if isinstance(result, dict) else []
            try:
                assets.extend(Asset.from_dict(item) for item in items)
            except (KeyError, TypeError, ValueError, ArithmeticError) as e:
                raise ProviderDecodeError(f"Malformed Helius asset: {e}") from e
            if len(items) < ASSET_PAGE_SIZE:
                break
        return assets

    async def get_balance(
        self,
        address: str,
        *,
        network: SolanaNetwork = SolanaNetwork.MAINNET,
    ) -> Decimal:
        """Fetch the native balance in SOL."""
        result = await self._rpc(network, "getBalance", [address], "helius-balance")
        value = result.get("value", 0) if isinstance(result, dict) else 0
        try:
            return Decimal(int(value or 0)) / LAMPORTS_PER_SOL
        except (TypeError, ValueError) as e:
            raise ProviderDecodeError(f"Malformed Helius balance: {value!r}") from e
