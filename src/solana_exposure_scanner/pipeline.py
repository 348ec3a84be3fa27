"""Exposure scan pipeline.

This module provides the ExposurePipeline class that fetches provider data
for an address, runs every analyzer over it and assembles the final
ExposureResult.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, TypeVar

from redis.asyncio import Redis

from solana_exposure_scanner.detector.activity import ActivityAnalyzer
from solana_exposure_scanner.detector.cex_linkage import CexLinkageAnalyzer
from solana_exposure_scanner.detector.clustering import ClusteringAnalyzer
from solana_exposure_scanner.detector.defi import DefiPositionAnalyzer
from solana_exposure_scanner.detector.financial import DEFAULT_SOL_PRICE_USD, FinancialAnalyzer
from solana_exposure_scanner.detector.identity import IdentityAnalyzer
from solana_exposure_scanner.detector.models import ExposureResult
from solana_exposure_scanner.detector.related import RelatedAddressAnalyzer
from solana_exposure_scanner.detector.scorer import ExposureScorer
from solana_exposure_scanner.detector.trading import TradingAnalyzer
from solana_exposure_scanner.ingestor.birdeye import BirdeyeClient
from solana_exposure_scanner.ingestor.helius import HeliusClient
from solana_exposure_scanner.ingestor.models import (
    Asset,
    SolanaNetwork,
    Transaction,
    WalletPnL,
    is_valid_address,
)
from solana_exposure_scanner.ingestor.sns import SnsClient, normalize_handle
from solana_exposure_scanner.profiler.entities import DEFAULT_REGISTRY, EntityRegistry
from solana_exposure_scanner.reporter.formatter import (
    DEFAULT_RECENT_TX_LIMIT,
    build_links,
    summarize_transactions,
)
from solana_exposure_scanner.reporter.narrator import RiskNarrator
from solana_exposure_scanner.reporter.text import truncate_address
from solana_exposure_scanner.storage.cache import (
    MemoryScanCache,
    RedisScanCache,
    ScanCache,
    cache_key,
)

if TYPE_CHECKING:
    from solana_exposure_scanner.config import Settings
    from solana_exposure_scanner.ingestor.http import JsonHttpClient
    from solana_exposure_scanner.ingestor.providers import (
        AssetProvider,
        BalanceProvider,
        NameRegistryProvider,
        PortfolioProvider,
        SocialLinkProvider,
        TransactionProvider,
    )

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT_SECONDS = 30.0

T = TypeVar("T")


class ExposureScanError(Exception):
    """Base exception for scan failures reported to callers."""


class InvalidAddressError(ExposureScanError):
    """Raised when the input is not a plausible Solana address."""


class NoDataError(ExposureScanError):
    """Raised when an address has no transactions, no assets and no balance."""


class AnalysisError(ExposureScanError):
    """Raised when the analysis itself fails unexpectedly."""


@dataclass(frozen=True)
class ScanInputs:
    """Everything fetched from providers for one address.

    Every field holds the provider default when its fetch failed.
    """

    transactions: list[Transaction] = field(default_factory=list)
    assets: list[Asset] = field(default_factory=list)
    sol_balance: Decimal = Decimal(0)
    domains: list[str] = field(default_factory=list)
    social_handles: list[str] = field(default_factory=list)
    pnl: WalletPnL | None = None

    @property
    def is_empty(self) -> bool:
        return not self.transactions and not self.assets and self.sol_balance == 0


class ExposurePipeline:
    """Fetch, analyze and score the privacy exposure of a Solana address.

    Provider fetches run concurrently, each with its own timeout; a failing
    or slow provider degrades to its default value instead of failing the
    scan. Results are cached per (network, address) when a cache is set.

    Example:
        ```python
        pipeline = ExposurePipeline.from_settings(get_settings())
        try:
            result = await pipeline.scan(address, network=SolanaNetwork.MAINNET)
        finally:
            await pipeline.close()
        print(result.exposure_score)
        ```
    """

    def __init__(
        self,
        transactions: TransactionProvider,
        assets: AssetProvider,
        balances: BalanceProvider,
        *,
        names: NameRegistryProvider | None = None,
        socials: SocialLinkProvider | None = None,
        portfolio: PortfolioProvider | None = None,
        cache: ScanCache | None = None,
        registry: EntityRegistry = DEFAULT_REGISTRY,
        scorer: ExposureScorer | None = None,
        sol_price_usd: Decimal = DEFAULT_SOL_PRICE_USD,
        fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        recent_tx_limit: int = DEFAULT_RECENT_TX_LIMIT,
    ) -> None:
        """Initialize the pipeline.

        Args:
            transactions: Transaction history provider.
            assets: Owned-asset provider.
            balances: Native balance provider.
            names: Optional name-service domain provider.
            socials: Optional social-handle provider.
            portfolio: Optional wallet PnL provider.
            cache: Optional scan result cache.
            registry: Known-entity labels used by the analyzers.
            scorer: Weighted scorer (default weights if omitted).
            sol_price_usd: Fixed SOL price estimate.
            fetch_timeout_seconds: Timeout applied to each provider fetch.
            recent_tx_limit: Number of recent transactions summarised.
        """
        self._transactions = transactions
        self._assets = assets
        self._balances = balances
        self._names = names
        self._socials = socials
        self._portfolio = portfolio
        self._cache = cache
        self._sol_price_usd = sol_price_usd
        self._fetch_timeout = fetch_timeout_seconds
        self._recent_tx_limit = recent_tx_limit

        self._cex = CexLinkageAnalyzer(registry)
        self._activity = ActivityAnalyzer()
        self._clustering = ClusteringAnalyzer(registry)
        self._identity = IdentityAnalyzer()
        self._financial = FinancialAnalyzer(sol_price_usd=sol_price_usd)
        self._trading = TradingAnalyzer()
        self._defi = DefiPositionAnalyzer(registry)
        self._related = RelatedAddressAnalyzer(registry)
        self._narrator = RiskNarrator()
        self._scorer = scorer or ExposureScorer()

        self._owned_clients: list[JsonHttpClient] = []
        self._owned_redis: Redis | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> ExposurePipeline:
        """Build a pipeline with real provider clients from settings."""
        api_key = settings.helius.api_key.get_secret_value() if settings.helius.api_key else ""
        helius = HeliusClient(
            api_key,
            max_transactions=settings.helius.max_transactions,
            page_size=settings.helius.page_size,
            timeout_seconds=settings.helius.request_timeout_seconds,
            requests_per_second=settings.helius.requests_per_second,
        )
        owned: list[JsonHttpClient] = [helius]

        sns: SnsClient | None = None
        if settings.sns.enabled:
            sns = SnsClient(
                proxy_url=settings.sns.proxy_url,
                timeout_seconds=settings.helius.request_timeout_seconds,
            )
            owned.append(sns)

        birdeye: BirdeyeClient | None = None
        if settings.birdeye.enabled and settings.birdeye.api_key is not None:
            birdeye = BirdeyeClient(
                settings.birdeye.api_key.get_secret_value(),
                base_url=settings.birdeye.base_url,
                timeout_seconds=settings.helius.request_timeout_seconds,
            )
            owned.append(birdeye)

        redis: Redis | None = None
        cache: ScanCache | None = None
        if settings.cache.enabled:
            if settings.cache.redis_url:
                redis = Redis.from_url(settings.cache.redis_url)
                cache = RedisScanCache(redis, ttl_seconds=settings.cache.ttl_seconds)
            else:
                cache = MemoryScanCache(
                    ttl_seconds=settings.cache.ttl_seconds,
                    max_entries=settings.cache.max_entries,
                )

        pipeline = cls(
            helius,
            helius,
            helius,
            names=sns,
            socials=sns,
            portfolio=birdeye,
            cache=cache,
            sol_price_usd=settings.scan.sol_price_usd,
            fetch_timeout_seconds=settings.scan.fetch_timeout_seconds,
            recent_tx_limit=settings.scan.recent_tx_limit,
        )
        pipeline._owned_clients = owned
        pipeline._owned_redis = redis
        return pipeline

    async def close(self) -> None:
        """Close provider clients and connections created by `from_settings`."""
        for client in self._owned_clients:
            await client.close()
        self._owned_clients = []
        if self._owned_redis is not None:
            await self._owned_redis.aclose()
            self._owned_redis = None

    async def scan(
        self,
        address: str,
        *,
        network: SolanaNetwork = SolanaNetwork.MAINNET,
        use_cache: bool = True,
    ) -> ExposureResult:
        """Scan an address and return its exposure result.

        Raises:
            InvalidAddressError: If the address is malformed.
            NoDataError: If the address has no data to analyze.
            AnalysisError: If an analyzer fails unexpectedly.
        """
        address = address.strip()
        if not is_valid_address(address):
            raise InvalidAddressError(f"Invalid Solana address: {address!r}")

        key = cache_key(address, network)
        if use_cache:
            cached = await self._get_cached(key)
            if cached is not None:
                logger.debug("Cache hit for %s", truncate_address(address))
                return cached

        logger.info("Scanning %s on %s", truncate_address(address), network.value)
        inputs = await self.fetch(address, network=network)
        if inputs.is_empty:
            raise NoDataError("No data found")

        try:
            result = self.analyze(address, network, inputs)
        except Exception as e:
            logger.exception("Analysis failed for %s", truncate_address(address))
            raise AnalysisError(f"Failed to analyze {address}: {e}") from e

        if use_cache:
            await self._store_cached(key, result)

        logger.info(
            "Scanned %s: exposure score %d",
            truncate_address(address),
            result.exposure_score,
        )
        return result

    async def fetch(self, address: str, *, network: SolanaNetwork) -> ScanInputs:
        """Fetch all provider data for an address.

        The first wave fetches history, assets, balance, domains, the
        address's own social handle and portfolio PnL concurrently. A second
        wave resolves the social handle of every discovered domain.
        """
        (
            transactions,
            assets,
            balance,
            domains,
            own_handle,
            pnl,
        ) = await asyncio.gather(
            self._guarded(
                "transactions",
                self._transactions.get_transactions(address, network=network),
                [],
            ),
            self._guarded("assets", self._assets.get_assets(address, network=network), []),
            self._guarded(
                "balance", self._balances.get_balance(address, network=network), Decimal(0)
            ),
            self._guarded_optional(
                "domains",
                self._names.get_domains(address, network=network) if self._names else None,
                [],
            ),
            self._guarded_optional(
                "social handle",
                self._socials.get_social_handle(address, network=network)
                if self._socials
                else None,
                None,
            ),
            self._guarded_optional(
                "portfolio",
                self._portfolio.get_wallet_pnl(address, network=network)
                if self._portfolio
                else None,
                None,
            ),
        )

        domain_handles: list[str | None] = []
        if domains and self._socials is not None:
            socials = self._socials
            domain_handles = await asyncio.gather(
                *(
                    self._guarded(
                        f"social handle for {domain}.sol",
                        socials.get_social_handle_for_domain(domain, network=network),
                        None,
                    )
                    for domain in domains
                )
            )

        handles: dict[str, None] = {}
        for handle in [own_handle, *domain_handles]:
            if handle:
                normalized = normalize_handle(handle)
                if normalized:
                    handles.setdefault(normalized, None)

        return ScanInputs(
            transactions=list(transactions),
            assets=list(assets),
            sol_balance=Decimal(balance),
            domains=list(domains),
            social_handles=list(handles),
            pnl=pnl,
        )

    def analyze(
        self,
        address: str,
        network: SolanaNetwork,
        inputs: ScanInputs,
    ) -> ExposureResult:
        """Run every analyzer over fetched inputs and assemble the result."""
        txs = inputs.transactions
        cex = self._cex.analyze(txs)
        activity = self._activity.analyze(txs)
        clustering = self._clustering.analyze(address, txs)
        identity = self._identity.analyze(inputs.assets, inputs.domains, inputs.social_handles)
        financial = self._financial.analyze(inputs.sol_balance, inputs.assets, inputs.pnl)

        trading = self._trading.analyze(txs, inputs.pnl)
        defi_positions = self._defi.analyze(txs)
        related = self._related.analyze(address, txs)

        risks = self._narrator.narrate(cex, activity, clustering, identity, related)
        breakdown = self._scorer.breakdown(cex, clustering, activity, financial, identity)

        return ExposureResult(
            address=address,
            network=network,
            exposure_score=self._scorer.score(breakdown),
            score_breakdown=breakdown,
            net_worth_usd=financial.net_worth_usd,
            clustering=clustering.to_data(),
            risks=tuple(risks),
            links=build_links(address, network, inputs.domains, inputs.social_handles),
            realized_losses_usd=trading.realized_losses_usd,
            trade_count=trading.trade_count,
            memecoin_trades=trading.memecoin_trades,
            sns_domains=tuple(inputs.domains),
            twitter_handles=tuple(inputs.social_handles),
            recent_tx_summary=summarize_transactions(
                txs, sol_price_usd=self._sol_price_usd, limit=self._recent_tx_limit
            ),
            defi_positions=defi_positions,
            top_losses=trading.top_losses,
            related_addresses=related,
        )

    async def _guarded(self, name: str, fetch: Awaitable[T], default: T) -> T:
        """Await a provider fetch with a timeout, returning `default` on failure."""
        try:
            return await asyncio.wait_for(fetch, timeout=self._fetch_timeout)
        except TimeoutError:
            logger.warning("Fetching %s timed out after %.1fs", name, self._fetch_timeout)
        except Exception as e:
            logger.warning("Fetching %s failed: %s", name, e)
        return default

    async def _guarded_optional(
        self, name: str, fetch: Awaitable[T] | None, default: T
    ) -> T:
        if fetch is None:
            return default
        return await self._guarded(name, fetch, default)

    async def _get_cached(self, key: str) -> ExposureResult | None:
        if self._cache is None:
            return None
        try:
            data = await self._cache.get(key)
            if data is None:
                return None
            return ExposureResult.from_dict(data)
        except Exception as e:
            logger.warning("Failed to read cached scan %s: %s", key, e)
            return None

    async def _store_cached(self, key: str, result: ExposureResult) -> None:
        if self._cache is None:
            return
        try:
            await self._cache.set(key, result.to_dict())
        except Exception as e:
            logger.warning("Failed to cache scan %s: %s", key, e)
