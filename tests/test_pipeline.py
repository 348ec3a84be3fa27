"""Tests for the exposure scan pipeline."""

from __future__ import annotations

import asyncio
import json
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from solana_exposure_scanner.detector.models import ExposureResult
from solana_exposure_scanner.ingestor.models import SolanaNetwork
from solana_exposure_scanner.pipeline import (
    ExposurePipeline,
    InvalidAddressError,
    NoDataError,
    ScanInputs,
)
from solana_exposure_scanner.storage.cache import MemoryScanCache

PEER_ADDRESS = "DRpbCBMxVnDK7maPM5tGv6MvB3v1sRMC86PZ8okm21hy"


@pytest.fixture
def helius():
    """Fake transaction/asset/balance provider."""
    provider = MagicMock()
    provider.get_transactions = AsyncMock(return_value=[])
    provider.get_assets = AsyncMock(return_value=[])
    provider.get_balance = AsyncMock(return_value=Decimal(0))
    return provider


@pytest.fixture
def sns():
    """Fake name registry and social link provider."""
    provider = MagicMock()
    provider.get_domains = AsyncMock(return_value=[])
    provider.get_social_handle = AsyncMock(return_value=None)
    provider.get_social_handle_for_domain = AsyncMock(return_value=None)
    return provider


def _pipeline(helius, sns=None, **kwargs) -> ExposurePipeline:
    return ExposurePipeline(helius, helius, helius, names=sns, socials=sns, **kwargs)


class TestScan:
    @pytest.mark.asyncio
    async def test_exchange_and_domain_exposure(
        self, helius, sns, make_tx, self_address, binance_address
    ) -> None:
        helius.get_transactions.return_value = [
            make_tx(
                timestamp=1_700_000_000,
                native=((self_address, binance_address, 1_000_000_000),),
            )
        ]
        helius.get_balance.return_value = Decimal(1)
        sns.get_domains.return_value = ["alice"]
        sns.get_social_handle.return_value = "@alice_sol"
        sns.get_social_handle_for_domain.return_value = "alice_sol"

        result = await _pipeline(helius, sns).scan(self_address)

        assert result.address == self_address
        assert result.network is SolanaNetwork.MAINNET
        assert result.score_breakdown.kyc_links == 40
        assert result.score_breakdown.identity == 60
        assert result.sns_domains == ("alice",)
        assert result.twitter_handles == ("alice_sol",)
        assert result.net_worth_usd == Decimal("200.00")
        assert (
            "Direct transfers to/from Binance detected - potential KYC linkage" in result.risks
        )
        assert "SNS domain(s) alice.sol owned - direct identity linkage" in result.risks
        assert "Linked social account(s) @alice_sol - critical identity exposure" in result.risks
        assert result.links.twitter_profile == "https://x.com/alice_sol"
        assert 0 <= result.exposure_score <= 100

        sns.get_social_handle_for_domain.assert_awaited_once_with(
            "alice", network=SolanaNetwork.MAINNET
        )

    @pytest.mark.asyncio
    async def test_fee_payer_fallback(self, helius, make_tx, self_address) -> None:
        helius.get_transactions.return_value = [
            make_tx(fee_payer=PEER_ADDRESS, timestamp=1_700_000_000 + i) for i in range(3)
        ]

        result = await _pipeline(helius).scan(self_address)

        assert result.clustering.interacted_count == 1
        assert result.clustering.network_nodes[0].address == PEER_ADDRESS
        assert result.clustering.network_nodes[0].interactions == 3

    @pytest.mark.asyncio
    async def test_strips_address(self, helius, self_address) -> None:
        helius.get_balance.return_value = Decimal("0.5")
        result = await _pipeline(helius).scan(f"  {self_address}\n")
        assert result.address == self_address

    @pytest.mark.asyncio
    async def test_invalid_address(self, helius) -> None:
        with pytest.raises(InvalidAddressError):
            await _pipeline(helius).scan("not-a-solana-address")
        helius.get_transactions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_wallet_raises_no_data(self, helius, self_address) -> None:
        with pytest.raises(NoDataError, match="No data found"):
            await _pipeline(helius).scan(self_address)

    @pytest.mark.asyncio
    async def test_repeated_scans_are_identical(
        self, helius, sns, make_tx, make_asset, self_address, binance_address
    ) -> None:
        helius.get_transactions.return_value = [
            make_tx(
                type="SWAP",
                source="JUPITER",
                timestamp=1_700_000_000 + i * 86_400,
                native=((self_address, binance_address if i % 2 else PEER_ADDRESS, 10_000_000),),
                tokens=((PEER_ADDRESS, self_address, "BonkMint111111111111111111111111111111111"),),
                description=f"Swap {i}",
            )
            for i in range(6)
        ]
        helius.get_assets.return_value = [
            make_asset(name="alice.sol"),
            make_asset(interface="FungibleToken", symbol="USDC", total_price=Decimal("12.5")),
        ]
        helius.get_balance.return_value = Decimal("3.25")
        sns.get_domains.return_value = ["alice", "bob"]
        sns.get_social_handle.return_value = "alice_sol"

        pipeline = _pipeline(helius, sns)
        first = await pipeline.scan(self_address, use_cache=False)
        second = await pipeline.scan(self_address, use_cache=False)

        assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())
        assert ExposureResult.from_dict(first.to_dict()) == first
        assert helius.get_transactions.await_count == 2

    @pytest.mark.asyncio
    async def test_devnet_passed_to_providers(self, helius, self_address) -> None:
        helius.get_balance.return_value = Decimal(1)
        result = await _pipeline(helius).scan(self_address, network=SolanaNetwork.DEVNET)

        assert result.network is SolanaNetwork.DEVNET
        assert result.links.solscan.endswith("?cluster=devnet")
        helius.get_transactions.assert_awaited_once_with(
            self_address, network=SolanaNetwork.DEVNET
        )


class TestFetch:
    @pytest.mark.asyncio
    async def test_failing_provider_degrades_to_default(self, helius, sns, self_address) -> None:
        helius.get_balance.return_value = Decimal(2)
        helius.get_transactions.side_effect = RuntimeError("helius down")
        sns.get_domains.side_effect = RuntimeError("sns down")

        inputs = await _pipeline(helius, sns).fetch(self_address, network=SolanaNetwork.MAINNET)

        assert inputs.transactions == []
        assert inputs.domains == []
        assert inputs.sol_balance == Decimal(2)

    @pytest.mark.asyncio
    async def test_slow_provider_times_out(self, helius, self_address) -> None:
        async def slow_assets(*args, **kwargs):
            await asyncio.sleep(1)
            return ["never"]

        helius.get_assets.side_effect = slow_assets
        helius.get_balance.return_value = Decimal(1)

        inputs = await _pipeline(helius, fetch_timeout_seconds=0.01).fetch(
            self_address, network=SolanaNetwork.MAINNET
        )

        assert inputs.assets == []
        assert inputs.sol_balance == Decimal(1)

    @pytest.mark.asyncio
    async def test_handles_deduplicated(self, helius, sns, self_address) -> None:
        sns.get_domains.return_value = ["alice", "bob", "carol"]
        sns.get_social_handle.return_value = "@Alice"
        handles = {"alice": "Alice", "bob": "@bob_x", "carol": None}
        sns.get_social_handle_for_domain.side_effect = lambda domain, network: handles[domain]

        inputs = await _pipeline(helius, sns).fetch(self_address, network=SolanaNetwork.MAINNET)

        assert inputs.social_handles == ["Alice", "bob_x"]

    @pytest.mark.asyncio
    async def test_without_optional_providers(self, helius, self_address) -> None:
        inputs = await _pipeline(helius).fetch(self_address, network=SolanaNetwork.MAINNET)
        assert inputs == ScanInputs()
        assert inputs.is_empty


class TestCaching:
    @pytest.mark.asyncio
    async def test_cache_hit_skips_providers(self, helius, self_address) -> None:
        helius.get_balance.return_value = Decimal(1)
        pipeline = _pipeline(helius, cache=MemoryScanCache())

        first = await pipeline.scan(self_address)
        second = await pipeline.scan(self_address)

        assert second == first
        assert helius.get_balance.await_count == 1

    @pytest.mark.asyncio
    async def test_cache_scoped_by_network(self, helius, self_address) -> None:
        helius.get_balance.return_value = Decimal(1)
        pipeline = _pipeline(helius, cache=MemoryScanCache())

        await pipeline.scan(self_address)
        await pipeline.scan(self_address, network=SolanaNetwork.DEVNET)

        assert helius.get_balance.await_count == 2

    @pytest.mark.asyncio
    async def test_bypass_cache(self, helius, self_address) -> None:
        helius.get_balance.return_value = Decimal(1)
        pipeline = _pipeline(helius, cache=MemoryScanCache())

        await pipeline.scan(self_address)
        await pipeline.scan(self_address, use_cache=False)

        assert helius.get_balance.await_count == 2

    @pytest.mark.asyncio
    async def test_cache_errors_are_ignored(self, helius, self_address) -> None:
        helius.get_balance.return_value = Decimal(1)
        cache = MagicMock()
        cache.get = AsyncMock(side_effect=ConnectionError("redis down"))
        cache.set = AsyncMock(side_effect=ConnectionError("redis down"))

        result = await _pipeline(helius, cache=cache).scan(self_address)

        assert result.address == self_address
        cache.set.assert_awaited_once()


class TestResultSerialization:
    @pytest.mark.asyncio
    async def test_round_trip(self, helius, sns, make_tx, self_address, binance_address) -> None:
        helius.get_transactions.return_value = [
            make_tx(
                type="SWAP",
                timestamp=1_700_000_000,
                native=((self_address, binance_address, 10_000_000),),
                description="Sent 0.01 SOL",
            )
        ]
        sns.get_domains.return_value = ["alice"]

        result = await _pipeline(helius, sns).scan(self_address)
        data = result.to_dict()

        assert data["exposureScore"] == result.exposure_score
        assert data["scoreBreakdown"]["kycLinks"] == 40
        assert ExposureResult.from_dict(data) == result
