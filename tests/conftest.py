"""Pytest configuration and fixtures."""

from collections.abc import Callable
from decimal import Decimal
from typing import Any

import pytest

from solana_exposure_scanner.ingestor.models import (
    AccountData,
    Asset,
    AssetAttribute,
    AssetContent,
    NativeTransfer,
    TokenInfo,
    TokenTransfer,
    Transaction,
)

SELF_ADDRESS = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
BINANCE_ADDRESS = "5tzFkiKscXHK5ZXCGbXZxdw7gTjjD1mBwuoFbhUvuAi9"


@pytest.fixture
def self_address() -> str:
    """Address under analysis."""
    return SELF_ADDRESS


@pytest.fixture
def binance_address() -> str:
    """A known Binance hot wallet."""
    return BINANCE_ADDRESS


@pytest.fixture
def make_tx() -> Callable[..., Transaction]:
    """Factory for transactions.

    `native` takes (from, to, lamports) tuples and `tokens` takes
    (from, to, mint) tuples.
    """

    counter = {"n": 0}

    def _make(
        *,
        signature: str | None = None,
        type: str = "TRANSFER",
        source: str = "SYSTEM_PROGRAM",
        timestamp: int = 0,
        fee_payer: str | None = None,
        native: tuple[tuple[str | None, str | None, int], ...] = (),
        tokens: tuple[tuple[str | None, str | None, str], ...] = (),
        account_data: tuple[AccountData, ...] = (),
        description: str | None = None,
    ) -> Transaction:
        counter["n"] += 1
        return Transaction(
            signature=signature or f"sig{counter['n']}",
            type=type,
            source=source,
            fee=5000,
            fee_payer=fee_payer,
            timestamp=timestamp,
            slot=counter["n"],
            native_transfers=tuple(
                NativeTransfer(from_address=f, to_address=t, amount=a) for f, t, a in native
            ),
            token_transfers=tuple(
                TokenTransfer(
                    from_address=f,
                    to_address=t,
                    from_token_account=None,
                    to_token_account=None,
                    token_amount=Decimal("1"),
                    mint=m,
                )
                for f, t, m in tokens
            ),
            account_data=account_data,
            description=description,
        )

    return _make


@pytest.fixture
def make_asset() -> Callable[..., Asset]:
    """Factory for owned assets."""

    counter = {"n": 0}

    def _make(
        *,
        interface: str = "V1_NFT",
        name: str | None = None,
        symbol: str | None = None,
        description: str | None = None,
        attributes: dict[str, Any] | None = None,
        total_price: Decimal | None = None,
    ) -> Asset:
        counter["n"] += 1
        token_info = None
        if total_price is not None or interface == "FungibleToken":
            token_info = TokenInfo(
                balance=Decimal("1"),
                decimals=0,
                total_price=total_price,
            )
        return Asset(
            id=f"asset{counter['n']}",
            interface=interface,
            content=AssetContent(
                name=name,
                symbol=symbol,
                description=description,
                attributes=tuple(
                    AssetAttribute(trait_type=k, value=str(v))
                    for k, v in (attributes or {}).items()
                ),
            ),
            token_info=token_info,
        )

    return _make
