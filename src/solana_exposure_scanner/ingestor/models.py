"""Data models for the ingestor module.

Provider payloads are decoded into these frozen records at the client
boundary, so analyzers only ever see documented optional fields.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

LAMPORTS_PER_SOL = Decimal(1_000_000_000)

# Base58 alphabet (no 0, O, I, l), Solana public keys encode to 32-44 chars.
ADDRESS_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")

NFT_INTERFACES = frozenset(
    {
        "V1_NFT",
        "V2_NFT",
        "LEGACY_NFT",
        "ProgrammableNFT",
        "MplCoreAsset",
    }
)
FUNGIBLE_INTERFACES = frozenset({"FungibleToken", "FungibleAsset"})


class SolanaNetwork(str, Enum):
    """Solana cluster a scan runs against."""

    MAINNET = "mainnet"
    DEVNET = "devnet"


def is_valid_address(address: str) -> bool:
    """Return True if the string is a syntactically plausible Solana address."""
    return bool(address) and ADDRESS_PATTERN.match(address) is not None


def _decimal(value: Any, default: str = "0") -> Decimal:
    if value is None or value == "":
        return Decimal(default)
    return Decimal(str(value))


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class NativeTransfer:
    """A SOL transfer inside a transaction (amount in lamports)."""

    from_address: str | None
    to_address: str | None
    amount: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NativeTransfer":
        return cls(
            from_address=_optional_str(data.get("fromUserAccount")),
            to_address=_optional_str(data.get("toUserAccount")),
            amount=int(data.get("amount") or 0),
        )

    @property
    def amount_sol(self) -> Decimal:
        """Return the amount in SOL."""
        return Decimal(self.amount) / LAMPORTS_PER_SOL


@dataclass(frozen=True)
class TokenTransfer:
    """An SPL token transfer inside a transaction."""

    from_address: str | None
    to_address: str | None
    from_token_account: str | None
    to_token_account: str | None
    token_amount: Decimal
    mint: str
    token_standard: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenTransfer":
        return cls(
            from_address=_optional_str(data.get("fromUserAccount")),
            to_address=_optional_str(data.get("toUserAccount")),
            from_token_account=_optional_str(data.get("fromTokenAccount")),
            to_token_account=_optional_str(data.get("toTokenAccount")),
            token_amount=_decimal(data.get("tokenAmount")),
            mint=str(data.get("mint") or ""),
            token_standard=_optional_str(data.get("tokenStandard")),
        )


@dataclass(frozen=True)
class TokenBalanceChange:
    """Raw token balance delta of one account."""

    mint: str
    raw_amount: int
    decimals: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenBalanceChange":
        raw = data.get("rawTokenAmount") or {}
        return cls(
            mint=str(data.get("mint") or ""),
            raw_amount=int(raw.get("tokenAmount") or 0),
            decimals=int(raw.get("decimals") or 0),
        )


@dataclass(frozen=True)
class AccountData:
    """Per-account balance deltas of a transaction."""

    account: str
    native_balance_change: int
    token_balance_changes: tuple[TokenBalanceChange, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AccountData":
        return cls(
            account=str(data["account"]),
            native_balance_change=int(data.get("nativeBalanceChange") or 0),
            token_balance_changes=tuple(
                TokenBalanceChange.from_dict(c) for c in data.get("tokenBalanceChanges") or []
            ),
        )

    @property
    def has_balance_change(self) -> bool:
        """Return True if the account moved SOL or any token."""
        if self.native_balance_change != 0:
            return True
        return any(c.raw_amount != 0 for c in self.token_balance_changes)


@dataclass(frozen=True)
class Transaction:
    """Represents a pre-decoded (enhanced) Solana transaction.

    Timestamps are unix seconds; 0 means the provider did not report one.
    """

    signature: str
    type: str
    source: str
    fee: int
    fee_payer: str | None
    timestamp: int
    slot: int
    native_transfers: tuple[NativeTransfer, ...] = ()
    token_transfers: tuple[TokenTransfer, ...] = ()
    account_data: tuple[AccountData, ...] = ()
    description: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        """Create a Transaction from a Helius enhanced-transaction payload."""
        return cls(
            signature=str(data["signature"]),
            type=str(data.get("type") or "UNKNOWN"),
            source=str(data.get("source") or "UNKNOWN"),
            fee=int(data.get("fee") or 0),
            fee_payer=_optional_str(data.get("feePayer")),
            timestamp=int(data.get("timestamp") or 0),
            slot=int(data.get("slot") or 0),
            native_transfers=tuple(
                NativeTransfer.from_dict(t) for t in data.get("nativeTransfers") or []
            ),
            token_transfers=tuple(
                TokenTransfer.from_dict(t) for t in data.get("tokenTransfers") or []
            ),
            account_data=tuple(AccountData.from_dict(a) for a in data.get("accountData") or []),
            description=_optional_str(data.get("description")),
        )

    @property
    def has_transfers(self) -> bool:
        return bool(self.native_transfers or self.token_transfers)

    @property
    def native_amount_sol(self) -> Decimal:
        """Return the total SOL moved by native transfers."""
        return sum((t.amount_sol for t in self.native_transfers), Decimal(0))


@dataclass(frozen=True)
class AssetAttribute:
    trait_type: str
    value: str


@dataclass(frozen=True)
class AssetContent:
    """Display metadata of an asset."""

    name: str | None = None
    symbol: str | None = None
    description: str | None = None
    json_uri: str | None = None
    attributes: tuple[AssetAttribute, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AssetContent":
        metadata = data.get("metadata") or {}
        attributes = tuple(
            AssetAttribute(
                trait_type=str(a.get("trait_type") or ""),
                value=str(a.get("value") if a.get("value") is not None else ""),
            )
            for a in metadata.get("attributes") or []
            if isinstance(a, dict)
        )
        return cls(
            name=_optional_str(metadata.get("name")),
            symbol=_optional_str(metadata.get("symbol")),
            description=_optional_str(metadata.get("description")),
            json_uri=_optional_str(data.get("json_uri")),
            attributes=attributes,
        )


@dataclass(frozen=True)
class TokenInfo:
    """Fungible token details of an asset."""

    balance: Decimal
    decimals: int
    price_per_token: Decimal | None = None
    total_price: Decimal | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenInfo":
        price_info = data.get("price_info") or {}
        price_per_token = price_info.get("price_per_token")
        total_price = price_info.get("total_price")
        return cls(
            balance=_decimal(data.get("balance")),
            decimals=int(data.get("decimals") or 0),
            price_per_token=_decimal(price_per_token) if price_per_token is not None else None,
            total_price=_decimal(total_price) if total_price is not None else None,
        )


@dataclass(frozen=True)
class Asset:
    """Represents an asset owned by an address (DAS API)."""

    id: str
    interface: str | None = None
    content: AssetContent | None = None
    token_info: TokenInfo | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Asset":
        """Create an Asset from a DAS `getAssetsByOwner` item."""
        content = data.get("content")
        token_info = data.get("token_info")
        return cls(
            id=str(data["id"]),
            interface=_optional_str(data.get("interface")),
            content=AssetContent.from_dict(content) if isinstance(content, dict) else None,
            token_info=TokenInfo.from_dict(token_info) if isinstance(token_info, dict) else None,
        )

    @property
    def is_nft(self) -> bool:
        return self.interface in NFT_INTERFACES

    @property
    def is_fungible(self) -> bool:
        return self.interface in FUNGIBLE_INTERFACES or (
            self.interface is None and self.token_info is not None
        )

    @property
    def name(self) -> str:
        return (self.content.name if self.content else None) or ""

    @property
    def symbol(self) -> str:
        return (self.content.symbol if self.content else None) or ""

    @property
    def usd_value(self) -> Decimal:
        """Return the provider-reported total USD value (0 if unknown)."""
        if self.token_info is None or self.token_info.total_price is None:
            return Decimal(0)
        return self.token_info.total_price


@dataclass(frozen=True)
class PnLToken:
    """Per-token PnL row of a wallet portfolio."""

    address: str
    symbol: str
    name: str
    realized_pnl: Decimal
    unrealized_pnl: Decimal
    holding_amount: Decimal
    holding_value: Decimal
    buy_count: int = 0
    sell_count: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PnLToken":
        return cls(
            address=str(data.get("address") or ""),
            symbol=str(data.get("symbol") or ""),
            name=str(data.get("name") or ""),
            realized_pnl=_decimal(data.get("realizedPnl")),
            unrealized_pnl=_decimal(data.get("unrealizedPnl")),
            holding_amount=_decimal(data.get("holdingAmount")),
            holding_value=_decimal(data.get("holdingValue")),
            buy_count=int(data.get("buyCount") or 0),
            sell_count=int(data.get("sellCount") or 0),
        )


@dataclass(frozen=True)
class WalletPnL:
    """Aggregated wallet portfolio PnL."""

    tokens: tuple[PnLToken, ...]

    @classmethod
    def from_items(cls, items: list[dict[str, Any]]) -> "WalletPnL":
        return cls(tokens=tuple(PnLToken.from_dict(i) for i in items))

    @property
    def total_realized_pnl(self) -> Decimal:
        return sum((t.realized_pnl for t in self.tokens), Decimal(0))

    @property
    def total_unrealized_pnl(self) -> Decimal:
        return sum((t.unrealized_pnl for t in self.tokens), Decimal(0))

    @property
    def total_pnl(self) -> Decimal:
        return self.total_realized_pnl + self.total_unrealized_pnl

    @property
    def holding_value(self) -> Decimal:
        """Return the summed holding value across all tokens."""
        return sum((t.holding_value for t in self.tokens), Decimal(0))
