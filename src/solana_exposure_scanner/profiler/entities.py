"""Known-entity registry for Solana addresses.

Static label maps used for lookup only; nothing here is mutated at runtime.
Exchange addresses are KYC-bearing custodial hot wallets; protocol and DEX
addresses are on-chain programs or their authorities.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class CounterpartyType(str, Enum):
    """Classification of a counterparty address."""

    EXCHANGE = "exchange"
    DEX = "dex"
    PROTOCOL = "protocol"
    UNKNOWN = "unknown"


class ProtocolCategory(str, Enum):
    DEX = "dex"
    STAKING = "staking"
    LENDING = "lending"
    NFT_MARKETPLACE = "nft-marketplace"
    PERPS = "perps"


@dataclass(frozen=True)
class ProtocolLabel:
    name: str
    category: ProtocolCategory


@dataclass(frozen=True)
class EntityLabel:
    """Resolved label for an address."""

    address: str
    name: str | None
    type: CounterpartyType


EXCHANGE_ADDRESSES: Mapping[str, str] = MappingProxyType(
    {
        # Binance
        "5tzFkiKscXHK5ZXCGbXZxdw7gTjjD1mBwuoFbhUvuAi9": "Binance",
        "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM": "Binance",
        "AC5RDfQFmDS1deWZos921JfqscXdByf8BKHs5ACWjtW2": "Binance",
        # Coinbase
        "H8sMJSCQxfKiFTCfDR3DUMLPwcRbM61LGFJ8N4dK3WjS": "Coinbase",
        "GJRs4FwHtemZ5ZE9x3FNvJ8TMwitKTh21yxdRPqn7npE": "Coinbase",
        "2ojv9BAiHUrvsm9gxDe7fJSzbNZSJcxZvf8dqmWGHG8S": "Coinbase",
        # Kraken
        "CuieVDEDtLo7FypA9SbLM9saXFdb1dsshEkyErMqkRQq": "Kraken",
        "6WMq7XUK3gxFGGGPB6YPX7yfVnxLDvDJpLN9m4DLpajP": "Kraken",
        # OKX
        "5VCwKtCXgCJ6kit5FybXjvriW3xELsFDhYrPSqtJNmcD": "OKX",
        # FTX (defunct, still relevant for historical exposure)
        "FTTDpAQJXaJrCjMVLzeZVMkQiG7cMgSZAUzfTjxS2cZZ": "FTX",
        # Gate.io
        "4gT6pT9K8fPNP8KxAXrjVZJhPJYBp5YqZQqQ2qS8qTJd": "Gate.io",
        # Bybit
        "6FEVkH17P9y8Q9aCkDdPcMDjvj7SVxrTETaYEm8f51Jy": "Bybit",
        # KuCoin
        "BmFdpraQhkiDQE6SnfG5omcA1VwzqfXrwtNYBwWTymy6": "KuCoin",
    }
)

DEX_ADDRESSES: Mapping[str, ProtocolLabel] = MappingProxyType(
    {
        "5Q544fKrFoe6tsEbD7S8EmxGTJYAKtTVhAW5Q5pge4j1": ProtocolLabel("Raydium", ProtocolCategory.DEX),
        "675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8": ProtocolLabel("Raydium", ProtocolCategory.DEX),
        "CAMMCzo5YL8w4VFF8KVHrK22GGUsp5VTaW7grrKgrWqK": ProtocolLabel("Raydium", ProtocolCategory.DEX),
        "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4": ProtocolLabel("Jupiter", ProtocolCategory.DEX),
        "JUP4Fb2cqiRUcaTHdrPC8h2gNsA2ETXiPDD33WcGuJB": ProtocolLabel("Jupiter", ProtocolCategory.DEX),
        "whirLbMiicVdio4qvUfM5KAg6Ct8VwpYzGff3uctyCc": ProtocolLabel("Orca", ProtocolCategory.DEX),
        "LBUZKhRxPF3XUpBCjp4YzTKgLccjZhTSDM9YuVaPwxo": ProtocolLabel("Meteora", ProtocolCategory.DEX),
        "PhoeNiXZ8ByJGLkxNfZRnkUfjvmuYqLR89jjFHGqdXY": ProtocolLabel("Phoenix", ProtocolCategory.DEX),
        "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P": ProtocolLabel("Pump.fun", ProtocolCategory.DEX),
    }
)

PROTOCOL_ADDRESSES: Mapping[str, ProtocolLabel] = MappingProxyType(
    {
        "M2mx93ekt1fmXSVkTrUL9xVFHkmME8HTUi5Cyc5aF7K": ProtocolLabel(
            "Magic Eden", ProtocolCategory.NFT_MARKETPLACE
        ),
        "MEisE1HzehtrDpAAT8PnLHjpSSkRYakotTuJRPjTpo8": ProtocolLabel(
            "Magic Eden", ProtocolCategory.NFT_MARKETPLACE
        ),
        "TSWAPaqyCSx2KABk68Shruf4rp7CxcNi8hAsbdwmHbN": ProtocolLabel(
            "Tensor", ProtocolCategory.NFT_MARKETPLACE
        ),
        "MarBmsSgKXdrN1egZf5sqe1TMai9K1rChYNDJgjq7aD": ProtocolLabel("Marinade", ProtocolCategory.STAKING),
        "J1toso1uCk3RLmjorhTtrVwY9HJ7X8V9yYac6Y7kGCPn": ProtocolLabel("Jito", ProtocolCategory.STAKING),
        "So1endDq2YkqhipRh3WViPa8hdiSpxWy6z3Z6tMCpAo": ProtocolLabel("Solend", ProtocolCategory.LENDING),
        "KLend2g3cP87fffoy8q1mQqGKjrxjC8boSyAYavgmjD": ProtocolLabel("Kamino", ProtocolCategory.LENDING),
        "dRiftyHA39MWEi3m9aunc5MzRF1JYuBsbn6VPcn33UH": ProtocolLabel("Drift", ProtocolCategory.PERPS),
    }
)

# Provider `source` labels of enhanced transactions
SOURCE_PROTOCOLS: Mapping[str, ProtocolLabel] = MappingProxyType(
    {
        "JUPITER": ProtocolLabel("Jupiter", ProtocolCategory.DEX),
        "RAYDIUM": ProtocolLabel("Raydium", ProtocolCategory.DEX),
        "ORCA": ProtocolLabel("Orca", ProtocolCategory.DEX),
        "METEORA": ProtocolLabel("Meteora", ProtocolCategory.DEX),
        "PHOENIX": ProtocolLabel("Phoenix", ProtocolCategory.DEX),
        "PUMP_FUN": ProtocolLabel("Pump.fun", ProtocolCategory.DEX),
        "MAGIC_EDEN": ProtocolLabel("Magic Eden", ProtocolCategory.NFT_MARKETPLACE),
        "TENSOR": ProtocolLabel("Tensor", ProtocolCategory.NFT_MARKETPLACE),
        "MARINADE": ProtocolLabel("Marinade", ProtocolCategory.STAKING),
        "JITO": ProtocolLabel("Jito", ProtocolCategory.STAKING),
        "SOLEND": ProtocolLabel("Solend", ProtocolCategory.LENDING),
        "KAMINO": ProtocolLabel("Kamino", ProtocolCategory.LENDING),
        "DRIFT": ProtocolLabel("Drift", ProtocolCategory.PERPS),
    }
)

# Vanity program-id prefixes used by DEX deployments
DEX_PROGRAM_PREFIXES = ("JUP", "whirL", "CAMM", "LBUZ", "PhoeNiX")

# Well-known liquid mints; swaps touching anything else count as speculative
MAJOR_MINTS: frozenset[str] = frozenset(
    {
        "So11111111111111111111111111111111111111112",  # wSOL
        "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",  # USDC
        "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",  # USDT
        "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN",  # JUP
        "mSoLzYCxHdYgdzU16g5QSh3i5K3z3KZK7ytfqcJm7So",  # mSOL
        "J1toso1uCk3RLmjorhTtrVwY9HJ7X8V9yYac6Y7kGCPn",  # jitoSOL
        "bSo13r4TkiE4KumL71LsHTPpL2euBYLFx6h9HP3piy1",  # bSOL
    }
)


class EntityRegistry:
    """Lookup and classification over the static label maps.

    Custom maps can be injected for tests or alternative label sets.
    """

    def __init__(
        self,
        *,
        exchanges: Mapping[str, str] = EXCHANGE_ADDRESSES,
        dexes: Mapping[str, ProtocolLabel] = DEX_ADDRESSES,
        protocols: Mapping[str, ProtocolLabel] = PROTOCOL_ADDRESSES,
    ) -> None:
        self._exchanges = exchanges
        self._dexes = dexes
        self._protocols = protocols

    def exchange_name(self, address: str | None) -> str | None:
        """Return the exchange label for an address, if it is a known exchange."""
        if not address:
            return None
        return self._exchanges.get(address)

    def protocol_label(self, address: str | None) -> ProtocolLabel | None:
        """Return the DEX/protocol label for an address, if known."""
        if not address:
            return None
        return self._dexes.get(address) or self._protocols.get(address)

    def is_labeled(self, address: str) -> bool:
        return self.exchange_name(address) is not None or self.protocol_label(address) is not None

    def classify(self, address: str) -> EntityLabel:
        """Classify an address as exchange, DEX, protocol or unknown.

        Label maps win; otherwise DEX vanity prefixes are pattern-matched.
        """
        exchange = self.exchange_name(address)
        if exchange is not None:
            return EntityLabel(address=address, name=exchange, type=CounterpartyType.EXCHANGE)

        dex = self._dexes.get(address)
        if dex is not None:
            return EntityLabel(address=address, name=dex.name, type=CounterpartyType.DEX)

        protocol = self._protocols.get(address)
        if protocol is not None:
            return EntityLabel(address=address, name=protocol.name, type=CounterpartyType.PROTOCOL)

        if address.startswith(DEX_PROGRAM_PREFIXES):
            return EntityLabel(address=address, name=None, type=CounterpartyType.DEX)

        return EntityLabel(address=address, name=None, type=CounterpartyType.UNKNOWN)


DEFAULT_REGISTRY = EntityRegistry()
