"""Provider interfaces consumed by the exposure pipeline.

Concrete clients (Helius, SNS, Birdeye) satisfy these structurally; tests
pass fakes.
"""

from decimal import Decimal
from typing import Protocol

from solana_exposure_scanner.ingestor.models import Asset, SolanaNetwork, Transaction, WalletPnL


class TransactionProvider(Protocol):
    async def get_transactions(
        self, address: str, *, network: SolanaNetwork
    ) -> list[Transaction]: ...


class AssetProvider(Protocol):
    async def get_assets(self, address: str, *, network: SolanaNetwork) -> list[Asset]: ...


class BalanceProvider(Protocol):
    async def get_balance(self, address: str, *, network: SolanaNetwork) -> Decimal: ...


class NameRegistryProvider(Protocol):
    async def get_domains(self, address: str, *, network: SolanaNetwork) -> list[str]: ...


class SocialLinkProvider(Protocol):
    async def get_social_handle(self, address: str, *, network: SolanaNetwork) -> str | None: ...

    async def get_social_handle_for_domain(
        self, domain: str, *, network: SolanaNetwork
    ) -> str | None: ...


class PortfolioProvider(Protocol):
    async def get_wallet_pnl(
        self, address: str, *, network: SolanaNetwork
    ) -> WalletPnL | None: ...
