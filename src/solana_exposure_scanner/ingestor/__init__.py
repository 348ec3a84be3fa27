"""Data ingestion layer - Solana data provider clients."""

from solana_exposure_scanner.ingestor.birdeye import BirdeyeClient
from solana_exposure_scanner.ingestor.helius import HeliusClient
from solana_exposure_scanner.ingestor.http import (
    ProviderDecodeError,
    ProviderError,
    ProviderNotFoundError,
    ProviderTransientError,
    RetryError,
)
from solana_exposure_scanner.ingestor.models import (
    Asset,
    SolanaNetwork,
    Transaction,
    WalletPnL,
)
from solana_exposure_scanner.ingestor.sns import SnsClient

__all__ = [
    "Asset",
    "BirdeyeClient",
    "HeliusClient",
    "ProviderDecodeError",
    "ProviderError",
    "ProviderNotFoundError",
    "ProviderTransientError",
    "RetryError",
    "SnsClient",
    "SolanaNetwork",
    "Transaction",
    "WalletPnL",
]
