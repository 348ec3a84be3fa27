"""Centralized exchange linkage analysis.

Transfers to or from a known exchange hot wallet tie an address to an
account that passed KYC, which is the strongest de-anonymization vector.
"""

import logging
from collections.abc import Sequence

from solana_exposure_scanner.detector.ladder import ScoreLadder
from solana_exposure_scanner.detector.models import CexLinkageSignal
from solana_exposure_scanner.ingestor.models import Transaction
from solana_exposure_scanner.profiler.entities import DEFAULT_REGISTRY, EntityRegistry

logger = logging.getLogger(__name__)

# Distinct exchanges touched -> score
EXCHANGE_LADDER = ScoreLadder(((1, 40), (2, 60), (3, 75)))

HEAVY_USE_TRANSFER_COUNT = 10  # touching endpoints above this get a bonus
HEAVY_USE_BONUS = 15
MAX_CEX_SCORE = 95


class CexLinkageAnalyzer:
    """Detect direct transfers between an address and known exchanges.

    Every native and token transfer endpoint is checked against the
    exchange label map. Each touching endpoint increments the transfer
    count, and exchange names are de-duplicated in first-seen order.

    Example:
        ```python
        analyzer = CexLinkageAnalyzer()
        signal = analyzer.analyze(transactions)
        print(signal.exchanges, signal.score)
        ```
    """

    def __init__(self, registry: EntityRegistry = DEFAULT_REGISTRY) -> None:
        self._registry = registry

    def analyze(self, transactions: Sequence[Transaction]) -> CexLinkageSignal:
        """Find transfers that touch a known exchange address.

        Args:
            transactions: Transaction history of the address, newest first.

        Returns:
            CexLinkageSignal with the exchanges touched (first-seen order)
            and the number of touching transfer endpoints.
        """
        exchanges: dict[str, None] = {}
        transfer_count = 0

        for tx in transactions:
            endpoints = [(t.from_address, t.to_address) for t in tx.native_transfers]
            endpoints.extend((t.from_address, t.to_address) for t in tx.token_transfers)
            for sender, receiver in endpoints:
                for endpoint in (sender, receiver):
                    name = self._registry.exchange_name(endpoint)
                    if name is None:
                        continue
                    exchanges.setdefault(name, None)
                    transfer_count += 1

        score = EXCHANGE_LADDER.score_for(len(exchanges))
        if transfer_count > HEAVY_USE_TRANSFER_COUNT:
            score = min(score + HEAVY_USE_BONUS, MAX_CEX_SCORE)

        if exchanges:
            logger.debug(
                "CEX linkage: %d exchanges, %d touching transfers",
                len(exchanges),
                transfer_count,
            )

        return CexLinkageSignal(
            score=score,
            exchanges=tuple(exchanges),
            transfer_count=transfer_count,
        )
