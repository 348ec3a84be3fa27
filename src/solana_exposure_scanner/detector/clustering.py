"""Counterparty clustering analysis.

The more distinct counterparties an address interacts with, the easier it
becomes to link it to other wallets through graph analysis.
"""

import logging
from collections.abc import Iterator, Sequence

from solana_exposure_scanner.detector.ladder import ScoreLadder
from solana_exposure_scanner.detector.models import ClusteringSignal, CounterpartyNode
from solana_exposure_scanner.ingestor.models import Transaction
from solana_exposure_scanner.profiler.entities import DEFAULT_REGISTRY, EntityRegistry
from solana_exposure_scanner.reporter.text import truncate_address

logger = logging.getLogger(__name__)

# Distinct counterparties -> score
CLUSTERING_LADDER = ScoreLadder(
    ((1, 10), (3, 20), (10, 35), (25, 50), (50, 65), (100, 80), (200, 90))
)

TOP_DISPLAY_COUNT = 10
TOP_NODE_COUNT = 30


def _counterparty(self_address: str, sender: str | None, receiver: str | None) -> str | None:
    other = sender if receiver == self_address else receiver
    if not other or other == self_address:
        return None
    return other


def iter_counterparties(address: str, tx: Transaction) -> Iterator[str]:
    """Yield every counterparty of `address` in one transaction.

    Native and token transfers are used when present; otherwise accounts
    whose SOL or token balance changed stand in for them.
    """
    if tx.has_transfers:
        for native in tx.native_transfers:
            other = _counterparty(address, native.from_address, native.to_address)
            if other is not None:
                yield other
        for token in tx.token_transfers:
            other = _counterparty(address, token.from_address, token.to_address)
            if other is not None:
                yield other
        return

    for row in tx.account_data:
        if row.account != address and row.has_balance_change:
            yield row.account


def count_interactions(address: str, transactions: Sequence[Transaction]) -> dict[str, int]:
    """Count interactions per counterparty, falling back to fee payers.

    The returned dict is ordered by descending count; ties keep the order in
    which counterparties were first seen.
    """
    counts: dict[str, int] = {}
    for tx in transactions:
        for other in iter_counterparties(address, tx):
            counts[other] = counts.get(other, 0) + 1

    if not counts:
        for tx in transactions:
            if tx.fee_payer and tx.fee_payer != address:
                counts[tx.fee_payer] = counts.get(tx.fee_payer, 0) + 1

    # sorted() is stable, so equal counts stay in first-seen order
    return dict(sorted(counts.items(), key=lambda item: item[1], reverse=True))


class ClusteringAnalyzer:
    """Rank counterparties and score the size of the interaction graph.

    Example:
        ```python
        signal = ClusteringAnalyzer().analyze(address, transactions)
        for node in signal.nodes:
            print(node.address, node.type.value, node.interactions)
        ```
    """

    def __init__(self, registry: EntityRegistry = DEFAULT_REGISTRY) -> None:
        self._registry = registry

    def analyze(self, address: str, transactions: Sequence[Transaction]) -> ClusteringSignal:
        """Rank counterparties and score the size of the interaction graph.

        Args:
            address: Address under analysis.
            transactions: Transaction history of the address.

        Returns:
            ClusteringSignal with the top display list, the classified
            top nodes and the full interaction counts.
        """
        interactions = count_interactions(address, transactions)
        ranked = list(interactions.items())

        top_addresses = tuple(
            truncate_address(other) for other, _ in ranked[:TOP_DISPLAY_COUNT]
        )
        nodes = []
        for other, count in ranked[:TOP_NODE_COUNT]:
            label = self._registry.classify(other)
            nodes.append(
                CounterpartyNode(
                    address=other,
                    type=label.type,
                    interactions=count,
                    label=label.name,
                )
            )

        logger.debug(
            "Clustering for %s: %d counterparties",
            truncate_address(address),
            len(interactions),
        )

        return ClusteringSignal(
            score=CLUSTERING_LADDER.score_for(len(interactions)),
            interactions=interactions,
            top_addresses=top_addresses,
            nodes=tuple(nodes),
        )
