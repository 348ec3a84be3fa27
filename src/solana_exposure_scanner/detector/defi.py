"""DeFi protocol interaction summary."""

from collections.abc import Sequence
from dataclasses import dataclass

from solana_exposure_scanner.detector.models import DefiPosition
from solana_exposure_scanner.ingestor.models import Transaction
from solana_exposure_scanner.profiler.entities import (
    DEFAULT_REGISTRY,
    SOURCE_PROTOCOLS,
    EntityRegistry,
    ProtocolLabel,
)
from solana_exposure_scanner.reporter.text import format_date

TOP_POSITION_COUNT = 10


@dataclass
class _ProtocolTally:
    label: ProtocolLabel
    interactions: int = 0
    last_timestamp: int = 0


class DefiPositionAnalyzer:
    """Group transactions by the protocol they interacted with.

    A transaction is attributed to the first labeled program found among
    its transfer endpoints, or else to its provider `source` label.
    """

    def __init__(self, registry: EntityRegistry = DEFAULT_REGISTRY) -> None:
        self._registry = registry

    def _protocol_for(self, tx: Transaction) -> ProtocolLabel | None:
        endpoints = [a for t in tx.native_transfers for a in (t.from_address, t.to_address)]
        endpoints.extend(a for t in tx.token_transfers for a in (t.from_address, t.to_address))
        for endpoint in endpoints:
            label = self._registry.protocol_label(endpoint)
            if label is not None:
                return label
        return SOURCE_PROTOCOLS.get(tx.source)

    def analyze(self, transactions: Sequence[Transaction]) -> tuple[DefiPosition, ...]:
        tallies: dict[str, _ProtocolTally] = {}
        for tx in transactions:
            label = self._protocol_for(tx)
            if label is None:
                continue
            tally = tallies.setdefault(label.name, _ProtocolTally(label=label))
            tally.interactions += 1
            tally.last_timestamp = max(tally.last_timestamp, tx.timestamp)

        ranked = sorted(tallies.values(), key=lambda t: t.interactions, reverse=True)
        return tuple(
            DefiPosition(
                protocol=t.label.name,
                type=t.label.category.value,
                interactions=t.interactions,
                last_activity=format_date(t.last_timestamp),
            )
            for t in ranked[:TOP_POSITION_COUNT]
        )
