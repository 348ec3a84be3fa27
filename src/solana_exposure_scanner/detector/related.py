"""Related-address detection via gas funding.

Small outbound SOL transfers to fresh, unlabeled addresses usually mean
the owner is topping up another wallet they control for fees.
"""

from collections.abc import Sequence
from decimal import Decimal

from solana_exposure_scanner.detector.models import RelatedAddress
from solana_exposure_scanner.ingestor.models import Transaction
from solana_exposure_scanner.profiler.entities import DEFAULT_REGISTRY, EntityRegistry

MAX_GAS_TRANSFER_SOL = Decimal("0.05")
HIGH_CONFIDENCE_TRANSFERS = 3
MEDIUM_CONFIDENCE_TRANSFERS = 2
TOP_RELATED_COUNT = 5
LOW_CONFIDENCE = "low"


def confidence_for(transfers: int) -> str:
    if transfers >= HIGH_CONFIDENCE_TRANSFERS:
        return "high"
    if transfers >= MEDIUM_CONFIDENCE_TRANSFERS:
        return "medium"
    return LOW_CONFIDENCE


class RelatedAddressAnalyzer:
    """Find addresses that repeatedly received gas-sized SOL from this one."""

    def __init__(
        self,
        registry: EntityRegistry = DEFAULT_REGISTRY,
        *,
        max_gas_transfer_sol: Decimal = MAX_GAS_TRANSFER_SOL,
    ) -> None:
        self._registry = registry
        self._max_gas_transfer_sol = max_gas_transfer_sol

    def analyze(
        self, address: str, transactions: Sequence[Transaction]
    ) -> tuple[RelatedAddress, ...]:
        counts: dict[str, int] = {}
        totals: dict[str, Decimal] = {}
        for tx in transactions:
            for transfer in tx.native_transfers:
                recipient = transfer.to_address
                if transfer.from_address != address or not recipient or recipient == address:
                    continue
                amount = transfer.amount_sol
                if amount <= 0 or amount > self._max_gas_transfer_sol:
                    continue
                if self._registry.is_labeled(recipient):
                    continue
                counts[recipient] = counts.get(recipient, 0) + 1
                totals[recipient] = totals.get(recipient, Decimal(0)) + amount

        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return tuple(
            RelatedAddress(
                address=recipient,
                gas_transfers=count,
                total_sol=totals[recipient],
                confidence=confidence_for(count),
                reason=f"Received {count} gas-sized SOL transfer{'s' if count != 1 else ''}",
            )
            for recipient, count in ranked[:TOP_RELATED_COUNT]
        )
