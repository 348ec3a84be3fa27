"""Transaction activity analysis.

High transaction volume and frequency make an address easy to
fingerprint by timing and behavior.
"""

from collections.abc import Sequence

from solana_exposure_scanner.detector.ladder import ScoreLadder
from solana_exposure_scanner.detector.models import ActivitySignal
from solana_exposure_scanner.ingestor.models import Transaction

SECONDS_PER_DAY = 86_400

# Transaction count -> score
ACTIVITY_LADDER = ScoreLadder(
    ((1, 10), (5, 20), (20, 35), (50, 50), (100, 65), (250, 80), (500, 90))
)

HIGH_FREQUENCY_TX_PER_DAY = 3
HIGH_FREQUENCY_BONUS = 5
MAX_ACTIVITY_SCORE = 95


def active_span(transactions: Sequence[Transaction]) -> tuple[int, float]:
    """Return (days_active, transactions_per_day).

    Zero timestamps are ignored. With fewer than two usable timestamps the
    span is a single day and the rate equals the transaction count.
    """
    count = len(transactions)
    timestamps = [tx.timestamp for tx in transactions if tx.timestamp > 0]
    if len(timestamps) < 2:
        return 1, float(count)

    days_active = max(1, (max(timestamps) - min(timestamps)) // SECONDS_PER_DAY)
    return days_active, count / days_active


class ActivityAnalyzer:
    """Score an address by how much and how often it transacts."""

    def analyze(self, transactions: Sequence[Transaction]) -> ActivitySignal:
        """Score transaction volume and frequency.

        Args:
            transactions: Transaction history of the address.

        Returns:
            ActivitySignal with the count, active days and daily rate.
        """
        tx_count = len(transactions)
        days_active, tx_per_day = active_span(transactions)

        score = ACTIVITY_LADDER.score_for(tx_count)
        if tx_per_day > HIGH_FREQUENCY_TX_PER_DAY:
            score = min(score + HIGH_FREQUENCY_BONUS, MAX_ACTIVITY_SCORE)

        return ActivitySignal(
            score=score,
            tx_count=tx_count,
            days_active=days_active,
            tx_per_day=tx_per_day,
        )
