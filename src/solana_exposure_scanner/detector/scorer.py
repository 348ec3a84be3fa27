"""Weighted exposure scorer.

This module provides the ExposureScorer class that combines the five
sub-analyzer scores into a single 0-100 privacy exposure score.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from solana_exposure_scanner.detector.ladder import clamp_score
from solana_exposure_scanner.detector.models import (
    ActivitySignal,
    CexLinkageSignal,
    ClusteringSignal,
    FinancialSignal,
    IdentitySignal,
    ScoreBreakdown,
)

logger = logging.getLogger(__name__)

# Default weights for each sub-score
DEFAULT_WEIGHTS = {
    "kyc_links": Decimal("0.30"),
    "clustering": Decimal("0.25"),
    "activity": Decimal("0.20"),
    "financial": Decimal("0.15"),
    "identity": Decimal("0.10"),
}


class ExposureScorer:
    """Aggregate sub-scores into the final exposure score.

    Scoring Formula:
        score = round_half_up(
            kyc_links * 0.30
            + clustering * 0.25
            + activity * 0.20
            + financial * 0.15
            + identity * 0.10
        )

    Weights must cover exactly the five breakdown fields and sum to 1, so
    the result stays within [0, 100].

    Example:
        ```python
        scorer = ExposureScorer()
        breakdown = scorer.breakdown(cex, clustering, activity, financial, identity)
        print(scorer.score(breakdown))
        ```
    """

    def __init__(self, weights: dict[str, Decimal] | None = None) -> None:
        weights = dict(weights if weights is not None else DEFAULT_WEIGHTS)
        if set(weights) != set(DEFAULT_WEIGHTS):
            raise ValueError(f"Weights must be given for exactly {sorted(DEFAULT_WEIGHTS)}")
        weights = {name: Decimal(str(weight)) for name, weight in weights.items()}
        if any(weight < 0 for weight in weights.values()):
            raise ValueError("Weights must be non-negative")
        total = sum(weights.values(), Decimal(0))
        if total != Decimal(1):
            raise ValueError(f"Weights must sum to 1.0, got {total}")
        self._weights = weights

    @property
    def weights(self) -> dict[str, Decimal]:
        return dict(self._weights)

    @staticmethod
    def breakdown(
        cex: CexLinkageSignal,
        clustering: ClusteringSignal,
        activity: ActivitySignal,
        financial: FinancialSignal,
        identity: IdentitySignal,
    ) -> ScoreBreakdown:
        """Collect the clamped sub-scores into a breakdown."""
        return ScoreBreakdown(
            identity=clamp_score(identity.score),
            kyc_links=clamp_score(cex.score),
            financial=clamp_score(financial.score),
            clustering=clamp_score(clustering.score),
            activity=clamp_score(activity.score),
        )

    def score(self, breakdown: ScoreBreakdown) -> int:
        weighted = (
            Decimal(breakdown.kyc_links) * self._weights["kyc_links"]
            + Decimal(breakdown.clustering) * self._weights["clustering"]
            + Decimal(breakdown.activity) * self._weights["activity"]
            + Decimal(breakdown.financial) * self._weights["financial"]
            + Decimal(breakdown.identity) * self._weights["identity"]
        )
        score = clamp_score(weighted.quantize(Decimal(1), rounding=ROUND_HALF_UP))
        logger.debug("Exposure score %d from %s", score, breakdown)
        return score
