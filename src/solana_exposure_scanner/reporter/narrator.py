"""Human-readable risk statements for an exposure analysis."""

from collections.abc import Sequence

from solana_exposure_scanner.detector.models import (
    ActivitySignal,
    CexLinkageSignal,
    ClusteringSignal,
    IdentitySignal,
    RelatedAddress,
)
from solana_exposure_scanner.detector.related import LOW_CONFIDENCE

HIGH_TX_COUNT_THRESHOLD = 100
HIGH_COUNTERPARTY_THRESHOLD = 50
LONG_HISTORY_DAYS = 365
DAYS_PER_MONTH = 30

LOW_EXPOSURE_STATEMENT = "Limited on-chain activity - low exposure profile"


class RiskNarrator:
    """Turn analyzer evidence into an ordered list of risk statements.

    Statements always appear in the same order: exchange linkage,
    transaction volume, counterparty count, domains, social handles, NFT
    holdings, wallet age, then related addresses. When nothing applies a
    single low-exposure statement is returned.
    """

    def narrate(
        self,
        cex: CexLinkageSignal,
        activity: ActivitySignal,
        clustering: ClusteringSignal,
        identity: IdentitySignal,
        related: Sequence[RelatedAddress] = (),
    ) -> list[str]:
        risks: list[str] = []

        if cex.exchanges:
            risks.append(
                f"Direct transfers to/from {', '.join(cex.exchanges)} detected"
                " - potential KYC linkage"
            )

        if activity.tx_count > HIGH_TX_COUNT_THRESHOLD:
            risks.append(
                f"High transaction volume ({activity.tx_count} txs) creates"
                " detailed activity fingerprint"
            )

        if clustering.interacted_count > HIGH_COUNTERPARTY_THRESHOLD:
            risks.append(
                f"Interacted with {clustering.interacted_count} unique addresses"
                " - clustering analysis possible"
            )

        if identity.domains:
            names = ", ".join(f"{domain}.sol" for domain in identity.domains)
            risks.append(f"SNS domain(s) {names} owned - direct identity linkage")

        if identity.social_handles:
            handles = ", ".join(f"@{handle}" for handle in identity.social_handles)
            risks.append(f"Linked social account(s) {handles} - critical identity exposure")

        if identity.has_nfts:
            risks.append(
                f"NFT holdings ({identity.nft_count}) may contain identifying metadata"
            )

        if activity.days_active > LONG_HISTORY_DAYS:
            months = activity.days_active // DAYS_PER_MONTH
            risks.append(
                f"Long wallet history ({months} months) - extensive behavioral pattern available"
            )

        # Single-transfer (low confidence) recipients are not reported
        linked = [r for r in related if r.confidence != LOW_CONFIDENCE]
        if linked:
            risks.append(
                f"{len(linked)} likely related address(es) funded with gas"
                " - linked wallets detectable"
            )

        if not risks:
            risks.append(LOW_EXPOSURE_STATEMENT)

        return risks
