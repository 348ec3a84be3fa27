"""Presentation helpers for exposure results.

Builds the external investigation links, the recent-activity summaries and
the plain-text report printed by the command line.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from urllib.parse import quote

from solana_exposure_scanner.detector.models import (
    ExposureResult,
    ExternalLinks,
    TransactionSummary,
    to_usd,
)
from solana_exposure_scanner.ingestor.models import SolanaNetwork, Transaction
from solana_exposure_scanner.reporter.text import format_date, truncate_address

X_SEARCH_URL = "https://x.com/search?q={query}"
X_PROFILE_URL = "https://x.com/{handle}"
ARKHAM_ADDRESS_URL = "https://intel.arkm.com/explorer/address/{address}"
SOLSCAN_ACCOUNT_URL = "https://solscan.io/account/{address}"

DEFAULT_RECENT_TX_LIMIT = 10
UNKNOWN_TYPE = "UNKNOWN"

# Exposure level thresholds
HIGH_EXPOSURE_THRESHOLD = 70
MEDIUM_EXPOSURE_THRESHOLD = 40


def format_usd(amount: Decimal) -> str:
    """Format a USD amount with commas and 2 decimal places."""
    return f"${amount:,.2f}"


def get_exposure_level(score: int) -> str:
    """Get human-readable exposure level from a 0-100 score."""
    if score >= HIGH_EXPOSURE_THRESHOLD:
        return "HIGH"
    if score >= MEDIUM_EXPOSURE_THRESHOLD:
        return "MEDIUM"
    return "LOW"


def build_links(
    address: str,
    network: SolanaNetwork,
    domains: Sequence[str] = (),
    social_handles: Sequence[str] = (),
) -> ExternalLinks:
    """Build investigation links for an address and its first domain/handle."""
    solscan = SOLSCAN_ACCOUNT_URL.format(address=address)
    if network is SolanaNetwork.DEVNET:
        solscan += "?cluster=devnet"
    return ExternalLinks(
        x_search=X_SEARCH_URL.format(query=quote(address)),
        arkham=ARKHAM_ADDRESS_URL.format(address=address),
        solscan=solscan,
        sns_search=X_SEARCH_URL.format(query=quote(f"{domains[0]}.sol")) if domains else None,
        twitter_profile=(
            X_PROFILE_URL.format(handle=social_handles[0]) if social_handles else None
        ),
    )


def summarize_transactions(
    transactions: Sequence[Transaction],
    *,
    sol_price_usd: Decimal,
    limit: int = DEFAULT_RECENT_TX_LIMIT,
) -> tuple[TransactionSummary, ...]:
    """Summarize the most recent transactions (provider order is newest first)."""
    summaries = []
    for tx in transactions[:limit]:
        tx_type = tx.type or UNKNOWN_TYPE
        summaries.append(
            TransactionSummary(
                date=format_date(tx.timestamp),
                type=tx_type,
                amount_usd=to_usd(tx.native_amount_sol * sol_price_usd),
                description=tx.description or f"{tx_type} transaction",
            )
        )
    return tuple(summaries)


def format_report(result: ExposureResult) -> str:
    """Render a result as a plain-text report."""
    breakdown = result.score_breakdown
    lines = [
        f"Address: {result.address} ({result.network.value})",
        (
            f"Exposure score: {result.exposure_score}/100 "
            f"({get_exposure_level(result.exposure_score)})"
        ),
        "",
        "Breakdown:",
        f"  KYC links:  {breakdown.kyc_links}",
        f"  Clustering: {breakdown.clustering}",
        f"  Activity:   {breakdown.activity}",
        f"  Financial:  {breakdown.financial}",
        f"  Identity:   {breakdown.identity}",
        "",
        f"Net worth: {format_usd(result.net_worth_usd)}",
        f"Realized losses: {format_usd(result.realized_losses_usd)}",
        f"Trades: {result.trade_count} ({result.memecoin_trades} memecoin)",
        f"Counterparties: {result.clustering.interacted_count}",
    ]
    if result.sns_domains:
        lines.append("Domains: " + ", ".join(f"{d}.sol" for d in result.sns_domains))
    if result.twitter_handles:
        lines.append("Social: " + ", ".join(f"@{h}" for h in result.twitter_handles))

    lines.append("")
    lines.append("Risks:")
    lines.extend(f"  - {risk}" for risk in result.risks)

    if result.related_addresses:
        lines.append("")
        lines.append("Related addresses:")
        lines.extend(
            f"  - {truncate_address(r.address)} ({r.confidence}, {r.gas_transfers} transfers)"
            for r in result.related_addresses
        )

    lines.append("")
    lines.append(f"Solscan: {result.links.solscan}")
    lines.append(f"Arkham: {result.links.arkham}")
    return "\n".join(lines)
