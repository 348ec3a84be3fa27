"""Data models for the detector module.

Sub-analyzer signals carry a 0-100 sub-score (higher = more exposed) plus
the evidence used for narration. `ExposureResult` is the full scan payload
and serializes to the flat camelCase structure returned to callers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from solana_exposure_scanner.ingestor.models import SolanaNetwork
from solana_exposure_scanner.profiler.entities import CounterpartyType

CENT = Decimal("0.01")


def to_usd(value: Decimal) -> Decimal:
    """Quantize a USD amount to cents."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _usd_from(value: Any) -> Decimal:
    return to_usd(Decimal(str(value or 0)))


@dataclass(frozen=True)
class CexLinkageSignal:
    """Exchange (KYC custodial) linkage evidence.

    Attributes:
        score: Sub-score (0-100).
        exchanges: Distinct exchange names touched, in first-seen order.
        transfer_count: Transfer endpoints that touched an exchange address.
    """

    score: int
    exchanges: tuple[str, ...]
    transfer_count: int


@dataclass(frozen=True)
class ActivitySignal:
    """Transaction activity evidence."""

    score: int
    tx_count: int
    days_active: int
    tx_per_day: float


@dataclass(frozen=True)
class CounterpartyNode:
    """A ranked counterparty with its classification."""

    address: str
    type: CounterpartyType
    interactions: int
    label: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "address": self.address,
            "label": self.label,
            "type": self.type.value,
            "interactions": self.interactions,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CounterpartyNode:
        return cls(
            address=str(data["address"]),
            type=CounterpartyType(data["type"]),
            interactions=int(data["interactions"]),
            label=data.get("label"),
        )


@dataclass(frozen=True)
class ClusteringData:
    """Serializable clustering section of a result."""

    interacted_count: int
    top_addresses: tuple[str, ...] = ()
    network_nodes: tuple[CounterpartyNode, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "interactedCount": self.interacted_count,
            "topAddresses": list(self.top_addresses),
            "networkNodes": [n.to_dict() for n in self.network_nodes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClusteringData:
        return cls(
            interacted_count=int(data["interactedCount"]),
            top_addresses=tuple(data.get("topAddresses") or ()),
            network_nodes=tuple(CounterpartyNode.from_dict(n) for n in data.get("networkNodes") or ()),
        )


@dataclass(frozen=True)
class ClusteringSignal:
    """Counterparty clustering evidence.

    Attributes:
        score: Sub-score (0-100).
        interactions: Interaction count per counterparty address.
        top_addresses: Top-10 counterparties in truncated display form.
        nodes: Top-30 counterparties with classification.
    """

    score: int
    interactions: Mapping[str, int]
    top_addresses: tuple[str, ...]
    nodes: tuple[CounterpartyNode, ...]

    @property
    def interacted_count(self) -> int:
        return len(self.interactions)

    def to_data(self) -> ClusteringData:
        return ClusteringData(
            interacted_count=self.interacted_count,
            top_addresses=self.top_addresses,
            network_nodes=self.nodes,
        )


@dataclass(frozen=True)
class IdentitySignal:
    """Identity-linkage evidence (NFT metadata, domains, social handles)."""

    score: int
    nft_count: int = 0
    revealing_nfts: tuple[str, ...] = ()
    pfp_nfts: tuple[str, ...] = ()
    community_tokens: tuple[str, ...] = ()
    domains: tuple[str, ...] = ()
    social_handles: tuple[str, ...] = ()

    @property
    def has_nfts(self) -> bool:
        return self.nft_count > 0


@dataclass(frozen=True)
class FinancialSignal:
    """Wealth-visibility evidence."""

    score: int
    net_worth_usd: Decimal


@dataclass(frozen=True)
class LossEstimate:
    protocol: str
    type: str
    estimated_loss: Decimal

    def to_dict(self) -> dict[str, object]:
        return {
            "protocol": self.protocol,
            "type": self.type,
            "estimatedLoss": float(self.estimated_loss),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LossEstimate:
        return cls(
            protocol=str(data["protocol"]),
            type=str(data["type"]),
            estimated_loss=_usd_from(data["estimatedLoss"]),
        )


@dataclass(frozen=True)
class TradingSummary:
    """Trading activity derived from transactions and portfolio PnL."""

    trade_count: int = 0
    memecoin_trades: int = 0
    realized_losses_usd: Decimal = Decimal("0.00")
    top_losses: tuple[LossEstimate, ...] = ()


@dataclass(frozen=True)
class DefiPosition:
    protocol: str
    type: str
    interactions: int
    last_activity: str

    def to_dict(self) -> dict[str, object]:
        return {
            "protocol": self.protocol,
            "type": self.type,
            "interactions": self.interactions,
            "lastActivity": self.last_activity,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DefiPosition:
        return cls(
            protocol=str(data["protocol"]),
            type=str(data["type"]),
            interactions=int(data["interactions"]),
            last_activity=str(data["lastActivity"]),
        )


@dataclass(frozen=True)
class RelatedAddress:
    """An address that probably belongs to the same owner (gas funding)."""

    address: str
    gas_transfers: int
    total_sol: Decimal
    confidence: str
    reason: str

    def to_dict(self) -> dict[str, object]:
        return {
            "address": self.address,
            "gasTransfers": self.gas_transfers,
            "totalAmount": float(self.total_sol),
            "confidence": self.confidence,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RelatedAddress:
        return cls(
            address=str(data["address"]),
            gas_transfers=int(data["gasTransfers"]),
            total_sol=Decimal(str(data["totalAmount"])),
            confidence=str(data["confidence"]),
            reason=str(data["reason"]),
        )


@dataclass(frozen=True)
class ScoreBreakdown:
    """The five weighted sub-scores."""

    identity: int
    kyc_links: int
    financial: int
    clustering: int
    activity: int

    def to_dict(self) -> dict[str, int]:
        return {
            "identity": self.identity,
            "kycLinks": self.kyc_links,
            "financial": self.financial,
            "clustering": self.clustering,
            "activity": self.activity,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScoreBreakdown:
        return cls(
            identity=int(data["identity"]),
            kyc_links=int(data["kycLinks"]),
            financial=int(data["financial"]),
            clustering=int(data["clustering"]),
            activity=int(data["activity"]),
        )


@dataclass(frozen=True)
class TransactionSummary:
    date: str
    type: str
    amount_usd: Decimal
    description: str

    def to_dict(self) -> dict[str, object]:
        return {
            "date": self.date,
            "type": self.type,
            "amountUsd": float(self.amount_usd),
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransactionSummary:
        return cls(
            date=str(data["date"]),
            type=str(data["type"]),
            amount_usd=_usd_from(data["amountUsd"]),
            description=str(data["description"]),
        )


@dataclass(frozen=True)
class ExternalLinks:
    x_search: str
    arkham: str
    solscan: str
    sns_search: str | None = None
    twitter_profile: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "xSearch": self.x_search,
            "snsSearch": self.sns_search,
            "twitterProfile": self.twitter_profile,
            "arkham": self.arkham,
            "solscan": self.solscan,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExternalLinks:
        return cls(
            x_search=str(data["xSearch"]),
            arkham=str(data["arkham"]),
            solscan=str(data["solscan"]),
            sns_search=data.get("snsSearch"),
            twitter_profile=data.get("twitterProfile"),
        )


@dataclass(frozen=True)
class ExposureResult:
    """Complete privacy-exposure analysis of one address."""

    address: str
    network: SolanaNetwork
    exposure_score: int
    score_breakdown: ScoreBreakdown
    net_worth_usd: Decimal
    clustering: ClusteringData
    risks: tuple[str, ...]
    links: ExternalLinks
    realized_losses_usd: Decimal = Decimal("0.00")
    trade_count: int = 0
    memecoin_trades: int = 0
    sns_domains: tuple[str, ...] = ()
    twitter_handles: tuple[str, ...] = ()
    recent_tx_summary: tuple[TransactionSummary, ...] = ()
    defi_positions: tuple[DefiPosition, ...] = ()
    top_losses: tuple[LossEstimate, ...] = ()
    related_addresses: tuple[RelatedAddress, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        """Serialize to the flat response structure."""
        return {
            "address": self.address,
            "network": self.network.value,
            "exposureScore": self.exposure_score,
            "scoreBreakdown": self.score_breakdown.to_dict(),
            "netWorthUsd": float(self.net_worth_usd),
            "realizedLossesUsd": float(self.realized_losses_usd),
            "tradeCount": self.trade_count,
            "memecoinTrades": self.memecoin_trades,
            "clustering": self.clustering.to_dict(),
            "risks": list(self.risks),
            "snsDomains": list(self.sns_domains),
            "twitterHandles": list(self.twitter_handles),
            "links": self.links.to_dict(),
            "recentTxSummary": [t.to_dict() for t in self.recent_tx_summary],
            "defiPositions": [p.to_dict() for p in self.defi_positions],
            "topLosses": [loss.to_dict() for loss in self.top_losses],
            "relatedAddresses": [r.to_dict() for r in self.related_addresses],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExposureResult:
        """Rebuild a result from `to_dict` output (used by the scan cache)."""
        return cls(
            address=str(data["address"]),
            network=SolanaNetwork(data["network"]),
            exposure_score=int(data["exposureScore"]),
            score_breakdown=ScoreBreakdown.from_dict(data["scoreBreakdown"]),
            net_worth_usd=_usd_from(data["netWorthUsd"]),
            clustering=ClusteringData.from_dict(data["clustering"]),
            risks=tuple(data.get("risks") or ()),
            links=ExternalLinks.from_dict(data["links"]),
            realized_losses_usd=_usd_from(data.get("realizedLossesUsd")),
            trade_count=int(data.get("tradeCount") or 0),
            memecoin_trades=int(data.get("memecoinTrades") or 0),
            sns_domains=tuple(data.get("snsDomains") or ()),
            twitter_handles=tuple(data.get("twitterHandles") or ()),
            recent_tx_summary=tuple(
                TransactionSummary.from_dict(t) for t in data.get("recentTxSummary") or ()
            ),
            defi_positions=tuple(DefiPosition.from_dict(p) for p in data.get("defiPositions") or ()),
            top_losses=tuple(LossEstimate.from_dict(loss) for loss in data.get("topLosses") or ()),
            related_addresses=tuple(
                RelatedAddress.from_dict(r) for r in data.get("relatedAddresses") or ()
            ),
        )
