"""Detector module - exposure sub-analyzers and the weighted scorer."""

from solana_exposure_scanner.detector.activity import ActivityAnalyzer
from solana_exposure_scanner.detector.cex_linkage import CexLinkageAnalyzer
from solana_exposure_scanner.detector.clustering import ClusteringAnalyzer
from solana_exposure_scanner.detector.defi import DefiPositionAnalyzer
from solana_exposure_scanner.detector.financial import FinancialAnalyzer
from solana_exposure_scanner.detector.identity import IdentityAnalyzer
from solana_exposure_scanner.detector.models import ExposureResult, ScoreBreakdown
from solana_exposure_scanner.detector.related import RelatedAddressAnalyzer
from solana_exposure_scanner.detector.scorer import ExposureScorer
from solana_exposure_scanner.detector.trading import TradingAnalyzer

__all__ = [
    "ActivityAnalyzer",
    "CexLinkageAnalyzer",
    "ClusteringAnalyzer",
    "DefiPositionAnalyzer",
    "ExposureResult",
    "ExposureScorer",
    "FinancialAnalyzer",
    "IdentityAnalyzer",
    "RelatedAddressAnalyzer",
    "ScoreBreakdown",
    "TradingAnalyzer",
]
