"""Trading activity summary.

Counts swaps and speculative trades and extracts realized losses from
portfolio PnL. None of this feeds the weighted exposure score; it is
reported alongside it.
"""

from collections.abc import Sequence
from decimal import Decimal

from solana_exposure_scanner.detector.models import LossEstimate, TradingSummary, to_usd
from solana_exposure_scanner.ingestor.models import Transaction, WalletPnL
from solana_exposure_scanner.profiler.entities import MAJOR_MINTS

TRADE_TYPES = frozenset({"SWAP", "TOKEN_MINT"})
TOP_LOSS_COUNT = 5
LOSS_TYPE = "realized"


def is_trade(tx: Transaction) -> bool:
    return tx.type in TRADE_TYPES or "TRADE" in tx.type


def is_memecoin_trade(tx: Transaction) -> bool:
    """Heuristic: a trade touching any mint outside the well-known majors.

    This is a rough placeholder; it does not look at liquidity, age or
    price history of the token.
    """
    return any(t.mint and t.mint not in MAJOR_MINTS for t in tx.token_transfers)


def top_losses(pnl: WalletPnL | None, limit: int = TOP_LOSS_COUNT) -> tuple[LossEstimate, ...]:
    """Return the tokens with the largest negative realized PnL."""
    if pnl is None:
        return ()
    losers = sorted(
        (token for token in pnl.tokens if token.realized_pnl < 0),
        key=lambda token: token.realized_pnl,
    )
    return tuple(
        LossEstimate(
            protocol=token.symbol or token.name or token.address,
            type=LOSS_TYPE,
            estimated_loss=to_usd(-token.realized_pnl),
        )
        for token in losers[:limit]
    )


class TradingAnalyzer:
    """Trading activity summary; not part of the weighted score."""

    def analyze(
        self, transactions: Sequence[Transaction], pnl: WalletPnL | None = None
    ) -> TradingSummary:
        """Summarize trades, memecoin trades and realized losses.

        Args:
            transactions: Transaction history of the address.
            pnl: Optional per-token PnL from the portfolio provider.

        Returns:
            TradingSummary; losses are zero without PnL data.
        """
        trades = [tx for tx in transactions if is_trade(tx)]
        realized = pnl.total_realized_pnl if pnl is not None else Decimal(0)
        return TradingSummary(
            trade_count=len(trades),
            memecoin_trades=sum(1 for tx in trades if is_memecoin_trade(tx)),
            realized_losses_usd=to_usd(abs(min(Decimal(0), realized))),
            top_losses=top_losses(pnl),
        )
