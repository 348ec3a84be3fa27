"""Financial exposure analysis.

Visible wealth makes an address a more attractive target, so a higher
estimated net worth raises the exposure sub-score.
"""

from collections.abc import Sequence
from decimal import Decimal

from solana_exposure_scanner.detector.ladder import ScoreLadder
from solana_exposure_scanner.detector.models import FinancialSignal, to_usd
from solana_exposure_scanner.ingestor.models import Asset, WalletPnL

DEFAULT_SOL_PRICE_USD = Decimal("200")

# Net worth (USD) -> score; any positive value scores at least the floor
NET_WORTH_LADDER = ScoreLadder(
    (
        (Decimal("10"), 20),
        (Decimal("100"), 35),
        (Decimal("1000"), 50),
        (Decimal("10000"), 65),
        (Decimal("50000"), 80),
        (Decimal("100000"), 90),
    ),
    floor=10,
)


def estimate_net_worth(
    sol_balance: Decimal,
    assets: Sequence[Asset],
    pnl: WalletPnL | None = None,
    *,
    sol_price_usd: Decimal = DEFAULT_SOL_PRICE_USD,
) -> Decimal:
    """Estimate an address's net worth in USD.

    Portfolio holding values replace the per-asset prices when they sum to
    a positive amount; SOL is always valued at the fixed price estimate.
    """
    sol_value = sol_balance * sol_price_usd
    if pnl is not None:
        holding_value = pnl.holding_value
        if holding_value > 0:
            return holding_value + sol_value
    return sol_value + sum((asset.usd_value for asset in assets), Decimal(0))


class FinancialAnalyzer:
    """Score an address by its estimated net worth."""

    def __init__(self, *, sol_price_usd: Decimal = DEFAULT_SOL_PRICE_USD) -> None:
        if sol_price_usd <= 0:
            raise ValueError("sol_price_usd must be positive")
        self._sol_price_usd = sol_price_usd

    @property
    def sol_price_usd(self) -> Decimal:
        return self._sol_price_usd

    def analyze(
        self,
        sol_balance: Decimal,
        assets: Sequence[Asset],
        pnl: WalletPnL | None = None,
    ) -> FinancialSignal:
        net_worth = estimate_net_worth(
            sol_balance, assets, pnl, sol_price_usd=self._sol_price_usd
        )
        score = NET_WORTH_LADDER.score_for(net_worth) if net_worth > 0 else 0
        return FinancialSignal(score=score, net_worth_usd=to_usd(net_worth))
