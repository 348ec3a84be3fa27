"""Tests for DeFi position and related-address analysis."""

from decimal import Decimal

from solana_exposure_scanner.detector.defi import DefiPositionAnalyzer
from solana_exposure_scanner.detector.related import RelatedAddressAnalyzer, confidence_for

JUPITER = "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4"
MARINADE = "MarBmsSgKXdrN1egZf5sqe1TMai9K1rChYNDJgjq7aD"
BURNER = "Burner1111111111111111111111111111111111111"
OTHER = "Other11111111111111111111111111111111111111"
DAY = 86_400
BASE_TS = 1_700_000_000  # 2023-11-14

LAMPORTS_001 = 10_000_000  # 0.01 SOL


class TestDefiPositionAnalyzer:
    def test_empty(self) -> None:
        assert DefiPositionAnalyzer().analyze([]) == ()

    def test_groups_by_program_and_source(self, make_tx, self_address) -> None:
        txs = [
            make_tx(native=((self_address, JUPITER, 1),), timestamp=BASE_TS),
            make_tx(source="JUPITER", timestamp=BASE_TS + DAY),
            make_tx(native=((self_address, MARINADE, 1),), timestamp=BASE_TS),
            make_tx(source="SYSTEM_PROGRAM"),
        ]
        positions = DefiPositionAnalyzer().analyze(txs)

        assert [p.protocol for p in positions] == ["Jupiter", "Marinade"]
        assert positions[0].interactions == 2
        assert positions[0].type == "dex"
        assert positions[0].last_activity == "2023-11-15"
        assert positions[1].type == "staking"

    def test_unknown_last_activity(self, make_tx) -> None:
        positions = DefiPositionAnalyzer().analyze([make_tx(source="DRIFT")])
        assert positions[0].to_dict() == {
            "protocol": "Drift",
            "type": "perps",
            "interactions": 1,
            "lastActivity": "Unknown",
        }


class TestRelatedAddressAnalyzer:
    def test_confidence_levels(self) -> None:
        assert confidence_for(1) == "low"
        assert confidence_for(2) == "medium"
        assert confidence_for(3) == "high"
        assert confidence_for(10) == "high"

    def test_detects_gas_funding(self, make_tx, self_address) -> None:
        txs = [make_tx(native=((self_address, BURNER, LAMPORTS_001),)) for _ in range(3)]
        txs.append(make_tx(native=((self_address, OTHER, LAMPORTS_001),)))
        related = RelatedAddressAnalyzer().analyze(self_address, txs)

        assert [r.address for r in related] == [BURNER, OTHER]
        assert related[0].gas_transfers == 3
        assert related[0].total_sol == Decimal("0.03")
        assert related[0].confidence == "high"
        assert related[1].confidence == "low"

    def test_ignores_large_inbound_and_labeled(self, make_tx, self_address, binance_address) -> None:
        txs = [
            make_tx(native=((self_address, BURNER, 1_000_000_000),)),  # 1 SOL
            make_tx(native=((BURNER, self_address, LAMPORTS_001),)),  # inbound
            make_tx(native=((self_address, binance_address, LAMPORTS_001),)),  # labeled
            make_tx(native=((self_address, self_address, LAMPORTS_001),)),
        ]
        assert RelatedAddressAnalyzer().analyze(self_address, txs) == ()

    def test_limited_to_five(self, make_tx, self_address) -> None:
        txs = [
            make_tx(native=((self_address, f"Wallet{i}" + "1" * 37, LAMPORTS_001),))
            for i in range(8)
        ]
        assert len(RelatedAddressAnalyzer().analyze(self_address, txs)) == 5
