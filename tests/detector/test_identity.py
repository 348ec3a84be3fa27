"""Tests for IdentityAnalyzer."""

import pytest

from solana_exposure_scanner.detector.identity import (
    IdentityAnalyzer,
    is_community_token,
    is_pfp_nft,
    is_revealing_nft,
)


class TestHeuristics:
    @pytest.mark.parametrize(
        "name",
        ["alice.sol", "Bonfida Profile", "Your Name Here", "Breakpoint 2024 Attendee Badge", "Verified Member"],
    )
    def test_revealing_names(self, make_asset, name: str) -> None:
        assert is_revealing_nft(make_asset(name=name))

    def test_social_attribute_is_revealing(self, make_asset) -> None:
        asset = make_asset(name="Cool Cat #12", attributes={"Twitter": "@alice"})
        assert is_revealing_nft(asset)

    def test_plain_nft_is_not_revealing(self, make_asset) -> None:
        assert not is_revealing_nft(make_asset(name="Cool Cat #12", attributes={"Hat": "Red"}))

    def test_revealing_description(self, make_asset) -> None:
        asset = make_asset(name="Cool Cat #12", description="Minted for alice.sol at the meetup")
        assert is_revealing_nft(asset)

    def test_revealing_symbol(self, make_asset) -> None:
        assert is_revealing_nft(make_asset(name="Solana Summit 2024", symbol="POAP"))

    def test_plain_description_is_not_revealing(self, make_asset) -> None:
        asset = make_asset(name="Cool Cat #12", symbol="CAT", description="A cat on a roof")
        assert not is_revealing_nft(asset)

    def test_pfp_by_description(self, make_asset) -> None:
        assert is_pfp_nft(make_asset(name="Monke #881", description="Your on-chain PFP"))

    def test_pfp_by_name(self, make_asset) -> None:
        assert is_pfp_nft(make_asset(name="Degen Avatar #5"))

    def test_pfp_by_traits(self, make_asset) -> None:
        asset = make_asset(
            name="Monke #881",
            attributes={"Background": "Blue", "Eyes": "Laser", "Hat": "Crown"},
        )
        assert is_pfp_nft(asset)

    def test_community_token(self, make_asset) -> None:
        assert is_community_token(make_asset(interface="FungibleToken", symbol="MNGODAO"))
        assert not is_community_token(make_asset(interface="FungibleToken", symbol="USDC"))


class TestIdentityAnalyzer:
    def test_nothing_scores_zero(self) -> None:
        signal = IdentityAnalyzer().analyze([])
        assert signal.score == 0
        assert not signal.has_nfts

    def test_plain_nft_presence(self, make_asset) -> None:
        signal = IdentityAnalyzer().analyze([make_asset(name="Cool Cat #12")])
        assert signal.score == 10
        assert signal.nft_count == 1

    def test_many_nfts(self, make_asset) -> None:
        assets = [make_asset(name=f"Cool Cat #{i}") for i in range(11)]
        assert IdentityAnalyzer().analyze(assets).score == 15

    def test_domain_adds_increment(self, make_asset) -> None:
        assets = [make_asset(name="Cool Cat #12")]
        base = IdentityAnalyzer().analyze(assets).score
        with_domain = IdentityAnalyzer().analyze(assets, domains=["alice"])

        assert with_domain.score == base + 30
        assert with_domain.domains == ("alice",)

    def test_more_than_two_domains(self) -> None:
        signal = IdentityAnalyzer().analyze([], domains=["a", "b", "c"])
        assert signal.score == 45

    def test_social_handle(self) -> None:
        signal = IdentityAnalyzer().analyze([], domains=["alice"], social_handles=["alice_sol"])
        assert signal.score == 60
        assert signal.social_handles == ("alice_sol",)

    def test_fungible_assets_are_not_nfts(self, make_asset) -> None:
        signal = IdentityAnalyzer().analyze([make_asset(interface="FungibleToken", symbol="FANCLUB")])
        assert signal.nft_count == 0
        assert signal.community_tokens == ("FANCLUB",)
        assert signal.score == 5

    def test_score_capped(self, make_asset) -> None:
        assets = [make_asset(name=f"alice.sol avatar {i}") for i in range(12)]
        assets.append(make_asset(interface="FungibleToken", symbol="DAO"))
        signal = IdentityAnalyzer().analyze(
            assets, domains=["a", "b", "c"], social_handles=["alice"]
        )
        # 10 + 5 + 20 + 15 + 5 + 30 + 15 + 30 = 130
        assert signal.score == 95

    def test_revealing_description_scores(self, make_asset) -> None:
        asset = make_asset(name="Cool Cat #12", description="Holder verified as alice.sol")
        signal = IdentityAnalyzer().analyze([asset])
        assert signal.revealing_nfts == ("Cool Cat #12",)
        assert signal.score == 30
