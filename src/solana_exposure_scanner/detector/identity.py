"""Identity linkage analysis.

Naming-service domains, linked social handles and NFT metadata can tie an
address directly to a real-world persona.
"""

import logging
import re
from collections.abc import Sequence

from solana_exposure_scanner.detector.ladder import clamp_score
from solana_exposure_scanner.detector.models import IdentitySignal
from solana_exposure_scanner.ingestor.models import Asset

logger = logging.getLogger(__name__)

# Score increments
NFT_PRESENCE_POINTS = 10
MANY_NFTS_POINTS = 5
MANY_NFTS_THRESHOLD = 10
REVEALING_NFT_POINTS = 20
PFP_NFT_POINTS = 15
COMMUNITY_TOKEN_POINTS = 5
DOMAIN_POINTS = 30
MANY_DOMAINS_POINTS = 15
MANY_DOMAINS_THRESHOLD = 2
SOCIAL_HANDLE_POINTS = 30
MAX_IDENTITY_SCORE = 95

# NFT metadata text that looks like a domain or a personal profile
DOMAIN_LIKE_NAME = re.compile(r"\.(sol|eth|bonk|abc|poor)\b|\bprofile\b|\bname\b", re.IGNORECASE)
# Membership, verification and attendance badges
BADGE_NAME = re.compile(
    r"\b(badge|member(ship)?|pass|verified|verification|certificate|poap|attendee|ticket)\b",
    re.IGNORECASE,
)
SOCIAL_TRAIT = re.compile(r"^(twitter|x|discord|telegram|github|email|handle|username)$", re.IGNORECASE)
PFP_NAME = re.compile(r"\b(pfp|avatar|profile picture)\b", re.IGNORECASE)
PFP_TRAIT = re.compile(r"^(background|eyes|mouth|head|hat|clothes|fur|skin|face)$", re.IGNORECASE)
MIN_PFP_TRAITS = 3
COMMUNITY_TOKEN = re.compile(r"(dao|community|fan|club|guild|social)", re.IGNORECASE)


def _metadata_text(asset: Asset) -> str:
    """Name, symbol and description joined for pattern matching."""
    description = asset.content.description if asset.content else None
    return "\n".join(part for part in (asset.name, asset.symbol, description) if part)


def is_revealing_nft(asset: Asset) -> bool:
    """Return True if the NFT's metadata text or attributes point at an identity."""
    text = _metadata_text(asset)
    if DOMAIN_LIKE_NAME.search(text) or BADGE_NAME.search(text):
        return True
    if asset.content is None:
        return False
    return any(
        SOCIAL_TRAIT.match(attr.trait_type) and attr.value for attr in asset.content.attributes
    )


def is_pfp_nft(asset: Asset) -> bool:
    """Return True for profile-picture style NFTs.

    Either the name, symbol or description says so, or the attributes look
    like a generative avatar collection (several body/appearance traits).
    """
    if PFP_NAME.search(_metadata_text(asset)):
        return True
    if asset.content is None:
        return False
    traits = sum(1 for attr in asset.content.attributes if PFP_TRAIT.match(attr.trait_type))
    return traits >= MIN_PFP_TRAITS


def is_community_token(asset: Asset) -> bool:
    return COMMUNITY_TOKEN.search(f"{asset.symbol} {asset.name}") is not None


class IdentityAnalyzer:
    """Score identity exposure from holdings, domains and social handles.

    Example:
        ```python
        signal = IdentityAnalyzer().analyze(assets, ["alice"], ["alice_sol"])
        assert signal.score == 60
        ```
    """

    def analyze(
        self,
        assets: Sequence[Asset],
        domains: Sequence[str] = (),
        social_handles: Sequence[str] = (),
    ) -> IdentitySignal:
        """Score identity exposure.

        Args:
            assets: Assets owned by the address (NFTs and fungible tokens).
            domains: Owned name-service domains, without the .sol suffix.
            social_handles: Linked social handles, without the @ prefix.

        Returns:
            IdentitySignal with the clamped score and its evidence.
        """
        nfts = [asset for asset in assets if asset.is_nft]
        revealing = tuple(a.name or a.id for a in nfts if is_revealing_nft(a))
        pfps = tuple(a.name or a.id for a in nfts if is_pfp_nft(a))
        community = tuple(
            dict.fromkeys(a.symbol or a.name for a in assets if a.is_fungible and is_community_token(a))
        )

        score = 0
        if nfts:
            score += NFT_PRESENCE_POINTS
        if len(nfts) > MANY_NFTS_THRESHOLD:
            score += MANY_NFTS_POINTS
        if revealing:
            score += REVEALING_NFT_POINTS
        if pfps:
            score += PFP_NFT_POINTS
        if community:
            score += COMMUNITY_TOKEN_POINTS
        if domains:
            score += DOMAIN_POINTS
        if len(domains) > MANY_DOMAINS_THRESHOLD:
            score += MANY_DOMAINS_POINTS
        if social_handles:
            score += SOCIAL_HANDLE_POINTS

        if revealing or domains or social_handles:
            logger.debug(
                "Identity evidence: %d revealing NFTs, %d domains, %d handles",
                len(revealing),
                len(domains),
                len(social_handles),
            )

        return IdentitySignal(
            score=clamp_score(score, upper=MAX_IDENTITY_SCORE),
            nft_count=len(nfts),
            revealing_nfts=revealing,
            pfp_nfts=pfps,
            community_tokens=community,
            domains=tuple(domains),
            social_handles=tuple(social_handles),
        )
