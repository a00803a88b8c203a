"""
Capsule Commitment Verifier

Replays a sampled inclusion proof and compares the result against a
claimed anchor root.

Pairing rule:
- Payloads without a leaf index use sorted-pair replay: at each step
  h = sha256(min(h, sibling) + max(h, sibling)), lexicographic on hex.
- Payloads carrying the index emitted by the generator use positional
  replay, so generate-then-verify round trips always match.

The reported retrieval latency is cosmetic: round(18 * (1 if warm else 3.2)).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from core.config.runtime import SimulationConfig
from core.crypto.hashing import round_half_up
from core.merkle.merkle_tree import verify_inclusion
from core.schemas.errors import InvalidProofPayloadException
from core.schemas.sim import VerifyRequest, VerifyResponse, parse_verify_request


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of one verification call."""
    verified: bool
    retrieval_ms: int

    def to_response(self) -> VerifyResponse:
        return VerifyResponse(verified=self.verified, retrieval_ms=self.retrieval_ms)


class CommitmentVerifier:
    """
    Checks sampled proofs against anchor roots.

    Example:
        >>> verifier = CommitmentVerifier()
        >>> verifier.retrieval_ms(cache_warm=False)
        58
    """

    def __init__(self, config: Optional[SimulationConfig] = None) -> None:
        self.config = config or SimulationConfig()

    def retrieval_ms(self, cache_warm: bool) -> int:
        """Simulated retrieval latency in milliseconds."""
        multiplier = 1 if cache_warm else self.config.cold_cache_multiplier
        return round_half_up(self.config.base_retrieval_ms * multiplier)

    def check(
        self,
        root: Any,
        leaf: Any,
        path: Any,
        index: Optional[int] = None,
        cache_warm: Optional[bool] = None,
    ) -> VerificationResult:
        """
        Verify raw proof components.

        Shape checks run before any hashing.

        Raises:
            InvalidProofPayloadException: If root or leaf is missing/empty,
                or path is not a list of strings
        """
        if not root or not isinstance(root, str):
            raise InvalidProofPayloadException(field_path="anchorRoot")
        if not leaf or not isinstance(leaf, str):
            raise InvalidProofPayloadException(field_path="proofSample.leaf")
        if not isinstance(path, list) or not all(isinstance(p, str) for p in path):
            raise InvalidProofPayloadException(field_path="proofSample.path")
        if index is not None and (isinstance(index, bool) or not isinstance(index, int) or index < 0):
            raise InvalidProofPayloadException(field_path="proofSample.index")

        if cache_warm is None:
            cache_warm = self.config.default_cache_warm

        verified = verify_inclusion(root, leaf, path, index)
        rule = "sorted" if index is None else "positional"
        logger.debug(f"Replayed {len(path)}-step {rule} proof: verified={verified}")

        return VerificationResult(
            verified=verified,
            retrieval_ms=self.retrieval_ms(cache_warm),
        )

    def verify(self, request: VerifyRequest) -> VerificationResult:
        """Verify a validated request."""
        sample = request.proof_sample
        return self.check(
            root=request.anchor_root,
            leaf=sample.leaf,
            path=sample.path,
            index=sample.index,
            cache_warm=request.cache_warm,
        )

    def verify_payload(self, payload: Any) -> VerificationResult:
        """
        Validate an untyped payload and verify it.

        Raises:
            InvalidProofPayloadException: If the payload is malformed
        """
        return self.verify(parse_verify_request(payload))


def verify_commitment(
    root: str,
    leaf: str,
    path: list[str],
    index: Optional[int] = None,
    cache_warm: bool = True,
    config: Optional[SimulationConfig] = None,
) -> VerificationResult:
    """Convenience wrapper around CommitmentVerifier.check()."""
    return CommitmentVerifier(config).check(root, leaf, path, index, cache_warm)
