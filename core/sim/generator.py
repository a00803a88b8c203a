"""
Capsule Commitment Generator

Derives synthetic capsule leaves from the dataset size and audit ratio,
commits to them with a Merkle tree, and returns the root plus one
sampled inclusion proof.

Leaf rule: leaf_i = sha256_hex(f"{datasetGB}:{auditRatio}:{i}") for i in [0, capsules)
Capsule count: max(1, round(auditRatio * 125)), half-up rounding
Sample index: min(2, capsules - 1)

The figures are illustrative; nothing here is persisted.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

from core.config.runtime import SimulationConfig
from core.crypto.hashing import format_number, round_half_up, sha256_hex
from core.merkle.merkle_tree import InclusionProof, build_commitment
from core.schemas.errors import CapsuleLimitException
from core.schemas.sim import GenerateRequest, GenerateResponse, ProofSample


logger = logging.getLogger(__name__)

Number = Union[int, float]


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generation call."""
    capsule_count: int
    root: str
    proof_sample: InclusionProof
    cache_warm: bool

    def to_response(self) -> GenerateResponse:
        return GenerateResponse(
            capsules=self.capsule_count,
            anchor_root=self.root,
            proof_sample=ProofSample(
                leaf=self.proof_sample.leaf,
                path=list(self.proof_sample.path),
                index=self.proof_sample.index,
            ),
            cache_warm=self.cache_warm,
        )


class CommitmentGenerator:
    """
    Builds capsule commitments.

    Stateless apart from its configuration; a single instance can serve
    any number of independent calls.

    Example:
        >>> gen = CommitmentGenerator()
        >>> result = gen.generate(GenerateRequest(datasetGB=500, auditRatio=10))
        >>> result.capsule_count
        1250
    """

    def __init__(self, config: Optional[SimulationConfig] = None) -> None:
        self.config = config or SimulationConfig()

    def capsule_count(self, audit_ratio: Number) -> int:
        """
        Number of capsules for an audit ratio (never below 1).

        A product that overflows to -inf clamps to 1; +inf saturates one past
        max_capsules so generate() rejects it with the limit error.
        """
        scaled = audit_ratio * self.config.capsules_per_ratio_unit
        if math.isinf(scaled):
            return 1 if scaled < 0 else self.config.max_capsules + 1
        return max(1, round_half_up(scaled))

    def derive_leaves(self, dataset_gb: Number, audit_ratio: Number, count: int) -> list[str]:
        """Synthetic leaves for the given parameters, in index order."""
        prefix = f"{format_number(dataset_gb)}:{format_number(audit_ratio)}"
        return [sha256_hex(f"{prefix}:{i}") for i in range(count)]

    def sample_index(self, capsule_count: int) -> int:
        """Position of the sampled leaf: the configured index, clamped to the last leaf."""
        return max(0, min(self.config.sample_index, capsule_count - 1))

    def generate(self, request: Optional[GenerateRequest] = None) -> GenerationResult:
        """
        Generate a commitment and sampled proof.

        Args:
            request: Generation parameters; omitted fields use configured defaults

        Returns:
            GenerationResult with capsule count, root, proof sample and cache flag

        Raises:
            CapsuleLimitException: If the capsule count exceeds the configured limit
        """
        request = request or GenerateRequest()
        dataset_gb = (
            request.dataset_gb if request.dataset_gb is not None
            else self.config.default_dataset_gb
        )
        audit_ratio = (
            request.audit_ratio if request.audit_ratio is not None
            else self.config.default_audit_ratio
        )
        cache_warm = (
            request.cache_warm if request.cache_warm is not None
            else self.config.default_cache_warm
        )

        count = self.capsule_count(audit_ratio)
        if count > self.config.max_capsules:
            raise CapsuleLimitException(count, self.config.max_capsules)

        leaves = self.derive_leaves(dataset_gb, audit_ratio, count)
        commitment = build_commitment(leaves, self.sample_index(count))

        logger.debug(
            f"Generated {count} capsules for {format_number(dataset_gb)}GB "
            f"at ratio {format_number(audit_ratio)}: root={commitment.root[:16]}..."
        )

        return GenerationResult(
            capsule_count=count,
            root=commitment.root,
            proof_sample=commitment.sample,
            cache_warm=cache_warm,
        )


def generate_commitment(
    dataset_gb: Number = 500,
    audit_ratio: Number = 10,
    cache_warm: bool = True,
    config: Optional[SimulationConfig] = None,
) -> GenerationResult:
    """Convenience wrapper around CommitmentGenerator.generate()."""
    request = GenerateRequest(
        dataset_gb=dataset_gb,
        audit_ratio=audit_ratio,
        cache_warm=cache_warm,
    )
    return CommitmentGenerator(config).generate(request)
