"""
Capsule simulation core.

- CommitmentGenerator: synthetic leaves -> Merkle root + sampled proof
- CommitmentVerifier: sampled proof + claimed root -> verified flag + latency
- estimate_footprint: illustrative storage/latency model

Usage:
    from core.sim import CommitmentGenerator, CommitmentVerifier

    result = CommitmentGenerator().generate()
    sample = result.proof_sample
    check = CommitmentVerifier().check(result.root, sample.leaf, sample.path, sample.index)
    assert check.verified
"""

from .generator import CommitmentGenerator, GenerationResult, generate_commitment
from .verifier import CommitmentVerifier, VerificationResult, verify_commitment
from .estimator import FootprintEstimate, estimate_footprint, estimate_from_request

__all__ = [
    "CommitmentGenerator",
    "GenerationResult",
    "generate_commitment",
    "CommitmentVerifier",
    "VerificationResult",
    "verify_commitment",
    "FootprintEstimate",
    "estimate_footprint",
    "estimate_from_request",
]
