"""
Module 02 - Merkle Tree and Commitments
Capsule tree construction + sampled proof generation/replay.

This module provides:
- InclusionProof / MerkleCommitment: proof and commitment records
- build_commitment: Compute root and record one leaf's sibling path
- compute_root: Root only
- replay_sorted_path / replay_positional_path: Recompute candidate roots
- verify_inclusion: Compare a replayed root against a claimed root

Usage:
    from core.merkle import build_commitment, verify_inclusion

    commitment = build_commitment(leaves, sample_index=2)
    proof = commitment.sample
    assert verify_inclusion(commitment.root, proof.leaf, proof.path, proof.index)
"""
from .merkle_tree import (
    EMPTY_TREE_ROOT,
    InclusionProof,
    MerkleCommitment,
    merkle_parent,
    build_commitment,
    compute_root,
    replay_sorted_path,
    replay_positional_path,
    verify_inclusion,
    compute_tree_depth,
)


__all__ = [
    # Core types
    "InclusionProof",
    "MerkleCommitment",
    "EMPTY_TREE_ROOT",
    # Core functions
    "merkle_parent",
    "build_commitment",
    "compute_root",
    "replay_sorted_path",
    "replay_positional_path",
    "verify_inclusion",
    "compute_tree_depth",
]
