"""
Module 02 - Merkle Tree Implementation
Capsule commitment tree construction, sampled proof recording, and proof replay.

This module provides:
- Deterministic Merkle root computation over hex-digest nodes
- Sibling path recording for one sampled leaf during construction
- Two proof replay rules (sorted-pair and positional)
- Standard padding rule for odd-length levels

Commitment Rules (Hard Contracts):
1. Level 0: node = sha256_hex(leaf) for every leaf, in input order
2. Parent hashing: parent = sha256_hex(left + right), left/right by position
3. Padding rule: the last node of an odd-length level pairs with itself
4. Empty leaves: root = sha256_hex("empty"), sample = {leaf: "", path: []}
5. Single leaf: root = sha256_hex(leaf), no pairing step

Replay Rules:
- Sorted-pair: at each step the smaller hex string (lexicographic) goes first.
  This binds the leaf value and sibling set but not the leaf position.
- Positional: the node index decides left/right, as in a standard proof.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from core.crypto.hashing import hash_concat, sha256_hex


# Empty tree sentinel
EMPTY_TREE_ROOT: str = sha256_hex("empty")


@dataclass(frozen=True)
class InclusionProof:
    """
    Sampled inclusion proof for one leaf.

    Attributes:
        leaf: The raw leaf (hashed once more to form its level-0 node)
        path: Sibling digests from the leaf level up to just below the root
        index: 0-based position of the leaf in the input leaf list
    """
    leaf: str
    path: list[str] = field(default_factory=list)
    index: int = 0

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


@dataclass(frozen=True)
class MerkleCommitment:
    """Root of a capsule tree together with its sampled proof."""
    root: str
    sample: InclusionProof
    leaf_count: int


def merkle_parent(left: str, right: str) -> str:
    """Compute the parent digest of two child digests (positional order)."""
    return hash_concat(left, right)


def _next_level(level: Sequence[str]) -> list[str]:
    parents: list[str] = []
    for i in range(0, len(level), 2):
        left = level[i]
        right = level[i + 1] if i + 1 < len(level) else left
        parents.append(merkle_parent(left, right))
    return parents


def build_commitment(leaves: Sequence[str], sample_index: int) -> MerkleCommitment:
    """
    Build the Merkle tree bottom-up and record the sampled leaf's sibling path.

    The sibling at each level is captured while that level is paired, so the
    returned path is ordered nearest sibling first, root-ward last. When the
    sampled node is the unpaired last node of an odd level, its sibling is
    itself.

    Args:
        leaves: Raw leaf strings, order preserved
        sample_index: Position of the leaf whose proof is recorded

    Returns:
        MerkleCommitment with root, sampled proof and leaf count

    Raises:
        IndexError: If sample_index is out of range for a non-empty leaf list

    Example:
        >>> c = build_commitment(["a", "b", "c"], 2)
        >>> len(c.sample.path)
        2
    """
    if len(leaves) == 0:
        return MerkleCommitment(
            root=EMPTY_TREE_ROOT,
            sample=InclusionProof(leaf="", path=[], index=0),
            leaf_count=0,
        )

    if sample_index < 0 or sample_index >= len(leaves):
        raise IndexError(
            f"Sample index {sample_index} out of range for {len(leaves)} leaves"
        )

    level: list[str] = [sha256_hex(leaf) for leaf in leaves]
    path: list[str] = []
    current_index = sample_index

    while len(level) > 1:
        sibling_index = current_index ^ 1
        if sibling_index < len(level):
            path.append(level[sibling_index])
        else:
            # Unpaired last node is duplicated against itself
            path.append(level[current_index])

        level = _next_level(level)
        current_index //= 2

    return MerkleCommitment(
        root=level[0],
        sample=InclusionProof(
            leaf=leaves[sample_index],
            path=path,
            index=sample_index,
        ),
        leaf_count=len(leaves),
    )


def compute_root(leaves: Sequence[str]) -> str:
    """
    Compute only the root for a sequence of raw leaves.

    Args:
        leaves: Raw leaf strings

    Returns:
        Root digest (EMPTY_TREE_ROOT for no leaves)
    """
    if len(leaves) == 0:
        return EMPTY_TREE_ROOT

    level = [sha256_hex(leaf) for leaf in leaves]
    while len(level) > 1:
        level = _next_level(level)
    return level[0]


def replay_sorted_path(leaf: str, path: Sequence[str]) -> str:
    """
    Recompute a candidate root using sorted-pair ordering.

    h = sha256(leaf); then for each neighbor in order,
    h = sha256(min(h, neighbor) + max(h, neighbor)).

    Args:
        leaf: Raw leaf string
        path: Sibling digests, nearest first

    Returns:
        Candidate root digest
    """
    current = sha256_hex(leaf)
    for neighbor in path:
        if current < neighbor:
            current = hash_concat(current, neighbor)
        else:
            current = hash_concat(neighbor, current)
    return current


def replay_positional_path(leaf: str, path: Sequence[str], index: int) -> str:
    """
    Recompute a candidate root using the leaf position for pair ordering.

    Args:
        leaf: Raw leaf string
        path: Sibling digests, nearest first
        index: Claimed 0-based position of the leaf

    Returns:
        Candidate root digest

    Raises:
        ValueError: If index is negative
    """
    if index < 0:
        raise ValueError(f"Leaf index must be non-negative, got {index}")

    current = sha256_hex(leaf)
    current_index = index
    for sibling in path:
        if current_index % 2 == 0:
            current = merkle_parent(current, sibling)
        else:
            current = merkle_parent(sibling, current)
        current_index //= 2
    return current


def verify_inclusion(
    root: str,
    leaf: str,
    path: Sequence[str],
    index: Optional[int] = None,
) -> bool:
    """
    Check that a leaf and sibling path reproduce the claimed root.

    With an index the positional rule is used; without one the sorted-pair
    rule is used.

    Args:
        root: Claimed root digest
        leaf: Raw leaf string
        path: Sibling digests, nearest first
        index: Optional leaf position

    Returns:
        True when the replayed root equals ``root`` exactly
    """
    if index is None:
        candidate = replay_sorted_path(leaf, path)
    else:
        candidate = replay_positional_path(leaf, path, index)
    return candidate == root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the depth of a capsule tree with given number of leaves.

    Depth is the number of levels from leaves to root (inclusive).
    A single leaf has depth 1, two leaves have depth 2, etc.

    Args:
        num_leaves: Number of leaves in the tree

    Returns:
        Tree depth (0 for empty tree)
    """
    if num_leaves <= 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


__all__ = [
    "EMPTY_TREE_ROOT",
    "InclusionProof",
    "MerkleCommitment",
    "merkle_parent",
    "build_commitment",
    "compute_root",
    "replay_sorted_path",
    "replay_positional_path",
    "verify_inclusion",
    "compute_tree_depth",
]
