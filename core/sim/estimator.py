"""
Capsule Footprint Estimator

Illustrative lifecycle model: estimates how many capsules an audit ratio
produces for a dataset, the persistent storage they occupy, the optional
temporary audit workspace, and the retrieval latency as proof depth grows.

All figures are simulated and deterministic.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Optional

from core.config.runtime import SimulationConfig
from core.crypto.hashing import round_half_up
from core.schemas.sim import MAX_ESTIMATE_DATASET_GB, EstimateRequest, EstimateResponse


STORAGE_SAVINGS = 0.90      # long-term reduction, capsules vs raw payloads
CAPSULE_SIZE_KB = 16        # commitment + metadata + signatures per capsule
BASE_DATA_EVENTS = 3        # ingest, preprocess, split
BASE_DEPLOY_EVENTS = 3      # package, deploy, promote
DEPTH_LATENCY_MS = 1.6      # added per level of proof depth
MAX_WORKSPACE_FRACTION = 0.10


@dataclass(frozen=True)
class FootprintEstimate:
    training_events: int
    evaluation_events: int
    test_inference_events: int
    prod_inference_events: int
    total_events: int
    capsules: int
    persistent_footprint_gb: float
    temp_workspace_gb: int
    estimated_retrieval_ms: int

    def to_response(self) -> EstimateResponse:
        return EstimateResponse(**asdict(self))


def training_events(dataset_gb: float) -> int:
    # sublinear in dataset size, plus per-epoch checkpoints
    steps = round_half_up(math.sqrt(dataset_gb) * 120)
    checkpoints = max(5, round_half_up(math.log2(max(2.0, dataset_gb))))
    return steps + checkpoints


def evaluation_events(dataset_gb: float) -> int:
    return max(5, round_half_up(math.log10(max(10.0, dataset_gb)) * 10))


def estimate_footprint(
    dataset_gb: float,
    audit_ratio: float,
    cache_warm: bool = True,
    persist_expanded: bool = False,
    config: Optional[SimulationConfig] = None,
) -> FootprintEstimate:
    """
    Estimate the capsule footprint for a dataset.

    Args:
        dataset_gb: Dataset size in GB (non-negative)
        audit_ratio: Percentage of lifecycle events captured (0-100)
        cache_warm: Whether the proof cache is warm
        persist_expanded: Whether audit artifacts are materialized and kept
        config: Simulation constants (latency baseline and cold multiplier)

    Returns:
        FootprintEstimate

    Raises:
        ValueError: If dataset_gb or audit_ratio is negative or not finite,
            or dataset_gb exceeds MAX_ESTIMATE_DATASET_GB
    """
    if dataset_gb < 0:
        raise ValueError(f"dataset_gb must be non-negative, got {dataset_gb}")
    if not math.isfinite(dataset_gb) or dataset_gb > MAX_ESTIMATE_DATASET_GB:
        raise ValueError(
            f"dataset_gb must be at most {MAX_ESTIMATE_DATASET_GB}, got {dataset_gb}"
        )
    if audit_ratio < 0:
        raise ValueError(f"audit_ratio must be non-negative, got {audit_ratio}")
    if not math.isfinite(audit_ratio):
        raise ValueError(f"audit_ratio must be finite, got {audit_ratio}")

    config = config or SimulationConfig()

    training = training_events(dataset_gb)
    evaluation = evaluation_events(dataset_gb)
    test_inference = round_half_up(dataset_gb * 2)
    prod_inference = round_half_up(dataset_gb * 20)
    total = (
        BASE_DATA_EVENTS
        + BASE_DEPLOY_EVENTS
        + training
        + evaluation
        + test_inference
        + prod_inference
    )

    capsules = max(1, math.ceil(total * (audit_ratio / 100)))

    overhead_gb = (capsules * CAPSULE_SIZE_KB) / (1024 * 1024)
    persistent_gb = dataset_gb * (1 - STORAGE_SAVINGS) + overhead_gb

    temp_workspace_gb = 0
    if persist_expanded:
        fraction = min(MAX_WORKSPACE_FRACTION, (audit_ratio / 100) * 0.5)
        temp_workspace_gb = round_half_up(dataset_gb * fraction)

    depth_penalty = math.log2(max(1, capsules))
    warm_ms = config.base_retrieval_ms + DEPTH_LATENCY_MS * depth_penalty
    multiplier = 1 if cache_warm else config.cold_cache_multiplier

    return FootprintEstimate(
        training_events=training,
        evaluation_events=evaluation,
        test_inference_events=test_inference,
        prod_inference_events=prod_inference,
        total_events=total,
        capsules=capsules,
        persistent_footprint_gb=persistent_gb,
        temp_workspace_gb=temp_workspace_gb,
        estimated_retrieval_ms=round_half_up(warm_ms * multiplier),
    )


def estimate_from_request(
    request: EstimateRequest,
    config: Optional[SimulationConfig] = None,
) -> FootprintEstimate:
    """Run estimate_footprint() for a validated request, filling configured defaults."""
    config = config or SimulationConfig()
    return estimate_footprint(
        dataset_gb=(
            request.dataset_gb if request.dataset_gb is not None
            else config.default_dataset_gb
        ),
        audit_ratio=(
            request.audit_ratio if request.audit_ratio is not None
            else config.default_audit_ratio
        ),
        cache_warm=(
            request.cache_warm if request.cache_warm is not None
            else config.default_cache_warm
        ),
        persist_expanded=request.persist_expanded,
        config=config,
    )
