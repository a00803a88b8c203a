"""
Module 01 - Schemas
File: sim.py

Purpose: Wire schemas for the capsule simulator endpoints.

Payloads use camelCase keys on the wire (datasetGB, anchorRoot, proofSample,
retrievalMs); Python code uses snake_case attribute names. Requests are
validated here, at the trust boundary, before reaching the commitment core.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
)

from .errors import InvalidProofPayloadException, SchemaValidationException


Number = Union[int, float]

# Largest dataset size accepted by footprint estimates
MAX_ESTIMATE_DATASET_GB = 1_000_000_000


class WireModel(BaseModel):
    """Base for all wire models: accept aliases or field names, ignore unknown keys."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("must be a number, not a boolean")
    return value


def _require_finite(value: Optional[Number]) -> Optional[Number]:
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("must be a finite number")
    return value


# =============================================================================
# Generation
# =============================================================================

class GenerateRequest(WireModel):
    """Request body for POST /sim/generate. Missing fields take configured defaults."""

    dataset_gb: Optional[Number] = Field(
        default=None,
        validation_alias=AliasChoices("datasetGB", "datasetSizeGB", "dataset_gb"),
        serialization_alias="datasetGB",
        description="Dataset size in GB (used only to derive leaf text)",
    )
    audit_ratio: Optional[Number] = Field(
        default=None,
        validation_alias=AliasChoices("auditRatio", "audit_ratio"),
        serialization_alias="auditRatio",
        description="Audit ratio; capsule count scales with it",
    )
    cache_warm: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices("cacheWarm", "cache_warm"),
        serialization_alias="cacheWarm",
    )

    @field_validator("dataset_gb", "audit_ratio", mode="before")
    @classmethod
    def _no_bool_numbers(cls, value: Any) -> Any:
        return _reject_bool(value)

    @field_validator("dataset_gb", "audit_ratio")
    @classmethod
    def _finite_numbers(cls, value: Optional[Number]) -> Optional[Number]:
        return _require_finite(value)


class ProofSample(WireModel):
    """Sampled inclusion proof as returned by generation."""

    leaf: str = Field(default="", description="Raw sampled leaf")
    path: list[str] = Field(default_factory=list, description="Sibling digests, nearest first")
    index: Optional[int] = Field(default=None, ge=0, description="Sampled leaf position")


class GenerateResponse(WireModel):
    """Response for POST /sim/generate."""

    capsules: int = Field(
        ...,
        validation_alias=AliasChoices("capsules", "capsuleCount"),
        description="Number of synthetic leaves committed",
    )
    anchor_root: str = Field(..., alias="anchorRoot", description="Merkle root")
    proof_sample: ProofSample = Field(..., alias="proofSample")
    cache_warm: bool = Field(..., alias="cacheWarm")


# =============================================================================
# Verification
# =============================================================================

class ProofSampleInput(WireModel):
    """Proof sample as submitted for verification: leaf must be non-empty, path a list."""

    leaf: str = Field(..., min_length=1)
    path: list[str] = Field(...)
    index: Optional[int] = Field(default=None, ge=0)


class VerifyRequest(WireModel):
    """Request body for POST /sim/verify."""

    anchor_root: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("anchorRoot", "root", "anchor_root"),
        serialization_alias="anchorRoot",
    )
    proof_sample: ProofSampleInput = Field(
        ...,
        validation_alias=AliasChoices("proofSample", "proof_sample"),
        serialization_alias="proofSample",
    )
    cache_warm: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices("cacheWarm", "cache_warm"),
        serialization_alias="cacheWarm",
    )


class VerifyResponse(WireModel):
    """Response for POST /sim/verify."""

    verified: bool = Field(..., description="Whether the replayed root matched")
    retrieval_ms: int = Field(..., alias="retrievalMs", description="Simulated latency")


# =============================================================================
# Footprint Estimate
# =============================================================================

class EstimateRequest(WireModel):
    """Request body for POST /sim/estimate."""

    dataset_gb: Optional[float] = Field(
        default=None,
        ge=0,
        le=MAX_ESTIMATE_DATASET_GB,
        allow_inf_nan=False,
        validation_alias=AliasChoices("datasetGB", "datasetSizeGB", "dataset_gb"),
        serialization_alias="datasetGB",
    )
    audit_ratio: Optional[float] = Field(
        default=None,
        ge=0,
        le=100,
        allow_inf_nan=False,
        validation_alias=AliasChoices("auditRatio", "audit_ratio"),
        serialization_alias="auditRatio",
    )
    cache_warm: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices("cacheWarm", "cache_warm"),
        serialization_alias="cacheWarm",
    )
    persist_expanded: bool = Field(
        default=False,
        validation_alias=AliasChoices("persistExpanded", "persist_expanded"),
        serialization_alias="persistExpanded",
    )

    @field_validator("dataset_gb", "audit_ratio", mode="before")
    @classmethod
    def _no_bool_numbers(cls, value: Any) -> Any:
        return _reject_bool(value)


class EstimateResponse(WireModel):
    """Response for POST /sim/estimate."""

    training_events: int = Field(..., alias="trainingEvents")
    evaluation_events: int = Field(..., alias="evaluationEvents")
    test_inference_events: int = Field(..., alias="testInferenceEvents")
    prod_inference_events: int = Field(..., alias="prodInferenceEvents")
    total_events: int = Field(..., alias="totalEvents")
    capsules: int
    persistent_footprint_gb: float = Field(..., alias="persistentFootprintGB")
    temp_workspace_gb: int = Field(..., alias="tempWorkspaceGB")
    estimated_retrieval_ms: int = Field(..., alias="estimatedRetrievalMs")


# =============================================================================
# Boundary parsing
# =============================================================================

def _error_list(exc: PydanticValidationError) -> list[dict[str, str]]:
    return [
        {
            "loc": ".".join(str(part) for part in err.get("loc", ())),
            "msg": err.get("msg", ""),
        }
        for err in exc.errors()
    ]


def parse_generate_request(payload: Any) -> GenerateRequest:
    """
    Validate an untyped generation payload. A missing body means all defaults.

    Raises:
        SchemaValidationException: If the payload does not match the schema
    """
    if payload is None:
        payload = {}
    try:
        return GenerateRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise SchemaValidationException(
            "Invalid generation payload",
            details={"errors": _error_list(e)},
        ) from e


def parse_verify_request(payload: Any) -> VerifyRequest:
    """
    Validate an untyped verification payload.

    Raises:
        InvalidProofPayloadException: If the root or leaf is missing/empty,
            or the path is not a list of strings
    """
    try:
        return VerifyRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise InvalidProofPayloadException(
            details={"errors": _error_list(e)},
        ) from e


def parse_estimate_request(payload: Any) -> EstimateRequest:
    """
    Validate an untyped estimate payload. A missing body means all defaults.

    Raises:
        SchemaValidationException: If the payload does not match the schema
    """
    if payload is None:
        payload = {}
    try:
        return EstimateRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise SchemaValidationException(
            "Invalid estimate payload",
            details={"errors": _error_list(e)},
        ) from e
