"""
Module 09D - Simulation Routes

Capsule commitment generation, proof verification, and footprint estimates.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from api.deps import get_generator, get_runtime_config, get_verifier
from api.errors import InvalidProofPayloadError, InvalidRequestError
from core.config.runtime import RuntimeConfig
from core.schemas.errors import InvalidProofPayloadException, SchemaValidationException
from core.schemas.sim import (
    EstimateResponse,
    GenerateResponse,
    VerifyResponse,
    parse_estimate_request,
    parse_generate_request,
    parse_verify_request,
)
from core.sim import CommitmentGenerator, CommitmentVerifier, estimate_from_request


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sim", tags=["simulation"])


@router.post("/generate", response_model=GenerateResponse)
def generate(
    payload: Any = Body(default=None),
    generator: CommitmentGenerator = Depends(get_generator),
) -> GenerateResponse:
    """
    Generate a capsule commitment.

    Body: ``{datasetGB?, auditRatio?, cacheWarm?}``; omitted fields use defaults.
    Returns the capsule count, anchor root and one sampled proof.
    """
    try:
        request = parse_generate_request(payload)
        result = generator.generate(request)
    except SchemaValidationException as e:
        raise InvalidRequestError(e.message, details=e.details, code=e.code)

    logger.info(f"Generated {result.capsule_count} capsules, root {result.root[:16]}...")
    return result.to_response()


@router.post("/verify", response_model=VerifyResponse)
def verify(
    payload: Any = Body(default=None),
    verifier: CommitmentVerifier = Depends(get_verifier),
) -> VerifyResponse:
    """
    Verify a sampled proof against an anchor root.

    Body: ``{anchorRoot, proofSample: {leaf, path, index?}, cacheWarm?}``.
    Missing root or leaf, or a non-list path, is rejected before hashing.
    """
    try:
        request = parse_verify_request(payload)
        result = verifier.verify(request)
    except InvalidProofPayloadException as e:
        raise InvalidProofPayloadError(details=e.details)

    logger.info(f"Verification {'succeeded' if result.verified else 'failed'}")
    return result.to_response()


@router.post("/estimate", response_model=EstimateResponse)
def estimate(
    payload: Any = Body(default=None),
    config: RuntimeConfig = Depends(get_runtime_config),
) -> EstimateResponse:
    """
    Estimate capsule count, storage footprint and retrieval latency.

    Body: ``{datasetGB?, auditRatio?, cacheWarm?, persistExpanded?}``.
    """
    try:
        request = parse_estimate_request(payload)
    except SchemaValidationException as e:
        raise InvalidRequestError(e.message, details=e.details, code=e.code)

    return estimate_from_request(request, config.simulation).to_response()
