"""
Module 01 - Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import wire models
and the error taxonomy.
"""

# Error taxonomy
from .errors import (
    ErrorCodes,
    CapsuleException,
    SchemaValidationException,
    InvalidProofPayloadException,
    CapsuleLimitException,
    ConfigurationException,
)

# Wire models
from .sim import (
    GenerateRequest,
    GenerateResponse,
    ProofSample,
    ProofSampleInput,
    VerifyRequest,
    VerifyResponse,
    EstimateRequest,
    EstimateResponse,
    parse_generate_request,
    parse_verify_request,
    parse_estimate_request,
)

__all__ = [
    # Errors
    "ErrorCodes",
    "CapsuleException",
    "SchemaValidationException",
    "InvalidProofPayloadException",
    "CapsuleLimitException",
    "ConfigurationException",
    # Wire models
    "GenerateRequest",
    "GenerateResponse",
    "ProofSample",
    "ProofSampleInput",
    "VerifyRequest",
    "VerifyResponse",
    "EstimateRequest",
    "EstimateResponse",
    "parse_generate_request",
    "parse_verify_request",
    "parse_estimate_request",
]
