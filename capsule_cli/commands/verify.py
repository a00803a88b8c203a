"""
CLI Verify Command

Replay a sampled proof from a generate output (or any verification payload)
and report whether it reproduces the anchor root.

Usage:
    capsule verify commitment.json [--cold] [--json]
    capsule generate --json | capsule verify -
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from core.schemas.errors import InvalidProofPayloadException
from core.sim import CommitmentVerifier


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def load_payload(source: str) -> Any:
    """Read a JSON payload from a file path, or stdin when source is '-'."""
    if source == "-":
        return json.load(sys.stdin)

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Payload not found: {path}")
    with open(path) as f:
        return json.load(f)


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0=verified, 1=invalid input, 2=not verified)
    """
    try:
        payload = load_payload(args.payload)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading payload: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.cold and isinstance(payload, dict):
        payload = {**payload, "cacheWarm": False}

    verifier = CommitmentVerifier(args.runtime_config.simulation)
    try:
        result = verifier.verify_payload(payload)
    except InvalidProofPayloadException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        for err in e.details.get("errors", []):
            print(f"  ✗ {err['loc']}: {err['msg']}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps(result.to_response().model_dump(by_alias=True), indent=2))
    else:
        print(f"verified: {str(result.verified).lower()}")
        print(f"retrieval_ms: {result.retrieval_ms}")

    return EXIT_SUCCESS if result.verified else EXIT_VERIFICATION_FAILED
