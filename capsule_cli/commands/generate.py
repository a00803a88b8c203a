"""
CLI Generate Command

Commit to a synthetic capsule set and print (or save) the anchor root and
sampled proof. The saved JSON is the same payload the HTTP API returns and
can be passed straight to ``capsule verify``.

Usage:
    capsule generate [--dataset-gb N] [--audit-ratio R] [--cold] [--out PATH] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.merkle import compute_tree_depth
from core.schemas.errors import SchemaValidationException
from core.schemas.sim import parse_generate_request
from core.sim import CommitmentGenerator, GenerationResult


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def build_payload(args: Namespace) -> dict:
    """Translate CLI flags into a generation payload (unset flags are omitted)."""
    payload: dict = {}
    if args.dataset_gb is not None:
        payload["datasetGB"] = args.dataset_gb
    if args.audit_ratio is not None:
        payload["auditRatio"] = args.audit_ratio
    if args.cold:
        payload["cacheWarm"] = False
    return payload


def print_result_human(result: GenerationResult) -> None:
    """Print generation result in human-readable format."""
    sample = result.proof_sample
    print(f"capsules: {result.capsule_count:,}")
    print(f"tree_depth: {compute_tree_depth(result.capsule_count)}")
    print(f"anchor_root: {result.root}")
    print(f"sample_index: {sample.index}")
    print(f"sample_leaf: {sample.leaf}")
    print(f"path ({len(sample.path)}):")
    for sibling in sample.path:
        print(f"  - {sibling}")
    print(f"cache_warm: {str(result.cache_warm).lower()}")


def generate_cmd(args: Namespace) -> int:
    """
    Execute the generate command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    generator = CommitmentGenerator(args.runtime_config.simulation)

    try:
        request = parse_generate_request(build_payload(args))
        result = generator.generate(request)
    except SchemaValidationException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    response = result.to_response().model_dump(by_alias=True)

    if args.out:
        out_path = Path(args.out)
        out_path.write_text(json.dumps(response, indent=2) + "\n")
        logger.info(f"Commitment written to {out_path}")

    if args.json:
        print(json.dumps(response, indent=2))
    else:
        print_result_human(result)
        if args.out:
            print(f"\nsaved: {args.out}")

    return EXIT_SUCCESS
