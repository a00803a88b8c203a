"""
CLI Estimate Command

Print the illustrative capsule footprint for a dataset size and audit ratio.

Usage:
    capsule estimate [--dataset-gb N] [--audit-ratio R] [--cold] [--persist-expanded] [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.schemas.errors import SchemaValidationException
from core.schemas.sim import parse_estimate_request
from core.sim import FootprintEstimate, estimate_from_request


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def print_estimate_human(estimate: FootprintEstimate) -> None:
    print(f"lifecycle events: {estimate.total_events:,}")
    print(f"  training: {estimate.training_events:,}")
    print(f"  evaluation: {estimate.evaluation_events:,}")
    print(f"  test inference: {estimate.test_inference_events:,}")
    print(f"  prod inference: {estimate.prod_inference_events:,}")
    print(f"capsules: {estimate.capsules:,}")
    print(f"persistent footprint: {estimate.persistent_footprint_gb:.2f} GB")
    print(f"temp workspace: {estimate.temp_workspace_gb} GB")
    print(f"estimated retrieval: {estimate.estimated_retrieval_ms} ms")


def estimate_cmd(args: Namespace) -> int:
    """Execute the estimate command."""
    payload: dict = {"persistExpanded": args.persist_expanded}
    if args.dataset_gb is not None:
        payload["datasetGB"] = args.dataset_gb
    if args.audit_ratio is not None:
        payload["auditRatio"] = args.audit_ratio
    if args.cold:
        payload["cacheWarm"] = False

    try:
        request = parse_estimate_request(payload)
    except SchemaValidationException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    estimate = estimate_from_request(request, args.runtime_config.simulation)

    if args.json:
        print(json.dumps(estimate.to_response().model_dump(by_alias=True), indent=2))
    else:
        print_estimate_human(estimate)

    return EXIT_SUCCESS
