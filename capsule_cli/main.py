"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m capsule_cli generate [--dataset-gb N] [--audit-ratio R] [--cold] [--out PATH] [--json]
    python -m capsule_cli verify <payload.json|-> [--cold] [--json]
    python -m capsule_cli estimate [--dataset-gb N] [--audit-ratio R] [--persist-expanded] [--json]
    python -m capsule_cli serve [--host HOST] [--port PORT]
    python -m capsule_cli config --init

Environment Variables:
    CAPSULE_LOG_LEVEL               Log level (default: INFO)
    CAPSULE_LOG_FILE                Optional log file
    CAPSULE_HOST / CAPSULE_PORT     Service bind address for `serve`
    CAPSULE_BASE_RETRIEVAL_MS       Warm-cache latency baseline (default: 18)
    CAPSULE_COLD_CACHE_MULTIPLIER   Cold-cache multiplier (default: 3.2)
    CAPSULE_MAX_CAPSULES            Upper bound on capsules per generation
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from capsule_cli import __version__
from capsule_cli.commands import estimate, generate, verify
from core.config.runtime import get_default_config_template, load_runtime_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_simulation_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dataset-gb",
        type=float,
        default=None,
        help="Dataset size in GB (default: from config, 500)",
    )
    parser.add_argument(
        "--audit-ratio",
        type=float,
        default=None,
        help="Audit ratio (default: from config, 10)",
    )
    parser.add_argument(
        "--cold",
        action="store_true",
        default=False,
        help="Simulate a cold proof cache",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="capsule",
        description="Capsule commitment simulator - generate and verify sampled Merkle proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./capsule.json or ~/.config/capsule/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate command ---
    generate_parser = subparsers.add_parser(
        "generate",
        help="Commit to synthetic capsules and sample a proof",
        description="Derive capsule leaves, build the Merkle tree, and print the root and sampled proof.",
    )
    _add_simulation_args(generate_parser)
    generate_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the commitment payload (JSON) to this path",
    )
    generate_parser.set_defaults(func=generate.generate_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a sampled proof against its anchor root",
        description="Replay a proof sample and compare the result with the anchor root.",
    )
    verify_parser.add_argument(
        "payload",
        type=str,
        help="Path to a commitment/verification JSON payload, or '-' for stdin",
    )
    verify_parser.add_argument(
        "--cold",
        action="store_true",
        default=False,
        help="Simulate a cold proof cache",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- estimate command ---
    estimate_parser = subparsers.add_parser(
        "estimate",
        help="Estimate capsule footprint and retrieval latency",
    )
    _add_simulation_args(estimate_parser)
    estimate_parser.add_argument(
        "--persist-expanded",
        action="store_true",
        default=False,
        help="Keep materialized audit artifacts (adds temporary workspace)",
    )
    estimate_parser.set_defaults(func=estimate.estimate_cmd)

    # --- serve command ---
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API",
    )
    serve_parser.add_argument("--host", type=str, default=None, help="Bind host (default: from config)")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port (default: from config)")
    serve_parser.set_defaults(func=serve_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="capsule.json",
        help="Path for config file (default: capsule.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (CAPSULE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: capsule config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def serve_cmd(args: argparse.Namespace) -> int:
    """Handle serve command."""
    import uvicorn

    from api.app import create_app

    config = args.runtime_config
    host = args.host or config.service.host
    port = args.port or config.service.port

    uvicorn.run(create_app(config), host=host, port=port)
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_runtime_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if log_level.upper() == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
