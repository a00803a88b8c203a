"""
CLI command modules.
"""

from capsule_cli.commands import generate, verify, estimate

__all__ = ["generate", "verify", "estimate"]
