"""
Capsule CLI

Command-line interface for the capsule commitment simulator.

Usage:
    python -m capsule_cli generate --dataset-gb 500 --audit-ratio 10 --out commitment.json
    python -m capsule_cli verify commitment.json
    python -m capsule_cli estimate --dataset-gb 1000
    python -m capsule_cli serve --port 8000
"""

__version__ = "0.1.0"
