"""
CLI command modules.
"""

from arbor_cli.commands import build, demo, prove, verify

__all__ = ["build", "demo", "prove", "verify"]
