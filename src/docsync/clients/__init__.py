"""CLI tool client wrappers."""

from .command_runner import CommandRunner
from .rdme_client import RdmeClient

__all__ = ["CommandRunner", "RdmeClient"]
