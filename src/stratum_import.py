"""Public SDK surface for stratum import.

This module provides a stable import path for library users.
It re-exports the primary client and typed option models.
"""

from __future__ import annotations

from core.config import StratumConfig
from core.errors import StratumError, StratumImportError
from core.types import ImportOptions, ImportResult, PartitionCandidate
from ingest.import_sdk import StratumImportClient
from tools.tooling import ImportTooling, build_default_tooling

__all__ = [
    "ImportOptions",
    "ImportResult",
    "ImportTooling",
    "PartitionCandidate",
    "StratumConfig",
    "StratumError",
    "StratumImportClient",
    "StratumImportError",
    "build_default_tooling",
]
