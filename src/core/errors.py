"""Stratum import exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class StratumError(Exception):
    """Base exception for all stratum import failures."""


class StratumConfigError(StratumError):
    """Raised for invalid runtime configuration."""


class StratumNameError(StratumError):
    """Raised when a stratum name is illegal or already taken."""


class StratumLockError(StratumError):
    """Raised when the stratum management lock cannot be acquired."""


class StratumDependencyError(StratumError):
    """Raised when an optional runtime dependency is missing."""


class StratumImportSpecError(StratumError):
    """Raised for invalid or unsupported import-spec files."""


class StratumImportError(StratumError):
    """Raised for source ingestion failures."""


class UnrecognizedSourceError(StratumImportError):
    """Raised when a source is neither a directory, tarball, nor disk image."""


class MissingExternalToolError(StratumImportError):
    """Raised when a required converter, inspector, or mount tool is absent."""


class ConversionFailedError(StratumImportError):
    """Raised when a disk image cannot be converted to a raw image."""


class NoPartitionsFoundError(StratumImportError):
    """Raised when a raw image yields no usable partition candidates."""


class AmbiguousRootPartitionError(StratumImportError):
    """Raised when the root partition cannot be chosen among candidates."""


class MountFailedError(StratumImportError):
    """Raised when no candidate partition could be mounted."""


class CopyFailedError(StratumImportError):
    """Raised when copying or extracting source content fails."""
