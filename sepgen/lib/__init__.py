"""Shared library modules: errors, logging and identity helpers."""

from sepgen.lib.errors import (
    DestinationError,
    ProvisioningError,
    ShapeError,
    UnknownTagError,
)
from sepgen.lib.identity import (
    destination_name,
    is_valid_identity,
    normalize_identity,
    require_identity,
)
from sepgen.lib.logging import JSONFormatter, setup_logging

__all__ = [
    "ProvisioningError",
    "ShapeError",
    "DestinationError",
    "UnknownTagError",
    "normalize_identity",
    "is_valid_identity",
    "require_identity",
    "destination_name",
    "JSONFormatter",
    "setup_logging",
]
