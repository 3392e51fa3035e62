"""Offline structural and checksum validation of VAT numbers."""

from .detect.normalize import normalize
from .engine.validator import CheckResult, VatNumberValidator, is_valid
from .errors import ConfigurationError

__version__ = "0.1.0"

__all__ = [
    "normalize",
    "is_valid",
    "VatNumberValidator",
    "CheckResult",
    "ConfigurationError",
    "__version__",
]
