"""Recognition (normalize + scheme dispatch) and checksum routines."""

from .checksums import CHECKSUMS, check
from .normalize import normalize
from .schemes import MatchResult, Scheme, SchemeTable, default_scheme_table, load_scheme_table

__all__ = [
    "CHECKSUMS",
    "check",
    "normalize",
    "MatchResult",
    "Scheme",
    "SchemeTable",
    "default_scheme_table",
    "load_scheme_table",
]
