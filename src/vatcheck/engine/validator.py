"""
Orchestrates normalize -> hook -> dispatch -> checksum.

This is the only entry point outer layers (CLI, pydantic adapter, batch jobs)
call. Rejection is an ordinary `False`; nothing here raises for user input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional

from ..detect.checksums import check as run_checksum
from ..detect.normalize import normalize
from ..detect.schemes import SchemeTable, default_scheme_table, load_scheme_table
from ..errors import ConfigurationError

if TYPE_CHECKING:
    from ..config import VatCheckConfig

logger = logging.getLogger(__name__)

# Receives the *normalized* number; truthy means "accept, skip the table".
ExtraVat = Callable[[str], bool]


@dataclass(frozen=True)
class CheckResult:
    """Per-number outcome for reporting surfaces (CLI tables, batch summaries)."""
    raw: Optional[str]
    normalized: str
    country: Optional[str]
    valid: bool


class VatNumberValidator:
    """
    Validates VAT numbers against a scheme table.

    Args:
        extra_vat: Optional predicate tried before the table. If it returns a
            truthy value for the normalized number, the number is accepted
            without dispatch or checksum.
        table: Scheme table to dispatch against (defaults to the bundled one).

    Raises:
        ConfigurationError: if `extra_vat` is given but not callable.
    """

    def __init__(
        self,
        extra_vat: Optional[ExtraVat] = None,
        table: Optional[SchemeTable] = None,
    ) -> None:
        if extra_vat is not None and not callable(extra_vat):
            raise ConfigurationError(
                f"extra_vat must be callable, got {type(extra_vat).__name__}"
            )
        self.extra_vat = extra_vat
        self.table = table if table is not None else default_scheme_table()

    @classmethod
    def from_config(cls, cfg: "VatCheckConfig") -> "VatNumberValidator":
        from ..config import resolve_hook

        hook = resolve_hook(cfg.extra_vat) if cfg.extra_vat else None
        return cls(extra_vat=hook, table=load_scheme_table(cfg.countries))

    # ---------------- Public API ----------------

    def is_valid(self, value: Optional[str]) -> bool:
        """
        Accept or reject one raw value.

        `None` and `""` are accepted: an absent value is not this check's concern.
        """
        if value is None or value == "":
            return True
        return self._evaluate(normalize(value))[1]

    def check(self, value: Optional[str]) -> CheckResult:
        """Like `is_valid`, but also report the normalized form and country."""
        if value is None or value == "":
            return CheckResult(value, "", None, True)
        normalized = normalize(value)
        country, valid = self._evaluate(normalized)
        return CheckResult(value, normalized, country, valid)

    def validate_many(self, values: Iterable[Optional[str]]) -> List[CheckResult]:
        return [self.check(v) for v in values]

    # --------------- Internals ------------------

    def _evaluate(self, normalized: str) -> tuple[Optional[str], bool]:
        if self.extra_vat is not None and self.extra_vat(normalized):
            logger.debug("extra_vat accepted %r", normalized)
            return None, True

        match = self.table.dispatch(normalized)
        if match is None:
            return None, False

        return match.country, run_checksum(match.country, match.payload)


def is_valid(value: Optional[str], extra_vat: Optional[ExtraVat] = None) -> bool:
    """One-shot helper: `VatNumberValidator(extra_vat).is_valid(value)`."""
    return VatNumberValidator(extra_vat=extra_vat).is_valid(value)
