"""
pydantic integration: reject model fields that are not valid VAT numbers.

Usage:
    class Company(BaseModel):
        vat: VatNumber = None

    class Supplier(BaseModel):
        vat: Annotated[Optional[str], AfterValidator(VatNumberConstraint(extra_vat=allow_test_ids))]

The checksum engine only answers yes/no; this layer turns a "no" into the
violation message. Empty values pass through untouched.
"""

from __future__ import annotations

from typing import Annotated, Optional

from pydantic import AfterValidator

from .config import DEFAULT_MESSAGE, VatCheckConfig
from .engine.validator import ExtraVat, VatNumberValidator
from .errors import ConfigurationError


class VatNumberConstraint:
    """
    Callable field validator wrapping a `VatNumberValidator`.

    The hook is checked when the constraint is built, so a misconfigured model
    fails at import time rather than on the first request.
    """

    def __init__(
        self,
        message: str = DEFAULT_MESSAGE,
        extra_vat: Optional[ExtraVat] = None,
        validator: Optional[VatNumberValidator] = None,
    ) -> None:
        if validator is not None and extra_vat is not None:
            raise ConfigurationError("pass either extra_vat or validator, not both")
        self.message = message
        self.validator = validator or VatNumberValidator(extra_vat=extra_vat)

    @classmethod
    def from_config(cls, cfg: VatCheckConfig) -> "VatNumberConstraint":
        return cls(message=cfg.message, validator=VatNumberValidator.from_config(cfg))

    def __call__(self, value: Optional[str]) -> Optional[str]:
        if not self.validator.is_valid(value):
            raise ValueError(self.message)
        return value


VatNumber = Annotated[Optional[str], AfterValidator(VatNumberConstraint())]
