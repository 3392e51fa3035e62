from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Callable, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

DEFAULT_MESSAGE = "Not a tax number."


# ---- Root config ----
class VatCheckConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Violation message used by the pydantic field adapter.
    message: str = DEFAULT_MESSAGE
    # "package.module:callable" tried before the scheme table.
    extra_vat: Optional[str] = None
    # Restrict the bundled table to these countries (None = all).
    countries: Optional[List[str]] = Field(default=None, min_length=1)

    @field_validator("countries", mode="before")
    @classmethod
    def _country_codes(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return v
        # YAML 1.1 reads an unquoted NO (Norway) as false.
        return [("NO" if c is False else c) for c in v]

    @field_validator("countries")
    @classmethod
    def _upper(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return [c.strip().upper() for c in v] if v is not None else v


# ---- Loader ----
def load_config(path: Optional[Path]) -> VatCheckConfig:
    if not path:
        return VatCheckConfig()
    try:
        data = yaml.safe_load(Path(path).read_text()) or {}
        return VatCheckConfig(**data)
    except (OSError, yaml.YAMLError, TypeError, ValidationError) as e:
        raise ConfigurationError(f"invalid config {path}: {e}") from e


def resolve_hook(path: str) -> Callable[[str], bool]:
    """
    Import an `extra_vat` hook from "module:attr" (or "module.attr").

    Raises:
        ConfigurationError: if the module or attribute cannot be found, or the
            object is not callable.
    """
    module_name, sep, attr = path.partition(":")
    if not sep:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise ConfigurationError(f"extra_vat must look like 'module:callable', got {path!r}")

    try:
        obj: Any = importlib.import_module(module_name)
        for part in attr.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"cannot import extra_vat {path!r}: {e}") from e

    if not callable(obj):
        raise ConfigurationError(f"extra_vat {path!r} is not callable")
    return obj
