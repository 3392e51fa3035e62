"""
Scheme table and country dispatch.

What this does
--------------
- Loads the YAML scheme pack (`rulesets/schemes.yaml`): an *ordered* list of
  jurisdiction formats, each a regex with a named `payload` group.
- Compiles every scheme once into an immutable `SchemeTable`.
- `SchemeTable.dispatch()` picks the scheme for a normalized number and
  extracts the payload handed to the checksum routines.

Dispatch rule
-------------
The first two characters select the candidate schemes (every scheme whose
country code starts with them, so "CH" reaches "CHE"). Candidates are tried in
table order and the *first* full match wins, even if its checksum later
fails and a later scheme would also have matched. There is no backtracking.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import yaml

from ..errors import ConfigurationError
from .checksums import CHECKSUMS

logger = logging.getLogger(__name__)

_RULESET_PACKAGE = "vatcheck.detect.rulesets"
_RULESET_FILE = "schemes.yaml"


# ---- Data model --------------------------------------------------------------------------

@dataclass(frozen=True)
class Scheme:
    """
    One jurisdiction format.

    Attributes:
        country: Code selecting the checksum routine ('AT', 'CHE', ...).
        pattern: Compiled regex matched against the whole normalized number.
        label:   Human readable name, e.g. 'Spain (other juridical entities)'.
    """
    country: str
    pattern: re.Pattern
    label: str = ""

    def extract(self, normalized: str) -> Optional[str]:
        """Return the payload if the whole string matches, else None."""
        m = self.pattern.fullmatch(normalized)
        return m.group("payload") if m else None


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a successful dispatch."""
    country: str
    payload: str
    scheme: Scheme


# ---- Table -------------------------------------------------------------------------------

class SchemeTable:
    """
    Immutable, ordered collection of `Scheme`s.

    Building a table checks that every country it mentions has a checksum
    routine in `CHECKSUMS`, so a table can never dispatch to a routine that
    does not exist.
    """

    def __init__(self, schemes: Iterable[Scheme]) -> None:
        self._schemes: Tuple[Scheme, ...] = tuple(schemes)

        missing = sorted({s.country for s in self._schemes} - set(CHECKSUMS))
        if missing:
            raise ConfigurationError(
                f"no checksum routine for scheme countries: {', '.join(missing)}"
            )

    @classmethod
    def from_rules(cls, rules: Sequence[Mapping[str, Any]]) -> "SchemeTable":
        """Build a table from plain mappings (`country`, `regex`, optional `label`)."""
        return cls(_compile_rule(i, r) for i, r in enumerate(rules))

    def __iter__(self) -> Iterator[Scheme]:
        return iter(self._schemes)

    def __len__(self) -> int:
        return len(self._schemes)

    @property
    def countries(self) -> List[str]:
        """Country codes in table order, without duplicates."""
        return list(dict.fromkeys(s.country for s in self._schemes))

    def for_prefix(self, prefix: str) -> List[Scheme]:
        return [s for s in self._schemes if s.country.startswith(prefix)]

    def restrict(self, countries: Iterable[str]) -> "SchemeTable":
        """
        Keep only the schemes of the given countries (table order is preserved).

        Raises:
            ConfigurationError: if a requested country is not in the table.
        """
        wanted = {c.upper() for c in countries}
        unknown = sorted(wanted - set(self.countries))
        if unknown:
            raise ConfigurationError(f"unknown countries: {', '.join(unknown)}")
        return SchemeTable(s for s in self._schemes if s.country in wanted)

    def dispatch(self, normalized: str) -> Optional[MatchResult]:
        """
        Find the scheme for a normalized number.

        Returns the first structural match among the schemes sharing the
        number's two-letter prefix, or None when nothing matches.
        """
        for scheme in self.for_prefix(normalized[:2]):
            payload = scheme.extract(normalized)
            if payload is not None:
                return MatchResult(scheme.country, payload, scheme)

        logger.debug("no scheme matched %r", normalized)
        return None


# ---- Loading -----------------------------------------------------------------------------

def _compile_rule(index: int, rule: Any) -> Scheme:
    """
    Turn one YAML rule into a `Scheme`.

    Patterns are compiled with `re.ASCII` so `\\d` only means 0-9.
    """
    if not isinstance(rule, Mapping) or "country" not in rule or "regex" not in rule:
        raise ConfigurationError(f"scheme #{index} needs 'country' and 'regex'")

    try:
        pattern = re.compile(str(rule["regex"]), re.A)
    except re.error as e:
        raise ConfigurationError(f"scheme #{index} has an invalid regex: {e}") from e

    if "payload" not in pattern.groupindex:
        raise ConfigurationError(f"scheme #{index} has no 'payload' group")

    return Scheme(
        country=str(rule["country"]).upper(),
        pattern=pattern,
        label=str(rule.get("label", "")),
    )


def _read_ruleset() -> List[Dict[str, Any]]:
    text = resources.files(_RULESET_PACKAGE).joinpath(_RULESET_FILE).read_text()
    data = yaml.safe_load(text) or {}
    return list(data.get("schemes", []) or [])


@lru_cache(maxsize=1)
def default_scheme_table() -> SchemeTable:
    """The bundled table, built once per process and shared."""
    table = SchemeTable.from_rules(_read_ruleset())
    logger.debug("loaded %d schemes for %d countries", len(table), len(table.countries))
    return table


def load_scheme_table(countries: Optional[Iterable[str]] = None) -> SchemeTable:
    """Bundled table, optionally restricted to a subset of countries."""
    table = default_scheme_table()
    if countries is None:
        return table
    return table.restrict(countries)
