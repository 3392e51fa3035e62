"""
Canonical form applied to every candidate before matching.

People write VAT numbers as "ATU 376 750 02", "de-136.695.976" or with stray
line breaks pasted from PDFs. The scheme table only knows the compact,
upper-case form, so this step strips separators and folds case once, up front.
"""

from __future__ import annotations

import re
import string

# Any run of ASCII whitespace, dashes or dots collapses to nothing.
_SEPARATORS = re.compile(r"(\s|-|\.)+", re.A)

# str.upper() would also fold the dotless i and the long s onto I and S.
_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


def normalize(s: str) -> str:
    """
    Remove whitespace/`-`/`.` runs and upper-case ASCII letters.

    Idempotent: `normalize(normalize(s)) == normalize(s)`.

    Examples:
        '  at u 37675002 ' -> 'ATU37675002'
        'de-136.695.976'   -> 'DE136695976'
    """
    return _SEPARATORS.sub("", s.translate(_ASCII_UPPER))
