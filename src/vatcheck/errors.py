from __future__ import annotations


class ConfigurationError(ValueError):
    """
    Raised while *setting up* validation, never while validating.

    Examples: a non-callable `extra_vat` hook, an import path that cannot be
    resolved, a scheme whose country has no checksum routine.
    """
