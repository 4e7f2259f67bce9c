from __future__ import annotations

from .licences import DEFAULT_LICENCES, UNKNOWN_LICENCE_ID, LicenceRegistry, default_licences

__all__ = [
    "DEFAULT_LICENCES",
    "UNKNOWN_LICENCE_ID",
    "LicenceRegistry",
    "default_licences",
]
