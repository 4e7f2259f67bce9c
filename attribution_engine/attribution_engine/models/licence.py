from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Pattern, Union


def _compile(pattern: Union[str, Pattern[str], None]) -> Optional[Pattern[str]]:
    if pattern is None:
        return None
    if isinstance(pattern, str):
        # "" means "matches nothing on its own" (fallback licences).
        return re.compile(pattern, re.IGNORECASE) if pattern else None
    return pattern


@dataclass(frozen=True)
class Licence:
    """
    A licence a media asset may be published under.

    - groups: family tags used by transition rules (e.g. "cc2de", "ccby")
    - pattern: matched against the licence-template string found in media metadata;
      None for fallback licences that are only ever returned explicitly.
    """
    licence_id: str
    groups: FrozenSet[str] = field(default_factory=frozenset)
    name: str = ""
    pattern: Optional[Pattern[str]] = None
    url: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.licence_id or not self.licence_id.strip():
            raise ValueError("Licence.licence_id must be non-empty")
        object.__setattr__(self, "groups", frozenset(self.groups))
        object.__setattr__(self, "pattern", _compile(self.pattern))  # type: ignore[arg-type]
        if not self.name:
            object.__setattr__(self, "name", self.licence_id)
        if self.url == "":
            object.__setattr__(self, "url", None)

    @classmethod
    def define(
        cls,
        licence_id: str,
        groups: Iterable[str],
        name: str,
        pattern: Union[str, Pattern[str], None] = None,
        url: Optional[str] = None,
    ) -> "Licence":
        return cls(licence_id=licence_id, groups=frozenset(groups), name=name, pattern=pattern, url=url)

    def matches(self, template: str) -> bool:
        if self.pattern is None or not template:
            return False
        return self.pattern.search(template) is not None

    def is_in_group(self, tag: str) -> bool:
        return tag in self.groups

    def is_unknown(self) -> bool:
        return self.is_in_group("unknown")

    def is_supported(self) -> bool:
        return not (self.is_in_group("unknown") or self.is_in_group("unsupported"))
