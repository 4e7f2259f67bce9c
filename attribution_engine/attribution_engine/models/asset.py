from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Mapping, Optional, Sequence, Tuple

from .licence import Licence


@dataclass(frozen=True)
class Author:
    name: str
    url: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Author.name must be non-empty")


def _as_authors(seq: Sequence[object]) -> Tuple[Author, ...]:
    out = []
    for a in seq:
        out.append(a if isinstance(a, Author) else Author(name=str(a)))
    return tuple(out)


@dataclass(frozen=True)
class AssetAttributes:
    """
    Everything known about an asset besides its title.

    One explicit structure with always-present fields; optional values are None.
    """
    url: Optional[str] = None
    authors: Sequence[Author] = field(default_factory=tuple)
    licence: Optional[Licence] = None
    descriptions: Mapping[str, str] = field(default_factory=dict)
    source: Optional[str] = None
    attribution: Optional[str] = None
    file_name: Optional[str] = None
    wiki_url: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "authors", _as_authors(self.authors))
        object.__setattr__(self, "descriptions", dict(self.descriptions) if self.descriptions else {})


@dataclass(frozen=True)
class Asset:
    """
    A reused media asset (e.g. a Commons file).

    Some fields are pre-filled from metadata, others are supplied by the user on the
    form-* steps; see QuestionnaireSession.result() for the overlaid view.
    """
    title: Optional[str] = None
    attributes: AssetAttributes = field(default_factory=AssetAttributes)

    @property
    def url(self) -> Optional[str]:
        return self.attributes.url

    @property
    def licence(self) -> Optional[Licence]:
        return self.attributes.licence

    def get_title(self) -> Optional[str]:
        return self.title

    def get_url(self) -> Optional[str]:
        return self.attributes.url

    def get_authors(self) -> Tuple[Author, ...]:
        """
        Always the sequence form; join with author_names() for display.
        """
        return tuple(self.attributes.authors)

    def author_names(self, separator: str = "; ") -> str:
        return separator.join(a.name for a in self.attributes.authors)

    def get_licence(self) -> Optional[Licence]:
        return self.attributes.licence

    def get_descriptions(self) -> Mapping[str, str]:
        return self.attributes.descriptions

    def get_description(self, language_code: str) -> Optional[str]:
        return self.attributes.descriptions.get(language_code) or None

    def get_source(self) -> Optional[str]:
        return self.attributes.source

    def get_attribution(self) -> Optional[str]:
        return self.attributes.attribution

    # -----------------------
    # Immutability helpers
    # -----------------------

    def with_title(self, title: Optional[str]) -> "Asset":
        return replace(self, title=title)

    def with_url(self, url: Optional[str]) -> "Asset":
        return replace(self, attributes=replace(self.attributes, url=url))

    def with_authors(self, *authors: Author) -> "Asset":
        return replace(self, attributes=replace(self.attributes, authors=tuple(authors)))

    def with_licence(self, licence: Optional[Licence]) -> "Asset":
        return replace(self, attributes=replace(self.attributes, licence=licence))
