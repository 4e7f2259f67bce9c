# attribution_providers/imageinfo/types.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from attribution_engine.errors import AttributionError


class ImageInfoError(AttributionError):
    """Image metadata could not be retrieved. Raised through the returned future."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"image info for {filename!r} unavailable: {reason}")
        self.filename = filename
        self.reason = reason


@dataclass(frozen=True)
class ImageInfoRequest:
    """
    One metadata lookup.

    filename is the bare file name (no "File:" prefix); size is the requested
    thumbnail width in pixels.
    """
    filename: str
    size: int
    wiki_url: str

    def __post_init__(self) -> None:
        name = (self.filename or "").strip()
        if name.lower().startswith("file:"):
            name = name[5:]
        if not name:
            raise ValueError("ImageInfoRequest.filename must be non-empty")
        object.__setattr__(self, "filename", name)
        if int(self.size) <= 0:
            raise ValueError("ImageInfoRequest.size must be positive")
        object.__setattr__(self, "size", int(self.size))
        object.__setattr__(self, "wiki_url", (self.wiki_url or "").rstrip("/"))

    @property
    def key(self) -> tuple[str, int, str]:
        return (self.filename, self.size, self.wiki_url)

    @property
    def title(self) -> str:
        return f"File:{self.filename}"


@dataclass(frozen=True)
class ImageInfo:
    filename: str
    url: str
    width: int
    height: int
    thumb_url: Optional[str] = None
    thumb_width: Optional[int] = None
    thumb_height: Optional[int] = None
    description_url: Optional[str] = None
