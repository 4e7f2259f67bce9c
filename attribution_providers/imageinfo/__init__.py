from __future__ import annotations

from .cache import CachingImageInfoClient
from .client import ImageInfoClient, ImageInfoTransport, StubImageInfoTransport
from .http import HttpTransportConfig, MediaWikiImageInfoTransport, parse_imageinfo_response
from .types import ImageInfo, ImageInfoError, ImageInfoRequest

__all__ = [
    "CachingImageInfoClient",
    "ImageInfoClient",
    "ImageInfoTransport",
    "StubImageInfoTransport",
    "HttpTransportConfig",
    "MediaWikiImageInfoTransport",
    "parse_imageinfo_response",
    "ImageInfo",
    "ImageInfoError",
    "ImageInfoRequest",
]
