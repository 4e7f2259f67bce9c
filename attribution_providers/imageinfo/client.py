# attribution_providers/imageinfo/client.py
from __future__ import annotations

from concurrent.futures import Future
from typing import Mapping, Optional, Protocol, Union, runtime_checkable

from .types import ImageInfo, ImageInfoError, ImageInfoRequest


@runtime_checkable
class ImageInfoTransport(Protocol):
    """
    Blocking fetch of one image's metadata.

    Transports own the wire (HTTP, fixtures); caching and threading live in
    CachingImageInfoClient.
    """

    def fetch(self, req: ImageInfoRequest) -> ImageInfo:
        ...


@runtime_checkable
class ImageInfoClient(Protocol):
    """
    What adapters call. The returned future resolves to ImageInfo or raises
    ImageInfoError; callers that lose interest simply drop it.
    """

    def get_image_info(self, filename: str, size: int, wiki_url: str) -> "Future[ImageInfo]":
        ...


class StubImageInfoTransport(ImageInfoTransport):
    """
    Deterministic transport for tests.

      StubImageInfoTransport(infos={"Foo.jpg": ImageInfo(...)})
      StubImageInfoTransport(infos={"Foo.jpg": ImageInfoError("Foo.jpg", "boom")})

    Unknown file names raise ImageInfoError("missing"). Every request is recorded
    in .requests.
    """

    def __init__(self, *, infos: Optional[Mapping[str, Union[ImageInfo, Exception]]] = None) -> None:
        self._infos = dict(infos or {})
        self.requests: list[ImageInfoRequest] = []

    def set(self, filename: str, info: Union[ImageInfo, Exception]) -> None:
        self._infos[filename] = info

    def fetch(self, req: ImageInfoRequest) -> ImageInfo:
        self.requests.append(req)
        out = self._infos.get(req.filename)
        if out is None:
            raise ImageInfoError(req.filename, "missing")
        if isinstance(out, Exception):
            raise out
        return out
