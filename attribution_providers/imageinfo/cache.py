# attribution_providers/imageinfo/cache.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional

from .client import ImageInfoClient, ImageInfoTransport
from .types import ImageInfo, ImageInfoError, ImageInfoRequest


logger = logging.getLogger(__name__)


class CachingImageInfoClient(ImageInfoClient):
    """
    Runs transport fetches on an executor and shares one future per
    (filename, size, wiki_url).

    A future that fails is evicted once it completes, so the next request for
    the same key issues a new fetch. Transport errors that are not
    ImageInfoError are wrapped into one.
    """

    def __init__(
        self,
        transport: ImageInfoTransport,
        *,
        executor: Optional[Executor] = None,
        max_workers: int = 4,
    ) -> None:
        self._transport = transport
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="imageinfo"
        )
        self._futures: dict[tuple[str, int, str], Future] = {}
        self._lock = threading.Lock()

    def get_image_info(self, filename: str, size: int, wiki_url: str) -> "Future[ImageInfo]":
        req = ImageInfoRequest(filename=filename, size=size, wiki_url=wiki_url)
        with self._lock:
            fut = self._futures.get(req.key)
            if fut is not None:
                logger.debug("image info cache hit: %s", req.key)
                return fut
            logger.debug("image info cache miss: %s", req.key)
            fut = self._executor.submit(self._fetch, req)
            self._futures[req.key] = fut

        # Outside the lock: an already-finished future runs the callback inline.
        fut.add_done_callback(lambda f, key=req.key: self._evict_failed(key, f))
        return fut

    def cached_keys(self) -> tuple[tuple[str, int, str], ...]:
        with self._lock:
            return tuple(self._futures)

    def clear(self) -> None:
        with self._lock:
            self._futures.clear()

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "CachingImageInfoClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _fetch(self, req: ImageInfoRequest) -> ImageInfo:
        try:
            return self._transport.fetch(req)
        except ImageInfoError:
            raise
        except Exception as exc:
            raise ImageInfoError(req.filename, str(exc)) from exc

    def _evict_failed(self, key: tuple[str, int, str], fut: Future) -> None:
        if fut.cancelled() or fut.exception() is not None:
            with self._lock:
                if self._futures.get(key) is fut:
                    del self._futures[key]
            logger.debug("image info evicted after failure: %s", key)
