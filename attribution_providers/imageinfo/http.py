# attribution_providers/imageinfo/http.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests

from .client import ImageInfoTransport
from .types import ImageInfo, ImageInfoError, ImageInfoRequest


@dataclass(frozen=True)
class HttpTransportConfig:
    """
    Transport-only settings. No caching, no threading.
    """
    api_path: str = "/w/api.php"
    timeout_s: float = 10.0
    user_agent: str = "attribution-engine/0.1 (image info lookup)"
    disable_env_proxy: bool = False


class MediaWikiImageInfoTransport(ImageInfoTransport):
    """
    Fetches image info from a MediaWiki action API:

      action=query & prop=imageinfo & iiprop=url|size & iiurlwidth=<size>
    """

    def __init__(
        self,
        *,
        config: HttpTransportConfig | None = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or HttpTransportConfig()
        self.session = session or requests.Session()
        if self.config.disable_env_proxy:
            self.session.trust_env = False
        self.session.headers.setdefault("User-Agent", self.config.user_agent)

    def endpoint(self, req: ImageInfoRequest) -> str:
        return req.wiki_url + self.config.api_path

    def params(self, req: ImageInfoRequest) -> dict[str, Any]:
        return {
            "action": "query",
            "format": "json",
            "prop": "imageinfo",
            "iiprop": "url|size",
            "iiurlwidth": req.size,
            "titles": req.title,
        }

    def fetch(self, req: ImageInfoRequest) -> ImageInfo:
        try:
            r = self.session.get(self.endpoint(req), params=self.params(req), timeout=self.config.timeout_s)
            r.raise_for_status()
            payload = r.json()
        except (requests.RequestException, ValueError) as exc:
            raise ImageInfoError(req.filename, str(exc)) from exc
        return parse_imageinfo_response(req, payload)


def parse_imageinfo_response(req: ImageInfoRequest, payload: Mapping[str, Any]) -> ImageInfo:
    if not isinstance(payload, Mapping):
        raise ImageInfoError(req.filename, "response is not a JSON object")
    if "error" in payload:
        err = payload["error"]
        info = err.get("info") if isinstance(err, Mapping) else err
        raise ImageInfoError(req.filename, f"api error: {info}")

    pages = (payload.get("query") or {}).get("pages") or {}
    for page in pages.values():
        if "missing" in page or "invalid" in page:
            raise ImageInfoError(req.filename, "missing")
        infos = page.get("imageinfo") or []
        if not infos:
            continue
        ii = infos[0]
        try:
            return ImageInfo(
                filename=req.filename,
                url=ii["url"],
                width=int(ii["width"]),
                height=int(ii["height"]),
                thumb_url=ii.get("thumburl"),
                thumb_width=_opt_int(ii.get("thumbwidth")),
                thumb_height=_opt_int(ii.get("thumbheight")),
                description_url=ii.get("descriptionurl"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ImageInfoError(req.filename, f"malformed imageinfo: {exc}") from exc

    raise ImageInfoError(req.filename, "no imageinfo in response")


def _opt_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)
