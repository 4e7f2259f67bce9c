from __future__ import annotations

from typing import Iterable, Iterator, MutableMapping, Optional, Sequence, Tuple

from attribution_engine.models.licence import Licence


UNKNOWN_LICENCE_ID = "unknown"


class LicenceRegistry:
    """
    Ordered list of known licences.

    Detection is by order: if a licence-template string is matched by several
    licences, the first one registered wins. Strings nothing matches resolve to
    the "unknown" licence, never to an error.
    """

    def __init__(self, licences: Iterable[Licence] = (), *, unknown: Optional[Licence] = None) -> None:
        self._ordered: list[Licence] = []
        self._by_id: MutableMapping[str, Licence] = {}
        self._unknown = unknown or Licence.define(UNKNOWN_LICENCE_ID, ["unknown"], "Unknown")
        for lic in licences:
            self.register(lic)

    def register(self, licence: Licence) -> None:
        if not isinstance(licence, Licence):
            raise TypeError("licence registry accepts Licence instances only")
        if licence.licence_id in self._by_id:
            raise ValueError(f"Duplicate licence_id: {licence.licence_id}")
        if licence.licence_id == self._unknown.licence_id:
            self._unknown = licence
        self._ordered.append(licence)
        self._by_id[licence.licence_id] = licence

    @property
    def unknown(self) -> Licence:
        return self._unknown

    def find(self, template: Optional[str]) -> Licence:
        text = (template or "").strip()
        for lic in self._ordered:
            if lic.matches(text):
                return lic
        return self._unknown

    def find_all(self, templates: Iterable[str]) -> Licence:
        """
        Resolve an asset carrying several licence templates: the template whose
        licence ranks first in the registry wins.
        """
        best: Optional[Tuple[int, Licence]] = None
        for t in templates:
            lic = self.find(t)
            if lic is self._unknown:
                continue
            rank = self._ordered.index(lic)
            if best is None or rank < best[0]:
                best = (rank, lic)
        return best[1] if best else self._unknown

    def get(self, licence_id: str) -> Licence:
        lid = str(licence_id).strip()
        if lid == self._unknown.licence_id:
            return self._unknown
        if lid not in self._by_id:
            raise KeyError(f"Unknown licence_id: {lid}")
        return self._by_id[lid]

    def keys(self) -> Tuple[str, ...]:
        return tuple(lic.licence_id for lic in self._ordered)

    def __iter__(self) -> Iterator[Licence]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)


def default_licences() -> Sequence[Licence]:
    return (
        Licence.define("PD", ["pd"], "Public Domain", r"^(Bild-)?(PD|Public domain)\b"),

        Licence.define(
            "cc-zero", ["cc", "cc0"], "CC0 1.0", r"^(cc-zero|Bild-CC-0)",
            "http://creativecommons.org/publicdomain/zero/1.0/legalcode/",
        ),

        Licence.define(
            "cc-by-2.0-de", ["cc", "cc2", "cc2de", "ccby"], "CC BY 2.0 DE", r"^CC-BY(-|/)2.0(-|/)DE",
            "http://creativecommons.org/licenses/by/2.0/de/legalcode/",
        ),
        Licence.define(
            "cc-by-3.0-de", ["cc", "cc3", "ccby"], "CC BY 3.0 DE", r"^CC-BY(-|/)3.0(-|/)DE",
            "http://creativecommons.org/licenses/by/3.0/de/legalcode/",
        ),
        Licence.define(
            "cc-by-3.0", ["cc", "cc3", "ccby"], "CC BY 3.0", r"^CC-BY-3.0(([^\-]+.+|-migrated)*)?$",
            "http://creativecommons.org/licenses/by/3.0/legalcode/",
        ),
        Licence.define(
            "cc-by-4.0", ["cc", "cc4", "ccby"], "CC BY 4.0", r"^CC-BY-4.0(([^\-]+.+|-migrated)*)?$",
            "http://creativecommons.org/licenses/by/4.0/legalcode/",
        ),

        Licence.define(
            "cc-by-sa-2.0-de", ["cc", "cc2", "cc2de"], "CC BY-SA 2.0 DE", r"^(Bild-)?CC-BY-SA(-|/)2.0(-|/)DE",
            "http://creativecommons.org/licenses/by-sa/2.0/de/legalcode/",
        ),
        Licence.define(
            "cc-by-sa-3.0-de", ["cc", "cc3"], "CC BY-SA 3.0 DE", r"^(Bild-)?CC-BY-SA(-|/)3.0(-|/)DE",
            "http://creativecommons.org/licenses/by-sa/3.0/de/legalcode/",
        ),
        Licence.define(
            "cc-by-sa-3.0", ["cc", "cc3"], "CC BY-SA 3.0", r"^(Bild-)?CC-BY-SA(-|/)3.0(([^\-]+.+|-migrated)*)?$",
            "http://creativecommons.org/licenses/by-sa/3.0/legalcode/",
        ),
        Licence.define(
            "cc-by-sa-4.0", ["cc", "cc4"], "CC BY-SA 4.0", r"^(Bild-)?CC-BY-SA(-|/)4.0(([^\-]+.+|-migrated)*)?$",
            "http://creativecommons.org/licenses/by-sa/4.0/legalcode/",
        ),

        # Catch-all for the CC-BY family; must stay after the specific variants.
        Licence.define("cc", ["unsupported"], "CC", r"CC-BY"),

        Licence.define(UNKNOWN_LICENCE_ID, ["unknown"], "Unknown"),
    )


DEFAULT_LICENCES = LicenceRegistry(default_licences())
