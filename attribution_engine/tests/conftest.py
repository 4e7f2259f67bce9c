import sys
from pathlib import Path

# -------------------------------------------------------------------
# Make both top-level packages importable BEFORE importing them:
#   parents[1] holds the attribution_engine package,
#   parents[2] (repo root) holds attribution_providers.
# -------------------------------------------------------------------
for _p in (Path(__file__).resolve().parents[2], Path(__file__).resolve().parents[1]):
    if str(_p) not in sys.path:
        sys.path.insert(0, str(_p))

import pytest  # noqa: E402

from attribution_engine.models.asset import Asset, AssetAttributes, Author  # noqa: E402
from attribution_engine.registry.licences import DEFAULT_LICENCES  # noqa: E402
from attribution_engine.runtime.engine import DialogueEngine  # noqa: E402
from attribution_engine.runtime.session import QuestionnaireSession  # noqa: E402
from attribution_engine.tables.attribution_dialogue import (  # noqa: E402
    attribution_dialogue_table,
    with_editing_steps,
)


ASSET_URL = "https://commons.wikimedia.org/wiki/File:Foo.jpg"


@pytest.fixture
def make_asset():
    """
    Returns a factory that builds a fully described asset (author, title, URL,
    licence) and lets each test blank out one field (e.g., authors=()).
    """

    def _make(
        *,
        title="Foo.jpg",
        url=ASSET_URL,
        authors=("Jane Doe",),
        licence="cc-by-sa-4.0",
        descriptions=None,
    ):
        return Asset(
            title=title,
            attributes=AssetAttributes(
                url=url,
                authors=tuple(Author(name=a) for a in authors),
                licence=DEFAULT_LICENCES.get(licence) if licence else None,
                descriptions=descriptions or {"en": "A foo"},
            ),
        )

    return _make


@pytest.fixture
def dialogue_engine():
    """
    Factory for short-wizard engines; editing=True applies the editing extension.
    """

    def _make(*, editing: bool = False, **kwargs):
        table = attribution_dialogue_table()
        if editing:
            table = with_editing_steps(table)
        return DialogueEngine(table, **kwargs)

    return _make


@pytest.fixture
def make_session(make_asset):
    def _make(asset=None, **kwargs):
        return QuestionnaireSession(asset or make_asset(), **kwargs)

    return _make
