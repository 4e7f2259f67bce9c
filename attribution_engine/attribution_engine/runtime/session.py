from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from attribution_engine.models.asset import Asset, Author
from attribution_engine.models.licence import Licence
from attribution_engine.models.snapshot import SessionSnapshot
from attribution_engine.registry.licences import DEFAULT_LICENCES, LicenceRegistry
from attribution_engine.tables.questionnaire import (
    FLAG_EXCEPTIONAL_USE,
    FLAG_USE_CASE,
    FORM_AUTHOR,
    FORM_TITLE,
    FORM_URL,
    questionnaire_table,
)
from attribution_engine.tables.table import StepTable

from .answer_store import AnswerStore
from .engine import DialogueEngine, EngineConfig, SessionContext


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuestionnaireResult:
    """
    What the questionnaire knows so far.

    asset is the source asset overlaid with the values typed on the form-* steps;
    fields the user has not provided yet stay as they were (possibly None).
    """
    asset: Asset
    licence: Licence
    use_case: Optional[str] = None
    attribution_although_exceptional_use: bool = False
    groups: Mapping[str, Mapping[str, str]] = field(default_factory=dict)


def _text(store: AnswerStore, step_id: str) -> Optional[str]:
    value = store.get(step_id, "1")
    return value if isinstance(value, str) and value else None


class QuestionnaireSession:
    """
    One attribution task on the long questionnaire.

    Owns the engine and its answer store; the asset is supplied from outside
    (metadata) and never mutated. Created per task, discarded when finished.
    """

    def __init__(
        self,
        asset: Asset,
        *,
        table: Optional[StepTable] = None,
        licences: LicenceRegistry = DEFAULT_LICENCES,
        store: Optional[AnswerStore] = None,
        current_step_id: Optional[str] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.asset = asset
        self.licences = licences
        self.engine = DialogueEngine(
            table or questionnaire_table(),
            store=store,
            current_step_id=current_step_id,
            config=config,
            context_provider=self._context,
        )

    @classmethod
    def from_snapshot(
        cls,
        asset: Asset,
        snapshot: SessionSnapshot,
        *,
        table: Optional[StepTable] = None,
        licences: LicenceRegistry = DEFAULT_LICENCES,
        config: Optional[EngineConfig] = None,
    ) -> "QuestionnaireSession":
        session = cls.__new__(cls)
        session.asset = asset
        session.licences = licences
        session.engine = DialogueEngine.from_snapshot(
            table or questionnaire_table(),
            snapshot,
            config=config,
            context_provider=session._context,
        )
        return session

    # -----------------------
    # Delegation
    # -----------------------

    @property
    def store(self) -> AnswerStore:
        return self.engine.store

    @property
    def current_step_id(self) -> str:
        return self.engine.current_step_id

    @property
    def is_done(self) -> bool:
        return self.engine.is_done

    def submit(self, answer_id: Any, value: Optional[Any] = None) -> str:
        return self.engine.submit(answer_id, value)

    def input_text(self, text: Optional[str]) -> None:
        self.engine.input_text(text)

    def confirm_text(self, text: Optional[str] = None) -> str:
        return self.engine.confirm_text(text)

    def snapshot(self) -> SessionSnapshot:
        return self.engine.snapshot()

    # -----------------------
    # Derived views
    # -----------------------

    def licence(self) -> Licence:
        """
        The licence confirmed on step 2, else the asset's own licence, else unknown.
        """
        confirmed = self.store.get("2", "1")
        if isinstance(confirmed, str) and confirmed:
            try:
                return self.licences.get(confirmed)
            except KeyError:
                logger.warning("confirmed licence %r is not registered; using unknown", confirmed)
                return self.licences.unknown
        if self.store.has("2", "9") and "cc-zero" in self.licences.keys():
            return self.licences.get("cc-zero")
        return self.asset.get_licence() or self.licences.unknown

    def result_asset(self) -> Asset:
        asset = self.asset
        author = _text(self.store, FORM_AUTHOR)
        if author:
            asset = asset.with_authors(Author(name=author))
        title = _text(self.store, FORM_TITLE)
        if title:
            asset = asset.with_title(title)
        url = _text(self.store, FORM_URL)
        if url:
            asset = asset.with_url(url)
        return asset.with_licence(self.licence())

    def use_case(self) -> Optional[str]:
        return self.engine.grouped_view().get("useCase", {}).get("type")

    def attribution_although_exceptional_use(self) -> bool:
        return self.store.has("5", "1")

    def result(self) -> QuestionnaireResult:
        return QuestionnaireResult(
            asset=self.result_asset(),
            licence=self.licence(),
            use_case=self.use_case(),
            attribution_although_exceptional_use=self.attribution_although_exceptional_use(),
            groups=self.engine.grouped_view(),
        )

    def _context(self, store: AnswerStore) -> SessionContext:
        return SessionContext(
            asset=self.result_asset(),
            licence=self.licence(),
            flags={
                FLAG_EXCEPTIONAL_USE: self.attribution_although_exceptional_use(),
                FLAG_USE_CASE: self.use_case(),
            },
        )
