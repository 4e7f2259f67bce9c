from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Dict, FrozenSet, Iterable, Mapping, MutableMapping, Optional, Sequence, Tuple

from attribution_engine.errors import ConfigurationError, StepNotFound
from attribution_engine.models.step import StepDefinition
from attribution_engine.models.types import normalize_id


@dataclass(frozen=True)
class StepTable:
    """
    Declarative step graph: step_id -> StepDefinition, in definition order.

    Tables are immutable; extensions (e.g. the editing branch of the short wizard)
    produce a new table and are recorded by name so they can be inspected and
    re-applied when a session is restored.
    """
    name: str
    entry_step_id: str
    steps_by_id: Mapping[str, StepDefinition] = field(default_factory=dict)
    extensions: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entry_step_id", normalize_id(self.entry_step_id, what="entry step id"))
        object.__setattr__(self, "steps_by_id", dict(self.steps_by_id))
        object.__setattr__(self, "extensions", frozenset(self.extensions))

    @classmethod
    def build(cls, name: str, entry_step_id: str, steps: Iterable[StepDefinition]) -> "StepTable":
        by_id: Dict[str, StepDefinition] = {}
        for step in steps:
            if step.step_id in by_id:
                raise ConfigurationError(f"Table {name!r} defines step {step.step_id!r} twice")
            by_id[step.step_id] = step
        return cls(name=name, entry_step_id=entry_step_id, steps_by_id=by_id)

    # -----------------------
    # Lookup
    # -----------------------

    def get_step(self, step_id: str, *, referenced_from: Optional[str] = None) -> StepDefinition:
        sid = str(step_id).strip()
        step = self.steps_by_id.get(sid)
        if step is None:
            raise StepNotFound(sid, referenced_from=referenced_from)
        return step

    def has_step(self, step_id: str) -> bool:
        return str(step_id).strip() in self.steps_by_id

    def step_ids(self) -> Tuple[str, ...]:
        return tuple(self.steps_by_id.keys())

    def steps(self) -> Tuple[StepDefinition, ...]:
        return tuple(self.steps_by_id.values())

    def entry_step(self) -> StepDefinition:
        return self.get_step(self.entry_step_id)

    def has_extension(self, name: str) -> bool:
        return name in self.extensions

    # -----------------------
    # Derivation
    # -----------------------

    def with_steps(self, *steps: StepDefinition, extension: Optional[str] = None) -> "StepTable":
        """
        Add or replace steps; existing steps keep their position, new ones are appended.
        """
        by_id = dict(self.steps_by_id)
        for step in steps:
            by_id[step.step_id] = step
        exts = self.extensions | {extension} if extension else self.extensions
        return replace(self, steps_by_id=by_id, extensions=exts)


TableExtension = Callable[[StepTable], StepTable]


class ExtensionRegistry:
    """
    extension name -> function producing the extended table.

    Used to re-apply the extensions recorded in a snapshot.
    """

    def __init__(self) -> None:
        self._extensions: MutableMapping[str, TableExtension] = {}

    def register(self, name: str, extension: TableExtension) -> None:
        key = str(name).strip()
        if not key:
            raise ValueError("extension name must be non-empty")
        if not callable(extension):
            raise TypeError("extension must be callable")
        self._extensions[key] = extension

    def apply(self, table: StepTable, names: Sequence[str]) -> StepTable:
        for name in names:
            if table.has_extension(name):
                continue
            if name not in self._extensions:
                raise ConfigurationError(f"Unknown table extension: {name}")
            table = self._extensions[name](table)
            if not table.has_extension(name):
                raise ConfigurationError(f"Extension {name!r} did not mark the table it produced")
        return table

    def keys(self) -> Tuple[str, ...]:
        return tuple(sorted(self._extensions.keys()))


DEFAULT_EXTENSIONS = ExtensionRegistry()
