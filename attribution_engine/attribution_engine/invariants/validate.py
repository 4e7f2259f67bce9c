from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from attribution_engine.errors import ConfigurationError
from attribution_engine.tables.table import StepTable

from .rules import InvariantViolation, validate_all


@dataclass(frozen=True)
class ValidationReport:
    """
    Collected violations for a step table.
    """
    subject: str
    violations: Sequence[InvariantViolation]

    @property
    def ok(self) -> bool:
        return not self.violations

    def rules(self) -> frozenset[str]:
        return frozenset(v.rule for v in self.violations)


def validate_table(table: StepTable) -> ValidationReport:
    """
    Non-throwing validation; see require_valid_table for the fatal variant.
    """
    return ValidationReport(
        subject=f"StepTable:{table.name}",
        violations=tuple(validate_all(table)),
    )


def require_valid_table(table: StepTable) -> StepTable:
    report = validate_table(table)
    if not report.ok:
        details = "; ".join(f"{v.rule}: {v.message}" for v in report.violations)
        raise ConfigurationError(f"{report.subject} is inconsistent: {details}")
    return table
