from __future__ import annotations

from typing import Optional


class AttributionError(Exception):
    """
    Base class for all errors raised by the attribution kernel.
    """


class ConfigurationError(AttributionError):
    """
    The step graph is inconsistent (dangling transition target, invalid table).

    Fatal for the session: it indicates a defect in the table, not in user input.
    """


class StepNotFound(ConfigurationError, KeyError):
    def __init__(self, step_id: str, *, referenced_from: Optional[str] = None) -> None:
        self.step_id = step_id
        self.referenced_from = referenced_from
        where = f" (referenced from step {referenced_from!r})" if referenced_from else ""
        super().__init__(f"Unknown step: {step_id!r}{where}")

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0])


class InvalidAnswer(AttributionError):
    """
    submit() was called with an answer the current step does not offer.

    Recoverable: the engine state is left untouched.
    """

    def __init__(self, step_id: Optional[str], answer_id: str, reason: str = "not offered") -> None:
        self.step_id = step_id
        self.answer_id = answer_id
        self.reason = reason
        super().__init__(f"Answer {answer_id!r} rejected on step {step_id!r}: {reason}")


class UnknownStep(KeyError):
    """
    Raised by an AnswerStore bound to known step ids when a foreign step id is used.
    """

    def __init__(self, step_id: str) -> None:
        self.step_id = step_id
        super().__init__(step_id)

    def __str__(self) -> str:
        return f"Answer store does not know step {self.step_id!r}"
