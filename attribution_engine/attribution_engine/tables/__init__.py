"""
Step definition tables (declarative step graphs).
"""
from .table import DEFAULT_EXTENSIONS, ExtensionRegistry, StepTable, TableExtension
from .questionnaire import questionnaire_table
from .attribution_dialogue import attribution_dialogue_table, with_editing_steps

__all__ = [
    "DEFAULT_EXTENSIONS",
    "ExtensionRegistry",
    "StepTable",
    "TableExtension",
    "questionnaire_table",
    "attribution_dialogue_table",
    "with_editing_steps",
]
