"""
Runtime layer (engine, answer store, sessions, adapter wiring).

Kernel models live in attribution_engine.models.
"""
from .answer_store import AnswerStore
from .events import Channel, EngineEvents, NavigateEvent, UpdateEvent
from .engine import DialogueEngine, EngineConfig, SessionContext
from .session import QuestionnaireResult, QuestionnaireSession
from .adapter import PresentationAdapter, RenderRequest, bind_adapter, render_request
from .attribution import attribution_for_dialogue, attribution_for_questionnaire, build_attribution

__all__ = [
    "AnswerStore",
    "Channel",
    "EngineEvents",
    "NavigateEvent",
    "UpdateEvent",
    "DialogueEngine",
    "EngineConfig",
    "SessionContext",
    "QuestionnaireResult",
    "QuestionnaireSession",
    "PresentationAdapter",
    "RenderRequest",
    "bind_adapter",
    "render_request",
    "attribution_for_dialogue",
    "attribution_for_questionnaire",
    "build_attribution",
]
