from .classifier import TurnIntent, classify
from .orchestrator import TurnStage, TurnSource, SessionStart, RejoinConfirmation, ResponseOrchestrator

__all__ = [
    "RejoinConfirmation",
    "ResponseOrchestrator",
    "SessionStart",
    "TurnIntent",
    "TurnSource",
    "TurnStage",
    "classify",
]
