from .sim import Sim
from .state import Outcome, SessionState, SessionStatus

__all__ = ["Outcome", "SessionState", "SessionStatus", "Sim"]
