from .registry import ConnectionRegistry
from .session import ConnectionParams, Session, SessionState

__all__ = ["ConnectionParams", "ConnectionRegistry", "Session", "SessionState"]
