from .collections import router as collections_router
from .connections import router as connections_router
from .health import router as health_router
from .hyperloglog import router as hyperloglog_router
from .keys import router as keys_router

__all__ = [
    "collections_router",
    "connections_router",
    "health_router",
    "hyperloglog_router",
    "keys_router",
]
