"""
API Models Package
==================

Pydantic models for API request bodies and the response envelope.

ORGANIZATION:
-------------
- requests.py: permissive request bodies (validated by the keyspace validators)
- responses.py: the `{success, data?, message?}` envelope
"""

from redis_web_manager.application.api.models.requests import *  # noqa: F401, F403
from redis_web_manager.application.api.models.responses import (  # noqa: F401
    ERROR_RESPONSES,
    ApiResponse,
    envelope,
    error_envelope,
)
