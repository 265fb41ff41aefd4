"""
Response Envelope

Every endpoint answers `{success, data?, message?}`: 200 with `success: true`
on success, 500 with `success: false` and a flat `message` on any failure.
"""

from typing import Any

from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Documentation model of the envelope (shown in /docs)."""

    success: bool
    data: Any | None = None
    message: str | None = None


def envelope(data: Any = None) -> dict[str, Any]:
    """Success envelope. `data` is omitted when there is nothing to return."""
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    return body


def error_envelope(message: str) -> dict[str, Any]:
    return {"success": False, "message": message}


# Attached to every router so /docs shows the failure shape.
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    500: {"model": ApiResponse, "description": "Any failure, with a flat message"},
}
