from .logger import (
    clear_request_id,
    get_logger,
    set_request_id,
    setup_logging,
)

__all__ = [
    "clear_request_id",
    "get_logger",
    "set_request_id",
    "setup_logging",
]
