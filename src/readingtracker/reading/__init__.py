"""Reading session creation and listing."""

from .session import SessionManager, get_session_manager, reset_session_manager

__all__ = [
    "SessionManager",
    "get_session_manager",
    "reset_session_manager",
]
