"""
Security module for formsafe.

Centralizes the CSRF handshake and the session storage it relies on:
- Single-use CSRF tokens bound to a session
- Session stores (in-memory and Redis) with session-level locks
- Global session registry for web framework integration
"""

from .session_store import (
    SessionStore,
    InMemorySessionStore,
    RedisSessionStore,
    SessionRegistry,
    get_session_registry,
    init_session_registry,
    close_session_registry
)
from .csrf import (
    CSRF_NAME_FIELD,
    CSRF_TOKEN_FIELD,
    CsrfGuard,
    CsrfToken,
    generate_input_tags,
    issue_csrf,
    verify_csrf
)

__all__ = [
    'SessionStore',
    'InMemorySessionStore',
    'RedisSessionStore',
    'SessionRegistry',
    'get_session_registry',
    'init_session_registry',
    'close_session_registry',
    'CSRF_NAME_FIELD',
    'CSRF_TOKEN_FIELD',
    'CsrfGuard',
    'CsrfToken',
    'generate_input_tags',
    'issue_csrf',
    'verify_csrf'
]
