"""
FastAPI integration for the CSRF handshake.

Pages rendering a form depend on `csrf_input_tags` to get the hidden
fields; endpoints receiving the POST depend on `require_csrf`, which reads
csrfName / csrfToken from the form body and rejects the request with 403
when verification fails.

The session id comes from a cookie (SESSION_COOKIE_NAME); issuing that
cookie is the application's job.
"""

from typing import Optional
import logging

from fastapi import Depends, Form, HTTPException, Request, status

from formsafe.core.config import settings
from formsafe.core.exceptions import CsrfVerificationError, SessionStoreError
from formsafe.core.security import (
    CSRF_NAME_FIELD,
    CSRF_TOKEN_FIELD,
    SessionStore,
    generate_input_tags,
    get_session_registry,
    verify_csrf
)

logger = logging.getLogger(__name__)


def get_session_store(request: Request) -> SessionStore:
    """Resolve the caller's session from its cookie"""
    session_id = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not session_id:
        client_host = request.client.host if request.client else "unknown"
        logger.warning(f"🔓 Request without session cookie from {client_host} to {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Session required"
        )

    try:
        return get_session_registry().get(session_id)
    except SessionStoreError as e:
        logger.error(f"Session lookup failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session storage unavailable"
        ) from e


def csrf_input_tags(session: SessionStore = Depends(get_session_store)) -> str:
    """Hidden input markup for a freshly issued CSRF pair"""
    return generate_input_tags(session)


def require_csrf(
    csrf_name: Optional[str] = Form(default=None, alias=CSRF_NAME_FIELD),
    csrf_token: Optional[str] = Form(default=None, alias=CSRF_TOKEN_FIELD),
    session: SessionStore = Depends(get_session_store)
) -> None:
    """
    Verify and consume the submitted CSRF pair.

    Raises:
        HTTPException: 403 with "Unable to verify CSRF token: <reason>"
    """
    try:
        verify_csrf(session, csrf_name, csrf_token)
    except CsrfVerificationError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Unable to verify CSRF token: {e.message}"
        ) from e
    except SessionStoreError as e:
        logger.error(f"CSRF verification could not lock session: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session storage unavailable"
        ) from e
