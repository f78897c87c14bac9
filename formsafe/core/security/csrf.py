"""
CSRF token handshake.

issue() creates a random name and a separate random token, stores
name -> token in the caller's session and hands back both for embedding
as hidden form fields. verify() checks a submitted pair against the session
exactly once:

- unknown name             -> CsrfContextNotFoundError
- known name, wrong token  -> CsrfTokenMismatchError (entry kept)
- known name, right token  -> success, entry removed before the lock is released

The session is always passed in explicitly; this module keeps no state.
"""

from html import escape
from typing import Any, Optional
import logging
import secrets

from pydantic import BaseModel, Field

from formsafe.core.config import settings
from formsafe.core.exceptions import CsrfContextNotFoundError, CsrfTokenMismatchError
from formsafe.core.security.session_store import SessionStore

logger = logging.getLogger(__name__)

# Form field names read by the verifying endpoint
CSRF_NAME_FIELD = "csrfName"
CSRF_TOKEN_FIELD = "csrfToken"


class CsrfToken(BaseModel):
    """A freshly issued name/token pair"""
    name: str = Field(min_length=1)
    token: str = Field(min_length=1)

    def to_hidden_inputs(self) -> str:
        """Hidden <input> tags carrying the pair inside a form"""
        return (
            f'<input type="hidden" name="{CSRF_NAME_FIELD}" value="{escape(self.name)}" />\n'
            f'<input type="hidden" name="{CSRF_TOKEN_FIELD}" value="{escape(self.token)}" />'
        )

    def __str__(self) -> str:
        return self.to_hidden_inputs()


class CsrfGuard:
    """
    Issues and verifies single-use CSRF tokens against a SessionStore.

    Args:
        key_prefix: Namespace for CSRF entries inside the session
        name_bytes: Entropy of the generated name
        token_bytes: Entropy of the generated token
    """

    def __init__(
        self,
        key_prefix: Optional[str] = None,
        name_bytes: Optional[int] = None,
        token_bytes: Optional[int] = None
    ):
        self.key_prefix = key_prefix if key_prefix is not None else settings.CSRF_KEY_PREFIX
        self.name_bytes = name_bytes or settings.CSRF_NAME_BYTES
        self.token_bytes = token_bytes or settings.CSRF_TOKEN_BYTES

    def _session_key(self, name: str) -> str:
        return f"{self.key_prefix}{name}"

    def issue(self, session: SessionStore) -> CsrfToken:
        """
        Generate a new name/token pair and remember it in the session.

        Returns:
            CsrfToken whose to_hidden_inputs() goes into the form
        """
        csrf = CsrfToken(
            name=f"csrf_{secrets.token_hex(self.name_bytes)}",
            token=secrets.token_hex(self.token_bytes)
        )
        session.set(self._session_key(csrf.name), csrf.token)
        logger.debug(f"🔐 Issued CSRF context {csrf.name[:13]}... for session {session.session_id[:8]}...")
        return csrf

    def verify(self, session: SessionStore, supplied_name: Any, supplied_token: Any) -> bool:
        """
        Check a submitted pair and consume it.

        Args:
            session: Session the form was issued in
            supplied_name: Value of the csrfName form field
            supplied_token: Value of the csrfToken form field

        Returns:
            True; failures raise

        Raises:
            CsrfContextNotFoundError: No such name in the session (tampered,
                expired or already used)
            CsrfTokenMismatchError: Name known but token differs
        """
        if not isinstance(supplied_name, str) or not supplied_name:
            logger.warning(f"🚫 CSRF check without a name in session {session.session_id[:8]}...")
            raise CsrfContextNotFoundError()

        key = self._session_key(supplied_name)
        with session.lock():
            stored_token = session.get(key)
            if stored_token is None:
                logger.warning(f"🚫 No CSRF context {supplied_name[:13]}... in session {session.session_id[:8]}...")
                raise CsrfContextNotFoundError(supplied_name)

            if not isinstance(supplied_token, str) or not secrets.compare_digest(
                stored_token.encode("utf-8"), supplied_token.encode("utf-8")
            ):
                logger.warning(f"🔒 CSRF token mismatch for {supplied_name[:13]}...")
                raise CsrfTokenMismatchError(supplied_name)

            # Single use: consumed before anyone else can take the lock
            session.delete(key)

        logger.debug(f"✅ CSRF context {supplied_name[:13]}... verified and consumed")
        return True


_default_guard = CsrfGuard()


def issue_csrf(session: SessionStore) -> CsrfToken:
    return _default_guard.issue(session)


def verify_csrf(session: SessionStore, supplied_name: Any, supplied_token: Any) -> bool:
    return _default_guard.verify(session, supplied_name, supplied_token)


def generate_input_tags(session: SessionStore) -> str:
    """Issue a pair and return the hidden input markup in one call"""
    return issue_csrf(session).to_hidden_inputs()
