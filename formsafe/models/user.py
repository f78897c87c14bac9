# formsafe/models/user.py
"""
User authentication row for a typical e-commerce site.

Holds the login email, the SHA-512 PBKDF2 password hash with its salt, and
the one-time authentication token used for new accounts and password resets.

See Profile for the customer details that reference a User.
"""

from formsafe.models.base_entity import StorageEntity
from formsafe.models.field_types import AuthenticationToken, Email, OptionalId, PasswordHash, Salt


class User(StorageEntity):
    """
    Args:
        user_id: primary key (None if not yet persisted)
        email: unique login email
        password: 128 hex character SHA-512 PBKDF2 hash of the password
        salt: 64 hex character salt used in the hash
        authentication_token: 32 hex characters, None for an active User

    Raises:
        MalformedInputError: when a parameter is of the wrong type or format
        OutOfRangeError: when a parameter is outside its allowed range
    """

    user_id: OptionalId
    email: Email
    password: PasswordHash
    salt: Salt
    authentication_token: AuthenticationToken

    @property
    def is_active(self) -> bool:
        """No activation or reset is pending"""
        return self.authentication_token is None
