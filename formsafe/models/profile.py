# formsafe/models/profile.py
"""Customer profile row: name, postal address and phone for a User."""

from formsafe.models.base_entity import StorageEntity
from formsafe.models.field_types import FreeText, OptionalFreeText, OptionalId, PositiveInt, StateCode, ZipCode


class Profile(StorageEntity):
    """
    Args:
        profile_id: primary key (None if not yet persisted)
        user_id: foreign key to User
        name: customer name
        address1: first address line
        address2: second address line (None if it doesn't apply)
        city: city name
        state: USPS two letter state abbreviation
        zip_code: ZIP or ZIP+4 code
        phone: phone number, free form
    """

    profile_id: OptionalId
    user_id: PositiveInt
    name: FreeText
    address1: FreeText
    address2: OptionalFreeText
    city: FreeText
    state: StateCode
    zip_code: ZipCode
    phone: FreeText
