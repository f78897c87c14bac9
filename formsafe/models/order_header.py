# formsafe/models/order_header.py

from formsafe.models.base_entity import StorageEntity
from formsafe.models.field_types import MySQLDateTime, OptionalId, PositiveInt


class OrderHeader(StorageEntity):
    """
    Order placed by a Profile.

    order_date and ship_date accept datetime objects or MySQL formatted
    strings (YYYY-MM-DD HH:MM:SS) and are always stored as datetime.
    """

    order_header_id: OptionalId
    profile_id: PositiveInt
    order_date: MySQLDateTime
    ship_date: MySQLDateTime
