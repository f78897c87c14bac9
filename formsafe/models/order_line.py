# formsafe/models/order_line.py

from formsafe.models.base_entity import StorageEntity
from formsafe.models.field_types import Discount, PositiveInt


class OrderLine(StorageEntity):
    """
    One product line of an OrderHeader.

    The row is keyed by (order_header_id, product_id); there is no surrogate
    id. discount is a negative delta applied to the line.
    """

    order_header_id: PositiveInt
    product_id: PositiveInt
    quantity: PositiveInt
    discount: Discount
