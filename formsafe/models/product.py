# formsafe/models/product.py

from formsafe.models.base_entity import StorageEntity
from formsafe.models.field_types import FreeText, Money, OptionalId


class Product(StorageEntity):
    """Catalog product with a positive unit price"""

    product_id: OptionalId
    product_name: FreeText
    description: FreeText
    price: Money
