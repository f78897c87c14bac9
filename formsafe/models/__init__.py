"""
Storage-bound entities.

Each entity validates every field on construction and on assignment;
relationships are plain foreign-key integers.
"""

from .base_entity import StorageEntity
from .field_types import validated_by
from .user import User
from .profile import Profile
from .product import Product
from .order_header import OrderHeader
from .order_line import OrderLine

__all__ = [
    'StorageEntity',
    'validated_by',
    'User',
    'Profile',
    'Product',
    'OrderHeader',
    'OrderLine'
]
