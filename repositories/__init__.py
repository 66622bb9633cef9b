from .base import BaseRepository, storage_errors
from .chat import ChatRepository
from .products import ProductRepository
from .service_profiles import ServiceProfileRepository
from .service_requests import ServiceRequestRepository
from .users import UserRepository

__all__ = [
    "BaseRepository",
    "ChatRepository",
    "ProductRepository",
    "ServiceProfileRepository",
    "ServiceRequestRepository",
    "UserRepository",
    "storage_errors",
]
