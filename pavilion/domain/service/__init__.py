"""Domain services."""

from .base import Service
from .identity_service import IdentityService
from .invite_service import InviteService
from .jwt_service import JWTService
from .notification import InviteNotification, NotificationClient

__all__ = [
    "IdentityService",
    "InviteNotification",
    "InviteService",
    "JWTService",
    "NotificationClient",
    "Service",
]
