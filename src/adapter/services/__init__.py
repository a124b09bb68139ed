from .unit_of_work import SqlAlchemyUnitOfWork
from .identity_provider import SqlAlchemyIdentityProvider
from .pin_hasher import BcryptPinHasher
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyIdentityProvider",
    "BcryptPinHasher",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
]
