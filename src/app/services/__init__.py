from .unit_of_work import UnitOfWork
from .identity_provider import IdentityProvider
from .pin_hasher import PinHasher

__all__ = [
    "UnitOfWork",
    "IdentityProvider",
    "PinHasher",
]
