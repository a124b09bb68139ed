"""PIN Hasher Interface"""

from abc import ABC, abstractmethod


class PinHasher(ABC):
    """One-way hashing of transaction PINs"""

    @abstractmethod
    def hash(self, pin: str) -> str:
        pass

    @abstractmethod
    def verify(self, pin: str, pin_hash: str) -> bool:
        pass
