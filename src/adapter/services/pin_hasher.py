"""bcrypt implementation of PinHasher"""

import bcrypt
from src.app.services.pin_hasher import PinHasher


class BcryptPinHasher(PinHasher):

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, pin: str) -> str:
        return bcrypt.hashpw(pin.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, pin: str, pin_hash: str) -> bool:
        try:
            return bcrypt.checkpw(pin.encode("utf-8"), pin_hash.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False
