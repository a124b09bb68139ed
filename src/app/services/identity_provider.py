"""Identity Provider Interface

Resolves the authenticated actor id into a scoped identity. Roles always come
from the provider, never from the caller.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.actor import Identity


class IdentityProvider(ABC):

    @abstractmethod
    async def resolve(self, actor_id: str) -> Optional[Identity]:
        """
        Resolve an actor id

        Args:
            actor_id: Authenticated actor id

        Returns:
            Identity if the actor is known and active, None otherwise
        """
        pass
