"""Actor Directory Repository Interface

Read access to the mirrored identity facts (profiles and merchants).
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from src.domain.actor import ActorProfile, ActorRole, Merchant


class ActorRepository(ABC):
    """Repository interface for ActorProfile and Merchant lookups"""

    @abstractmethod
    async def get_profile(self, actor_id: str) -> Optional[ActorProfile]:
        pass

    @abstractmethod
    async def get_merchant(self, merchant_id: str) -> Optional[Merchant]:
        pass

    @abstractmethod
    async def list_active_by_identity_tags(
        self,
        identity_tags: Sequence[str],
        role: ActorRole,
        organization_id: Optional[str] = None,
    ) -> List[ActorProfile]:
        """
        Active actors holding ``role`` whose identity tag is in ``identity_tags``

        Args:
            identity_tags: Cohort tags to match
            role: Role every returned actor must hold
            organization_id: Restrict to one organization when given

        Returns:
            Matching profiles ordered by actor_id
        """
        pass

    @abstractmethod
    async def save_profile(self, profile: ActorProfile) -> ActorProfile:
        pass

    @abstractmethod
    async def save_merchant(self, merchant: Merchant) -> Merchant:
        pass
