"""SQLAlchemy implementation of ActorRepository"""

from typing import List, Optional, Sequence
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.actor_repository import ActorRepository
from src.domain.actor import ActorProfile, ActorRole, Merchant


class SqlAlchemyActorRepository(ActorRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_profile(self, actor_id: str) -> Optional[ActorProfile]:
        stmt = select(ActorProfile).where(ActorProfile.actor_id == actor_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_merchant(self, merchant_id: str) -> Optional[Merchant]:
        stmt = select(Merchant).where(Merchant.merchant_id == merchant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_active_by_identity_tags(
        self,
        identity_tags: Sequence[str],
        role: ActorRole,
        organization_id: Optional[str] = None,
    ) -> List[ActorProfile]:
        stmt = select(ActorProfile).where(
            ActorProfile.identity_tag.in_(list(identity_tags)),
            ActorProfile.is_active == True,  # noqa: E712
        )
        if organization_id is not None:
            stmt = stmt.where(ActorProfile.organization_id == organization_id)
        stmt = stmt.order_by(ActorProfile.actor_id)

        result = await self.session.execute(stmt)
        # roles is a CSV column; match the role exactly in Python
        return [profile for profile in result.scalars().all() if role in profile.role_list()]

    async def save_profile(self, profile: ActorProfile) -> ActorProfile:
        self.session.add(profile)
        await self.session.flush()
        return profile

    async def save_merchant(self, merchant: Merchant) -> Merchant:
        self.session.add(merchant)
        await self.session.flush()
        return merchant
