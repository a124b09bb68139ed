"""Identity provider backed by the mirrored actor_profiles table"""

import logging
from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.identity_provider import IdentityProvider
from src.domain.actor import ActorProfile, Identity

logger = logging.getLogger(__name__)


class SqlAlchemyIdentityProvider(IdentityProvider):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def resolve(self, actor_id: str) -> Optional[Identity]:
        stmt = select(ActorProfile).where(ActorProfile.actor_id == actor_id)
        result = await self.session.execute(stmt)
        profile = result.scalar_one_or_none()
        if profile is None or not profile.is_active:
            logger.info(f"Identity {actor_id} is unknown or inactive")
            return None
        return profile.to_identity()
