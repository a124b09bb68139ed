import pytest
from unittest.mock import AsyncMock, MagicMock

from src.domain.actor import ActorProfile, ActorRole, Identity


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def make_identity():
    def _make(actor_id: str, *roles: ActorRole, organization_id: str = "org_1", identity_tag=None) -> Identity:
        return Identity(
            actor_id=actor_id,
            roles=list(roles),
            identity_tag=identity_tag,
            organization_id=organization_id,
        )
    return _make


@pytest.fixture
def make_profile():
    def _make(actor_id: str, *roles: ActorRole, organization_id: str = "org_1", identity_tag=None, is_active=True):
        return ActorProfile(
            actor_id=actor_id,
            roles=",".join(role.value for role in roles),
            identity_tag=identity_tag,
            organization_id=organization_id,
            is_active=is_active,
        )
    return _make
