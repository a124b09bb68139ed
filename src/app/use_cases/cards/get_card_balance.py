"""Query a point card's balance by card id or printed card number"""

from libs.result import Result, Return
from src.app.errors import LedgerError, NotFound
from src.app.repositories.point_card_repository import PointCardRepository
from src.domain.base import utc_now
from .dtos import CardBalanceDTO


class GetCardBalance:

    def __init__(self, card_repo: PointCardRepository):
        self.card_repo = card_repo

    async def execute(self, card_id_or_number: str) -> Result[CardBalanceDTO]:
        try:
            card = await self.card_repo.get_by_id(card_id_or_number)
            if card is None:
                card = await self.card_repo.get_by_card_number(card_id_or_number)
            if card is None:
                raise NotFound(f"point card {card_id_or_number} not found")
            return Return.ok(CardBalanceDTO.from_entity(card, utc_now()))
        except LedgerError as e:
            return Return.err(e.to_error())
