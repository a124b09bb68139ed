"""Point card (bearer instrument) use cases"""
from .issue_card import IssueCard
from .top_up_card import TopUpCard
from .spend_card import SpendCard
from .get_card_balance import GetCardBalance
from .dtos import (
    IssueCardCommandDTO,
    TopUpCardCommandDTO,
    SpendCardCommandDTO,
    CardBalanceDTO,
)

__all__ = [
    "IssueCard",
    "TopUpCard",
    "SpendCard",
    "GetCardBalance",
    "IssueCardCommandDTO",
    "TopUpCardCommandDTO",
    "SpendCardCommandDTO",
    "CardBalanceDTO",
]
