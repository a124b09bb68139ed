"""Point-of-sale use cases"""
from .sell_points import SellPoints
from .dtos import SellCommandDTO

__all__ = [
    "SellPoints",
    "SellCommandDTO",
]
