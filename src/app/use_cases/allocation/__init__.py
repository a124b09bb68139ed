"""Allocation, recall and cohort grant use cases"""
from .fund_pool import FundPool
from .allocate_points import AllocatePoints
from .recall_points import RecallPoints
from .grant_by_cohort import GrantByCohort
from .dtos import (
    FundPoolCommandDTO,
    AllocateCommandDTO,
    GrantByCohortCommandDTO,
    GrantFailureDTO,
    CohortGrantResultDTO,
)

__all__ = [
    "FundPool",
    "AllocatePoints",
    "RecallPoints",
    "GrantByCohort",
    "FundPoolCommandDTO",
    "AllocateCommandDTO",
    "GrantByCohortCommandDTO",
    "GrantFailureDTO",
    "CohortGrantResultDTO",
]
