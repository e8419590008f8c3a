"""Supply calculation module."""

from .exclusion import ESCROW_ACCOUNTS, ExclusionSet
from .supply import SupplyCalculator

__all__ = ["ESCROW_ACCOUNTS", "ExclusionSet", "SupplyCalculator"]
