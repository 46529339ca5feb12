# Export all scholarship models for easy imports
from .base import Base
from .cost_rule import SchCostRule
from .campus import SchCampus

__all__ = [
    "Base",
    "SchCostRule",
    "SchCampus",
]
