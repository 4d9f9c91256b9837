"""
Optimization module for the CFMM Router.

Contains the routing objectives, their construction by kind, and
evaluation reports.
"""

from .errors import InvalidArgument, LengthMismatch, ObjectiveError
from .objective import (
    PRICE_MARGIN,
    SQRT_EPS,
    BasketLiquidation,
    LinearNonnegative,
    Objective,
    Swap,
)
from .factory import ObjectiveSpec, construct, objectives_from_config
from .report import ObjectiveReport, evaluate_objective, evaluate_objectives

__all__ = [
    "PRICE_MARGIN",
    "SQRT_EPS",
    "BasketLiquidation",
    "InvalidArgument",
    "LengthMismatch",
    "LinearNonnegative",
    "Objective",
    "ObjectiveError",
    "ObjectiveReport",
    "ObjectiveSpec",
    "Swap",
    "construct",
    "evaluate_objective",
    "evaluate_objectives",
    "objectives_from_config",
]
