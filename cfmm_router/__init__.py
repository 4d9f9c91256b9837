"""
cfmm-router: objectives for routing trades through CFMM networks.

Contains the conjugate-utility objectives the routing solver evaluates.
"""

from .optimization import (
    BasketLiquidation,
    InvalidArgument,
    LengthMismatch,
    LinearNonnegative,
    Objective,
    Swap,
)

__version__ = "0.1.0"

__all__ = [
    "BasketLiquidation",
    "InvalidArgument",
    "LengthMismatch",
    "LinearNonnegative",
    "Objective",
    "Swap",
]
