"""
Routing Objectives for the CFMM Router.

Each objective describes what a trader wants out of a route as the convex
conjugate of a utility function U over the net trade vector Ψ:

    f(ν) = sup_Ψ ( U(Ψ) - νᵀΨ )

together with the box [lower_limit, upper_limit] the solver keeps ν inside.

Infeasible arguments are never an error. f returns +inf and grad fills its
output with +inf, which the solver reads as "step back".

Token indices are 1-based, matching the router's token numbering.
"""

import math
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import numpy as np
from loguru import logger

from .errors import InvalidArgument, LengthMismatch

# Margin added to the price vector so that c <= ν still holds after rounding
PRICE_MARGIN: float = 1e-8

# sqrt(machine epsilon) for float64, the default storage dtype
SQRT_EPS: float = float(np.sqrt(np.finfo(np.float64).eps))


def _invalid(message: str) -> InvalidArgument:
    logger.warning(f"Invalid objective parameters: {message}")
    return InvalidArgument(message)


def _as_float_vector(values, name: str) -> np.ndarray:
    """Copy `values` into a read-only 1-D float array (ints become float64)."""
    try:
        arr = np.array(values)
        if not np.issubdtype(arr.dtype, np.floating):
            arr = arr.astype(np.float64)
    except (TypeError, ValueError) as e:
        raise _invalid(f"{name} must be a numeric vector: {e}") from e

    if arr.ndim != 1:
        raise _invalid(f"{name} must be one-dimensional, got shape {arr.shape}")

    arr.setflags(write=False)
    return arr


def _as_expiry(tau) -> float:
    try:
        tau = float(tau)
    except (TypeError, ValueError) as e:
        raise _invalid(f"tau must be a real number: {e}") from e

    # NaN fails this comparison too
    if not tau > 0:
        raise _invalid(f"tau must be positive, got {tau}")
    return tau


def _is_index(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


class Objective(ABC):
    """
    Conjugate-utility objective evaluated by the routing solver.

    Subclasses implement f, grad and the box bounds. Instances are
    immutable, so f and the bounds are safe to call from many threads.
    grad is too, as long as concurrent calls do not share an `out` buffer.
    """

    @property
    @abstractmethod
    def n_tokens(self) -> int:
        """Number of tokens (length of every vector argument and result)."""

    @abstractmethod
    def f(self, v: Sequence[float]) -> float:
        """Evaluate the conjugate of the utility function at `v`."""

    @abstractmethod
    def grad(self, v: Sequence[float], out: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Gradient of f at `v`.

        Args:
            v: Point with one entry per token
            out: Optional buffer of length n_tokens. It is fully overwritten
                and never read.

        Returns:
            `out` if given, otherwise a new array
        """

    @abstractmethod
    def lower_limit(self) -> np.ndarray:
        """Componentwise lower bound on the argument of f."""

    @abstractmethod
    def upper_limit(self) -> np.ndarray:
        """Componentwise upper bound on the argument of f."""

    def time_to_expiry(self) -> float:
        """Seconds until the objective expires; inf if it never does."""
        return math.inf

    def _check_point(self, v) -> np.ndarray:
        v = np.asarray(v)
        if v.ndim != 1:
            raise LengthMismatch(self.n_tokens, None)
        if v.shape[0] != self.n_tokens:
            raise LengthMismatch(self.n_tokens, v.shape[0])
        return v

    def _output_buffer(self, out: Optional[np.ndarray], dtype) -> np.ndarray:
        if out is None:
            return np.empty(self.n_tokens, dtype=dtype)
        if not isinstance(out, np.ndarray):
            raise TypeError(f"out must be a numpy array, got {type(out).__name__}")
        if out.ndim != 1:
            raise LengthMismatch(self.n_tokens, None, what="out")
        if out.shape[0] != self.n_tokens:
            raise LengthMismatch(self.n_tokens, out.shape[0], what="out")
        return out


class LinearNonnegative(Objective):
    """
    Linear objective with a nonnegativity constraint:

        U(Ψ) = cᵀΨ - I(Ψ >= 0)

    where c is a strictly positive price vector. The conjugate is the
    indicator of {ν : c <= ν}, so f is 0 on that set and +inf elsewhere.
    """

    def __init__(self, c: Sequence[float], tau: float = math.inf):
        """
        Args:
            c: Price per token, every entry strictly positive
            tau: Seconds until expiry (default: never)

        Raises:
            InvalidArgument: If c is empty or has a non-positive entry,
                or tau <= 0
        """
        c = _as_float_vector(c, "c")
        if c.size == 0:
            raise _invalid("c must contain at least one price")
        if not np.all(c > 0):
            raise _invalid("all elements of c must be strictly positive")

        self._c = c
        self._tau = _as_expiry(tau)

        logger.debug(f"Created LinearNonnegative: n={self.n_tokens}, tau={self._tau}")

    @property
    def c(self) -> np.ndarray:
        return self._c

    @property
    def tau(self) -> float:
        return self._tau

    @property
    def n_tokens(self) -> int:
        return self._c.shape[0]

    def _feasible(self, v: np.ndarray) -> bool:
        return bool(np.all(self._c <= v))

    def f(self, v: Sequence[float]) -> float:
        v = self._check_point(v)
        if self._feasible(v):
            return 0.0
        return math.inf

    def grad(self, v: Sequence[float], out: Optional[np.ndarray] = None) -> np.ndarray:
        v = self._check_point(v)
        g = self._output_buffer(out, self._c.dtype)

        # +inf everywhere is the solver's infeasibility signal, not a subgradient
        g.fill(0.0 if self._feasible(v) else np.inf)
        return g

    def lower_limit(self) -> np.ndarray:
        # At least float64, otherwise the margin rounds away (float32: c + 1e-8 == c)
        dtype = np.result_type(self._c.dtype, np.float64)
        return self._c.astype(dtype) + PRICE_MARGIN

    def upper_limit(self) -> np.ndarray:
        return np.full(self.n_tokens, np.inf, dtype=self._c.dtype)

    def time_to_expiry(self) -> float:
        return self._tau

    def __repr__(self) -> str:
        return f"LinearNonnegative(c={self._c.tolist()}, tau={self._tau})"


class BasketLiquidation(Objective):
    """
    Liquidate a basket of tokens into a single output token i:

        U(Ψ) = Ψ_i - I(Ψ_{-i} + Δin_{-i} = 0, Ψ_i >= 0)

    Every non-output token k is sold in full (Δin[k] of it) and the
    proceeds land in token i. The conjugate is

        f(ν) = Σ_{k≠i} Δin[k]·ν[k]    if ν[i] >= 1
               +inf                   otherwise
    """

    def __init__(self, i: int, delta_in: Sequence[float], tau: float = math.inf):
        """
        Args:
            i: 1-based index of the output token
            delta_in: Amount of each token to liquidate
            tau: Seconds until expiry (default: never)

        Raises:
            InvalidArgument: If i is not an index into delta_in, or tau <= 0
        """
        delta_in = _as_float_vector(delta_in, "delta_in")
        if not _is_index(i) or not 1 <= i <= delta_in.shape[0]:
            raise _invalid(
                f"invalid output index i={i!r} for a basket of {delta_in.shape[0]} tokens"
            )

        self._i = int(i)
        self._delta_in = delta_in
        self._tau = _as_expiry(tau)

        # Positions that contribute to f (everything but the output token)
        others = np.ones(self.n_tokens, dtype=bool)
        others[self._i - 1] = False
        others.setflags(write=False)
        self._others = others

        logger.debug(
            f"Created BasketLiquidation: i={self._i}, n={self.n_tokens}, tau={self._tau}"
        )

    @property
    def i(self) -> int:
        return self._i

    @property
    def delta_in(self) -> np.ndarray:
        return self._delta_in

    @property
    def tau(self) -> float:
        return self._tau

    @property
    def n_tokens(self) -> int:
        return self._delta_in.shape[0]

    def f(self, v: Sequence[float]) -> float:
        v = self._check_point(v)
        if v[self._i - 1] >= 1.0:
            return float(np.dot(self._delta_in[self._others], v[self._others]))
        return math.inf

    def grad(self, v: Sequence[float], out: Optional[np.ndarray] = None) -> np.ndarray:
        v = self._check_point(v)
        g = self._output_buffer(out, self._delta_in.dtype)

        if v[self._i - 1] >= 1.0:
            g[:] = self._delta_in
            g[self._i - 1] = 0.0
        else:
            g.fill(np.inf)
        return g

    def lower_limit(self) -> np.ndarray:
        dtype = self._delta_in.dtype
        sqrt_eps = np.sqrt(np.finfo(dtype).eps)

        ret = np.full(self.n_tokens, sqrt_eps, dtype=dtype)
        ret[self._i - 1] = 1 + sqrt_eps
        return ret

    def upper_limit(self) -> np.ndarray:
        return np.full(self.n_tokens, np.inf, dtype=self._delta_in.dtype)

    def time_to_expiry(self) -> float:
        return self._tau

    def __repr__(self) -> str:
        return (
            f"BasketLiquidation(i={self._i}, delta_in={self._delta_in.tolist()}, "
            f"tau={self._tau})"
        )


def Swap(i: int, j: int, delta: float, n: int, tau: float = math.inf) -> BasketLiquidation:
    """
    Swap `delta` of token j for as much of token i as possible, over n tokens.

    Shorthand for BasketLiquidation(i, Δin, tau) where Δin is zero except
    Δin[j] = delta. Only i and tau are validated by BasketLiquidation;
    j merely has to address an entry of the length-n vector.

    Args:
        i: 1-based output token
        j: 1-based input token
        delta: Amount of token j to sell
        n: Number of tokens
        tau: Seconds until expiry (default: never)

    Returns:
        The equivalent BasketLiquidation
    """
    if not _is_index(n) or n < 0:
        raise _invalid(f"n must be a non-negative integer, got {n!r}")
    if not _is_index(j) or not 1 <= j <= n:
        raise _invalid(f"invalid input index j={j!r} for {n} tokens")

    amount = _as_float_vector([delta], "delta")

    delta_in = np.zeros(n, dtype=amount.dtype)
    delta_in[j - 1] = amount[0]
    return BasketLiquidation(i, delta_in, tau)
