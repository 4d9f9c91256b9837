"""
Objective evaluation reports.

Evaluates objectives at a point (by default the lower corner of their box,
which is feasible for every objective in this package) and summarises the
result for logging.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from .objective import Objective


@dataclass
class ObjectiveReport:
    """Snapshot of one objective evaluated at one point."""

    name: str
    kind: str
    n_tokens: int
    lower_limit: np.ndarray
    upper_limit: np.ndarray
    time_to_expiry: float
    point: np.ndarray
    value: float
    gradient: np.ndarray

    @property
    def feasible(self) -> bool:
        return math.isfinite(self.value)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "kind": self.kind,
            "n_tokens": self.n_tokens,
            "lower_limit": self.lower_limit.tolist(),
            "upper_limit": self.upper_limit.tolist(),
            "time_to_expiry": float(self.time_to_expiry),
            "point": self.point.tolist(),
            "value": float(self.value),
            "gradient": self.gradient.tolist(),
            "feasible": self.feasible,
        }


def evaluate_objective(
    objective: Objective,
    v: Optional[Sequence[float]] = None,
    name: Optional[str] = None,
) -> ObjectiveReport:
    """
    Evaluate f and grad of `objective` at `v`.

    Args:
        objective: Objective to evaluate
        v: Evaluation point (default: objective.lower_limit())
        name: Label for the report (default: class name)

    Returns:
        ObjectiveReport
    """
    kind = type(objective).__name__
    point = objective.lower_limit() if v is None else np.asarray(v, dtype=float)

    value = objective.f(point)
    gradient = objective.grad(point)

    return ObjectiveReport(
        name=name or kind,
        kind=kind,
        n_tokens=objective.n_tokens,
        lower_limit=objective.lower_limit(),
        upper_limit=objective.upper_limit(),
        time_to_expiry=objective.time_to_expiry(),
        point=point,
        value=value,
        gradient=gradient,
    )


def evaluate_objectives(
    named_objectives: Iterable[Tuple[str, Objective]],
    points: Optional[Mapping[str, Sequence[float]]] = None,
) -> List[ObjectiveReport]:
    """
    Evaluate several objectives and log one line per objective.

    Args:
        named_objectives: (name, objective) pairs
        points: Optional evaluation point per name; objectives without one
            are evaluated at their lower limit

    Returns:
        Reports in input order
    """
    points = points or {}
    reports = []

    for name, objective in named_objectives:
        report = evaluate_objective(objective, points.get(name), name=name)
        reports.append(report)

        status = "feasible" if report.feasible else "infeasible"
        logger.info(
            f"{name} ({report.kind}, n={report.n_tokens}): "
            f"f = {report.value:.6g} [{status}], tau = {report.time_to_expiry}"
        )

    n_infeasible = sum(not r.feasible for r in reports)
    if n_infeasible:
        logger.warning(f"{n_infeasible}/{len(reports)} objectives infeasible at their points")

    return reports
