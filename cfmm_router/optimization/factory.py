"""
Objective construction by kind.

Lets callers (and the Hydra entry point) build objectives from plain
data such as a YAML list:

    objectives:
      - kind: swap
        name: usdc_to_eth
        i: 2
        j: 1
        delta: 1000.0
        n: 3
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from loguru import logger
from omegaconf import DictConfig, ListConfig, OmegaConf

from .errors import InvalidArgument
from .objective import BasketLiquidation, LinearNonnegative, Objective, Swap


OBJECTIVE_KINDS: Dict[str, Callable[..., Objective]] = {
    "linear_nonnegative": LinearNonnegative,
    "basket_liquidation": BasketLiquidation,
    "swap": Swap,
}


def normalize_kind(kind: str) -> str:
    """'Basket-Liquidation' -> 'basket_liquidation'."""
    return str(kind).strip().lower().replace("-", "_")


def _parse_tau(tau: Any) -> Any:
    # YAML spells infinity as .inf, people spell it as inf
    if isinstance(tau, str) and tau.strip().lower().lstrip("+.") in ("inf", "infinity"):
        return math.inf
    return tau


def construct(kind: str, **params) -> Objective:
    """
    Build an objective of the given kind.

    Args:
        kind: One of OBJECTIVE_KINDS (case-insensitive, '-' or '_')
        **params: Constructor arguments of that kind

    Returns:
        The objective

    Raises:
        InvalidArgument: Unknown kind or bad parameters
    """
    key = normalize_kind(kind)
    if key not in OBJECTIVE_KINDS:
        raise InvalidArgument(
            f"unknown objective kind {kind!r}, expected one of {sorted(OBJECTIVE_KINDS)}"
        )

    if "tau" in params:
        params["tau"] = _parse_tau(params["tau"])

    try:
        return OBJECTIVE_KINDS[key](**params)
    except TypeError as e:
        # Missing or unexpected keyword arguments
        raise InvalidArgument(f"bad parameters for {key}: {e}") from e


@dataclass
class ObjectiveSpec:
    """Declarative description of one objective."""

    kind: str
    params: Dict[str, Any] = field(default_factory=dict)
    name: Optional[str] = None

    @classmethod
    def from_mapping(cls, entry: Mapping[str, Any], index: int = 0) -> "ObjectiveSpec":
        """
        Split a flat `{kind, name, **params}` entry.

        Missing names default to '<kind>_<index>'.
        """
        if isinstance(entry, DictConfig):
            entry = OmegaConf.to_container(entry, resolve=True)
        entry = dict(entry)

        if "kind" not in entry:
            raise InvalidArgument(f"objective entry {index} has no 'kind'")

        kind = normalize_kind(entry.pop("kind"))
        name = entry.pop("name", None) or f"{kind}_{index}"
        return cls(kind=kind, params=entry, name=name)

    def build(self) -> Objective:
        return construct(self.kind, **dict(self.params))


def objectives_from_config(cfg: Iterable[Any]) -> List[Tuple[str, Objective]]:
    """
    Build every objective listed in `cfg`.

    Args:
        cfg: ListConfig (or plain list) of objective entries

    Returns:
        List of (name, objective) pairs in config order
    """
    if isinstance(cfg, ListConfig):
        cfg = OmegaConf.to_container(cfg, resolve=True)

    named = []
    for index, entry in enumerate(cfg):
        spec = ObjectiveSpec.from_mapping(entry, index=index)
        try:
            objective = spec.build()
        except InvalidArgument as e:
            logger.error(f"Failed to build objective '{spec.name}': {e}")
            raise
        named.append((spec.name, objective))

    logger.info(f"Built {len(named)} objectives")
    return named
