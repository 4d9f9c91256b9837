"""
Objective Runner for the CFMM Router.

Entry point that builds the routing objectives listed in the config and
evaluates each one:
1. Objective construction (by kind)
2. Box bounds and expiry
3. Conjugate value and gradient at the configured point

Uses Hydra for configuration management.
"""

import sys

import hydra
from omegaconf import DictConfig, OmegaConf
from loguru import logger

from cfmm_router.optimization import evaluate_objectives, objectives_from_config


def setup_logging(cfg: DictConfig):
    """Configure logging based on config."""
    logger.remove()
    logger.add(
        sys.stderr,
        format=cfg.logging.format,
        level=cfg.logging.level,
    )


def run(cfg: DictConfig) -> list:
    """
    Build and evaluate every configured objective.

    Args:
        cfg: Hydra configuration

    Returns:
        List of report dictionaries
    """
    logger.info("Step 1: Objective Construction")
    named_objectives = objectives_from_config(cfg.objectives)

    logger.info("Step 2: Evaluation")
    points = cfg.get("evaluate", {}).get("points") or {}
    if isinstance(points, DictConfig):
        points = OmegaConf.to_container(points, resolve=True)

    reports = evaluate_objectives(named_objectives, points=points)
    return [report.to_dict() for report in reports]


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig):
    """
    Objective runner entry point.

    Args:
        cfg: Hydra configuration
    """
    setup_logging(cfg)

    logger.info("=" * 60)
    logger.info(f"Starting CFMM Router objectives: {cfg.experiment.name}")
    logger.info("=" * 60)
    logger.debug(f"Config:\n{OmegaConf.to_yaml(cfg)}")

    results = run(cfg)

    logger.info("=" * 60)
    logger.info(f"Evaluated {len(results)} objectives")
    logger.info("=" * 60)

    return results


if __name__ == "__main__":
    main()
