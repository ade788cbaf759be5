"""
Planner configuration.

Defaults point the store at planner.json in the current working directory.
Environment variables override the defaults and explicit arguments override
the environment.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional
import logging
import os

logger = logging.getLogger(__name__)

STORE_FILENAME = "planner.json"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class PlannerConfig:
    """Settings for one planner invocation."""

    store_path: Path = field(default_factory=lambda: Path.cwd() / STORE_FILENAME)
    log_level: str = "WARNING"

    def to_dict(self) -> dict:
        result = asdict(self)
        result["store_path"] = str(self.store_path)
        return result


def load_config(store_path: Optional[Path] = None, verbose: bool = False) -> PlannerConfig:
    """
    Build the configuration for this invocation.

    Args:
        store_path: Explicit store file, wins over PLANNER_FILE.
        verbose: Force DEBUG logging, wins over PLANNER_LOG_LEVEL.

    Returns:
        PlannerConfig instance
    """
    config = PlannerConfig()

    if os.environ.get("PLANNER_FILE"):
        config.store_path = Path(os.environ["PLANNER_FILE"]).expanduser()

    level = os.environ.get("PLANNER_LOG_LEVEL")
    if level:
        if level.upper() in LOG_LEVELS:
            config.log_level = level.upper()
        else:
            logger.warning(f"Ignoring unknown PLANNER_LOG_LEVEL '{level}'")

    if store_path is not None:
        config.store_path = Path(store_path).expanduser()
    if verbose:
        config.log_level = "DEBUG"

    return config
