"""
Logging setup for the planner and the console demo
"""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

# Short console lines so log output does not break up the printed field
DEMO_FORMAT = "<level>{level: <7}</level> <cyan>{name}</cyan> | {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def only_fieldroute(record) -> bool:
    """Keep records emitted from fieldroute modules."""
    return (record["name"] or "").split(".")[0] == "fieldroute"


def setup_logger(level: str = "INFO", log_dir: Optional[Union[str, Path]] = None,
                 planner_only: bool = True):
    """
    Configure loguru sinks.

    Args:
        level: minimum level for every sink
        log_dir: directory for one log file per planning day, None for console only
        planner_only: drop records from other libraries
    """
    log_filter = only_fieldroute if planner_only else None

    logger.remove()
    logger.add(sys.stderr, format=DEMO_FORMAT, level=level, filter=log_filter, colorize=True)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / "fieldroute_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="7 days",
            level=level,
            filter=log_filter,
            format=FILE_FORMAT,
        )

    return logger
