"""
Planner configuration.

PlannerConfig is a pydantic model; load_config reads it from a YAML file.
"""

from pathlib import Path
from typing import Optional, Union

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import DEFAULT_ITERATION_FACTOR

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class PlannerConfig(BaseModel):
    """Coverage planner settings"""
    iteration_factor: int = Field(DEFAULT_ITERATION_FACTOR,
                                  description="Loop bound = iteration_factor x segment count")
    max_search_expansions: Optional[int] = Field(None, description="Node expansion cap per A* search")
    time_budget_s: Optional[float] = Field(None, description="Wall-clock budget for one planning call")
    log_level: str = Field("INFO", description="loguru level used by the console demo")

    @field_validator('iteration_factor')
    @classmethod
    def validate_iteration_factor(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"iteration_factor must be positive: {v}")
        return v

    @field_validator('max_search_expansions')
    @classmethod
    def validate_max_search_expansions(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError(f"max_search_expansions must be positive: {v}")
        return v

    @field_validator('time_budget_s')
    @classmethod
    def validate_time_budget(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError(f"time_budget_s must be positive: {v}")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {v}")
        return level


def load_config(config_path: Union[str, Path]) -> PlannerConfig:
    """
    Load PlannerConfig from a YAML file.

    An empty file gives the defaults.

    Raises:
        FileNotFoundError: the file does not exist
        yaml.YAMLError: the file is not valid YAML
        ValidationError: a value is out of range
    """
    config_path = Path(config_path)
    if not config_path.exists():
        error_msg = f"config file not found: {config_path}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"invalid YAML in {config_path}: {e}")
        raise

    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        error_msg = f"config root must be a mapping, got {type(raw_config).__name__}"
        logger.error(error_msg)
        raise ValueError(error_msg)

    # Accept either a flat mapping or one nested under "planner"
    section = raw_config.get("planner", raw_config)

    try:
        config = PlannerConfig(**section)
    except ValidationError as e:
        logger.error(f"config validation failed for {config_path}:\n{e}")
        raise

    logger.info(f"loaded planner config from {config_path}")
    return config
