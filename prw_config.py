"""
prw_config.py

Central configuration for the PRW planner.

Sources, in increasing priority:
    1. Defaults from common/constants.py
    2. YAML config file (load_config)
    3. PRW_* environment variables (apply_env_overrides)
    4. Explicit overrides (command-line flags)

Usage:
    from prw_config import get_config

    config = get_config()
    planner = config.build_planner()

Config file example:
    heuristic: FAST_FORWARD
    max_steps: 1000
    seed: 42
    max_restarts: 100
"""

import logging
import os
import threading
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from common.constants import (
    DEFAULT_HEURISTIC,
    DEFAULT_HEURISTIC_WEIGHT,
    HEURISTIC_CACHE_MAXSIZE,
    MAX_STEPS,
)
from component_15_logging_config import get_logger
from component_4_heuristics import HeuristicName
from component_5_random_walk_planner import RandomWalkPlanner, SearchBudget
from prw_exceptions import InvalidConfigError, wrap_exception

logger = get_logger(__name__)

ENV_PREFIX = "PRW_"


@dataclass(frozen=True)
class PlannerConfig:
    """
    Planner settings.

    Attributes:
        heuristic: HeuristicName member name
        heuristic_weight: Weight of the heuristic (stored, not used by the walk)
        max_steps: Stagnation limit before a plateau restart
        seed: PRNG seed (None = nondeterministic)
        max_iterations: Iteration budget (None = unbounded)
        max_restarts: Restart budget (None = unbounded)
        time_limit: Wall-clock budget in seconds (None = unbounded)
        heuristic_cache_size: LRU size for heuristic memoization (0 = off)
        log_level: Console log level name
    """

    heuristic: str = DEFAULT_HEURISTIC
    heuristic_weight: float = DEFAULT_HEURISTIC_WEIGHT
    max_steps: int = MAX_STEPS
    seed: Optional[int] = None
    max_iterations: Optional[int] = None
    max_restarts: Optional[int] = None
    time_limit: Optional[float] = None
    heuristic_cache_size: int = HEURISTIC_CACHE_MAXSIZE
    log_level: str = "INFO"

    def __post_init__(self):
        object.__setattr__(self, "heuristic", HeuristicName.parse(self.heuristic).value)

        if self.heuristic_weight <= 0:
            raise InvalidConfigError(
                f"heuristic_weight must be > 0, got {self.heuristic_weight}",
                parameter="heuristic_weight",
            )
        if self.max_steps < 0:
            raise InvalidConfigError(
                f"max_steps must be >= 0, got {self.max_steps}", parameter="max_steps"
            )
        if self.heuristic_cache_size < 0:
            raise InvalidConfigError(
                f"heuristic_cache_size must be >= 0, got {self.heuristic_cache_size}",
                parameter="heuristic_cache_size",
            )
        for name in ("max_iterations", "max_restarts", "time_limit"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise InvalidConfigError(
                    f"{name} must be >= 0, got {value}", parameter=name
                )

        level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise InvalidConfigError(
                f"Unknown log level {self.log_level!r}", parameter="log_level"
            )
        object.__setattr__(self, "log_level", level)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PlannerConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidConfigError(
                f"Unknown config keys: {', '.join(sorted(unknown))}",
                context={"known": sorted(known)},
            )
        converted = {key: _convert(key, value) for key, value in data.items()}
        return cls(**converted)

    def with_overrides(self, **overrides: Any) -> "PlannerConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: _convert(k, v) for k, v in overrides.items() if v is not None}
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise InvalidConfigError(
                f"Unknown config keys: {', '.join(sorted(unknown))}"
            )
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def build_budget(self) -> SearchBudget:
        """SearchBudget from the configured limits."""
        return SearchBudget(
            max_iterations=self.max_iterations,
            max_restarts=self.max_restarts,
            time_limit=self.time_limit,
        )

    def build_planner(self, cancel_event: Optional[Any] = None) -> RandomWalkPlanner:
        """Create a RandomWalkPlanner configured from these settings."""
        return RandomWalkPlanner(
            heuristic=self.heuristic,
            heuristic_weight=self.heuristic_weight,
            max_steps=self.max_steps,
            seed=self.seed,
            budget=self.build_budget(),
            cancel_event=cancel_event,
            heuristic_cache_size=self.heuristic_cache_size,
        )


_INT_KEYS = {"max_steps", "seed", "max_iterations", "max_restarts", "heuristic_cache_size"}
_FLOAT_KEYS = {"heuristic_weight", "time_limit"}
_OPTIONAL_KEYS = {"seed", "max_iterations", "max_restarts", "time_limit"}


def _convert(key: str, value: Any) -> Any:
    """Coerce strings from env/YAML into the field's type."""
    if value is None:
        return None
    if key in _OPTIONAL_KEYS and isinstance(value, str):
        if value.strip().lower() in ("", "none", "null"):
            return None
    try:
        if key in _INT_KEYS:
            if isinstance(value, bool):
                raise ValueError("boolean is not an integer")
            return int(value)
        if key in _FLOAT_KEYS:
            return float(value)
    except (TypeError, ValueError) as e:
        raise wrap_exception(
            e, InvalidConfigError, f"Invalid value for {key}", value=value
        ) from e
    return value


def load_config(path: Union[str, Path]) -> PlannerConfig:
    """
    Load a PlannerConfig from a YAML file.

    Raises:
        InvalidConfigError: If the file cannot be read or holds invalid values
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise wrap_exception(e, InvalidConfigError, "Invalid YAML", path=str(path)) from e
    except OSError as e:
        raise wrap_exception(
            e, InvalidConfigError, "Cannot read config file", path=str(path)
        ) from e

    if not isinstance(data, dict):
        raise InvalidConfigError("Config file must hold a mapping", context={"path": str(path)})

    config = PlannerConfig.from_mapping(data)
    logger.info("Config loaded", extra={"path": str(path)})
    return config


def apply_env_overrides(
    config: PlannerConfig, environ: Optional[Mapping[str, str]] = None
) -> PlannerConfig:
    """Apply PRW_<FIELD> environment variables (e.g. PRW_MAX_STEPS=500)."""
    environ = os.environ if environ is None else environ
    overrides = {}
    for f in fields(config):
        env_key = ENV_PREFIX + f.name.upper()
        if env_key in environ:
            overrides[f.name] = _convert(f.name, environ[env_key])

    if overrides:
        logger.debug("Environment overrides", extra=overrides)
        config = replace(config, **overrides)
    return config


# ============================================================================
# Process-wide configuration
# ============================================================================

_config: Optional[PlannerConfig] = None
_config_lock = threading.Lock()


def get_config() -> PlannerConfig:
    """Return the process-wide config (defaults plus environment on first use)."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = apply_env_overrides(PlannerConfig())
    return _config


def set_config(config: PlannerConfig) -> None:
    global _config
    with _config_lock:
        _config = config


def reset_config() -> None:
    """Forget the process-wide config; the next get_config() rebuilds it."""
    global _config
    with _config_lock:
        _config = None
