"""Generic simulated annealing over user-defined solution types."""

from .engine import run
from .errors import AnnealError, InvalidConfigurationError
from .prng import PCG32, RandomSource, StdlibRandomSource
from .schedules import geometric_schedule, metropolis_acceptance
from .types import (
    DEFAULT_PARAMS,
    AnnealParams,
    AnnealResult,
    AnnealStatus,
    Solution,
)

__all__ = [
    "DEFAULT_PARAMS",
    "PCG32",
    "AnnealError",
    "AnnealParams",
    "AnnealResult",
    "AnnealStatus",
    "InvalidConfigurationError",
    "RandomSource",
    "Solution",
    "StdlibRandomSource",
    "geometric_schedule",
    "metropolis_acceptance",
    "run",
]
