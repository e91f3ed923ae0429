"""Parameter, result and capability types for the annealing engine."""

from __future__ import annotations

import math
import numbers
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Callable, Generic, Protocol, TypeVar, Union

from .errors import InvalidConfigurationError

Cost = Union[int, float]

S = TypeVar("S", bound="Solution")

# (cost_old, cost_new, temperature) -> probability in [0, 1]
AcceptanceFunction = Callable[[Cost, Cost, float], float]
# outer iteration index -> temperature
CoolingSchedule = Callable[[int], float]


class Solution(Protocol):
    """A candidate answer. The engine never looks past these two methods.

    Preconditions (not checked): costs are totally ordered and convertible
    to float, and ``perturb`` terminates.
    """

    def cost(self) -> Cost:
        """Cost of this solution, lower is better. Should be cached."""
        ...

    def perturb(self) -> Solution:
        """A single-move neighbor. Must not mutate ``self`` or shared data."""
        ...


@dataclass
class AnnealParams:
    max_temps: int
    iters_per_temp: int
    cost_reduction_tol: float = 0.0
    # INFO records on the "anneal.engine" logger, shown only if the caller
    # has configured logging at INFO or lower
    verbose: bool = False
    alpha: float = 0.9  # only read by the default geometric schedule
    seed: int = 0  # only read when no random source is injected

    def validate(self) -> None:
        """Raise InvalidConfigurationError if the budgets are unusable."""
        for name in ("max_temps", "iters_per_temp"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfigurationError(
                    f"{name} must be an integer, got {value!r}"
                )
            if value < 0:
                raise InvalidConfigurationError(
                    f"{name} must be >= 0, got {value}"
                )
        tol = self.cost_reduction_tol
        if not _is_real(tol) or math.isnan(tol) or tol < 0:
            raise InvalidConfigurationError(
                f"cost_reduction_tol must be a number >= 0, got {tol!r}"
            )
        if not _is_real(self.alpha):
            raise InvalidConfigurationError(
                f"alpha must be a number, got {self.alpha!r}"
            )
        if isinstance(self.seed, bool) or not isinstance(self.seed, int):
            raise InvalidConfigurationError(
                f"seed must be an integer, got {self.seed!r}"
            )
        if not isinstance(self.verbose, bool):
            raise InvalidConfigurationError(
                f"verbose must be true or false, got {self.verbose!r}"
            )

    @property
    def total_steps(self) -> int:
        return self.max_temps * self.iters_per_temp

    @staticmethod
    def from_dict(d: dict) -> AnnealParams:
        if not isinstance(d, dict):
            raise InvalidConfigurationError(
                f"parameters must be a mapping, got {type(d).__name__}"
            )
        known = {f.name for f in fields(AnnealParams)}
        unknown = sorted(str(k) for k in d if k not in known)
        if unknown:
            raise InvalidConfigurationError(
                f"unknown parameter(s): {', '.join(unknown)}"
            )
        missing = [k for k in ("max_temps", "iters_per_temp") if k not in d]
        if missing:
            raise InvalidConfigurationError(
                f"missing parameter(s): {', '.join(missing)}"
            )
        params = AnnealParams(**d)
        params.validate()
        return params

    def to_dict(self) -> dict:
        return asdict(self)


# Convenience defaults; not necessarily right for a given problem. Shared,
# so derive variants with dataclasses.replace(DEFAULT_PARAMS, ...) rather
# than assigning to its fields.
DEFAULT_PARAMS = AnnealParams(
    max_temps=100,
    iters_per_temp=500,
    cost_reduction_tol=0.0001,
    verbose=False,
    alpha=0.9,
)


def _is_real(value: object) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


class AnnealStatus(Enum):
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class AnnealResult(Generic[S]):
    best: S
    final_cost: Cost
    function_evals: int
    iterations: int
    status: AnnealStatus

    @property
    def converged(self) -> bool:
        return self.status is AnnealStatus.CONVERGED

    def to_dict(self) -> dict:
        """Summary without the solution itself, which is caller-defined."""
        return {
            "final_cost": self.final_cost,
            "function_evals": self.function_evals,
            "iterations": self.iterations,
            "status": self.status.value,
        }
