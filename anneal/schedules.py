"""Default cooling schedules and acceptance functions.

A cooling schedule maps the outer-iteration index to a temperature and an
acceptance function maps ``(cost_old, cost_new, temperature)`` to the
probability of taking a non-improving move. Both are plain callables, so any
function or lambda with the right signature can be passed to ``anneal.run``.
The factories here build the standard forms.
"""

from __future__ import annotations

import math

from .errors import InvalidConfigurationError
from .types import AcceptanceFunction, Cost, CoolingSchedule, _is_real


def geometric_schedule(alpha: float, t0: float = 1.0) -> CoolingSchedule:
    """Temperature ``t0 * alpha ** i`` at outer iteration ``i``.

    With the default ``t0`` the schedule starts at 1.0 and
    ``schedule(i) == alpha ** i``.
    """
    if not _is_real(alpha) or not 0.0 < alpha < 1.0:
        raise InvalidConfigurationError(
            f"alpha must be in (0, 1), got {alpha!r}"
        )
    if not _is_real(t0) or not t0 > 0.0:
        raise InvalidConfigurationError(f"t0 must be > 0, got {t0!r}")

    def schedule(outer_iter: int) -> float:
        return t0 * alpha**outer_iter

    return schedule


def metropolis_acceptance(scale: float = 1.0) -> AcceptanceFunction:
    """Canonical rule ``exp((cost_old - cost_new) / (temperature * scale))``.

    ``scale`` stretches the temperature to the magnitude of typical cost
    differences; with a schedule starting at 1.0 it is usually the size of
    an average uphill move. Zero or negative temperature gives 0.
    """
    if not _is_real(scale) or not scale > 0.0:
        raise InvalidConfigurationError(f"scale must be > 0, got {scale!r}")

    def accept_prob(
        cost_old: Cost, cost_new: Cost, temperature: float
    ) -> float:
        if temperature <= 0.0:
            return 0.0
        exponent = (float(cost_old) - float(cost_new)) / (temperature * scale)
        return math.exp(min(0.0, exponent))

    return accept_prob


def sanitize_probability(p: object) -> float:
    """Coerce an acceptance function's output to a usable probability.

    Anything that is not a real number, and NaN, counts as 0 (reject).
    """
    if not _is_real(p):
        return 0.0
    p = float(p)
    if math.isnan(p):
        return 0.0
    return p
