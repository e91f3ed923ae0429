"""Simulated annealing control loop.

``run`` drives a single, uninterrupted annealing run over any object that
satisfies the ``Solution`` protocol (``cost()`` and ``perturb()``). The loop
is a nested state machine:

  * **Outer iterations** are temperature stages. Stage ``i`` runs at
    ``cooling_schedule(i)``.
  * **Inner iterations** perturb the current solution once, evaluate the
    candidate, and accept or reject it. Improvements are always taken.
    Non-improving moves are taken when the acceptance probability beats a
    uniform draw from the random source.

A run ends in one of two terminal states:

  * **Converged**: an accepted move brought the cost ratio
    ``cost / initial_cost`` under ``cost_reduction_tol``. The accepted
    solution is returned immediately.
  * **Exhausted**: every stage ran to completion. Whichever of the current
    and best-seen solutions is cheaper is returned (ties go to current).

Randomness is consumed only for non-improving moves, one draw each, so runs
with the same seed, schedule and acceptance function are reproducible.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional

from .errors import InvalidConfigurationError
from .prng import PCG32, RandomSource
from .schedules import (
    geometric_schedule,
    metropolis_acceptance,
    sanitize_probability,
)
from .types import (
    AcceptanceFunction,
    AnnealParams,
    AnnealResult,
    AnnealStatus,
    CoolingSchedule,
    Cost,
    S,
)

logger = logging.getLogger(__name__)

# (outer_iter, temperature, current_cost, best_cost)
IterationCallback = Callable[[int, float, Cost, Cost], None]


@dataclass
class _RunState(Generic[S]):
    current: S
    current_cost: Cost
    initial_cost: Cost
    best: S
    best_cost: Cost
    evals: int = 0
    outer_iter: int = 0


def _check_initial_cost(params: AnnealParams, initial_cost: Cost) -> None:
    if params.cost_reduction_tol > 0 and initial_cost == 0:
        raise InvalidConfigurationError(
            "initial cost is 0, so the cost reduction ratio is undefined; "
            "set cost_reduction_tol=0 to disable early stopping"
        )


def _converged(params: AnnealParams, state: _RunState[S], cost: Cost) -> bool:
    if params.cost_reduction_tol <= 0:
        return False
    return float(cost) / float(state.initial_cost) < params.cost_reduction_tol


def run(
    initial: S,
    params: AnnealParams,
    acceptance_fn: Optional[AcceptanceFunction] = None,
    cooling_schedule: Optional[CoolingSchedule] = None,
    random_source: Optional[RandomSource] = None,
    on_iter: Optional[IterationCallback] = None,
) -> AnnealResult[S]:
    """Anneal from ``initial`` and return the result.

    Args:
        initial: Starting solution. It is never mutated.
        params: Iteration budgets, convergence tolerance and diagnostics flag.
            With ``params.verbose`` set, progress is logged at INFO on the
            ``anneal.engine`` logger; nothing is shown unless the caller has
            configured logging (e.g. ``logging.basicConfig(level=INFO)``).
        acceptance_fn: Probability of accepting a non-improving move.
            Defaults to ``metropolis_acceptance()``.
        cooling_schedule: Temperature for each outer iteration. Defaults to
            ``geometric_schedule(params.alpha)``.
        random_source: Uniform [0, 1) source for accept/reject draws.
            Defaults to ``PCG32(params.seed)``.
        on_iter: Called after each completed temperature stage.

    Returns:
        AnnealResult with the reported solution, its cost, the number of
        cost evaluations (one per inner step) and completed stages.

    Raises:
        InvalidConfigurationError: Before any step is taken, if the
            parameters are unusable or the initial cost is 0 while early
            stopping is enabled.
    """
    params.validate()
    if acceptance_fn is None:
        acceptance_fn = metropolis_acceptance()
    if cooling_schedule is None:
        cooling_schedule = geometric_schedule(params.alpha)
    if random_source is None:
        random_source = PCG32(params.seed)
    verbose = params.verbose

    initial_cost = initial.cost()
    _check_initial_cost(params, initial_cost)

    state = _RunState(
        current=initial,
        current_cost=initial_cost,
        initial_cost=initial_cost,
        best=initial,
        best_cost=initial_cost,
    )
    logger.debug(
        "Starting run: initial cost %s, %d temperatures x %d iterations",
        initial_cost,
        params.max_temps,
        params.iters_per_temp,
    )

    for outer_iter in range(params.max_temps):
        state.outer_iter = outer_iter
        temperature = cooling_schedule(outer_iter)

        for inner_iter in range(params.iters_per_temp):
            candidate = state.current.perturb()
            cost_new = candidate.cost()
            state.evals += 1
            cost_old = state.current_cost

            if cost_new < cost_old:
                accepted = True
                if cost_new < state.best_cost:
                    state.best = candidate
                    state.best_cost = cost_new
            else:
                p = sanitize_probability(
                    acceptance_fn(cost_old, cost_new, temperature)
                )
                accepted = p > random_source.next_float()

            if not accepted:
                continue

            state.current = candidate
            state.current_cost = cost_new
            if verbose:
                logger.info(
                    "Updating solution at outer iteration %d, inner "
                    "iteration %d: new cost %s, old cost %s",
                    outer_iter,
                    inner_iter,
                    cost_new,
                    cost_old,
                )

            if _converged(params, state, cost_new):
                if verbose:
                    logger.info(
                        "Met cost reduction criterion at outer iteration "
                        "%d, inner iteration %d",
                        outer_iter,
                        inner_iter,
                    )
                return AnnealResult(
                    best=state.current,
                    final_cost=state.current_cost,
                    function_evals=state.evals,
                    iterations=outer_iter,
                    status=AnnealStatus.CONVERGED,
                )

        if on_iter is not None:
            on_iter(
                outer_iter, temperature, state.current_cost, state.best_cost
            )

    if verbose:
        logger.info(
            "Completed %d iterations without meeting convergence criterion; "
            "returning best value found so far",
            params.max_temps,
        )

    if state.best_cost < state.current_cost:
        best, final_cost = state.best, state.best_cost
    else:
        best, final_cost = state.current, state.current_cost
    logger.debug(
        "Run exhausted after %d evaluations, final cost %s",
        state.evals,
        final_cost,
    )
    return AnnealResult(
        best=best,
        final_cost=final_cost,
        function_evals=state.evals,
        iterations=params.max_temps,
        status=AnnealStatus.EXHAUSTED,
    )
