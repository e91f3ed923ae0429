"""Tests for the traveling-salesman tour and its use with the engine."""

import numpy as np
import pytest

from anneal.engine import run
from anneal.prng import PCG32
from anneal.types import AnnealParams, AnnealStatus
from tsp.cities import DEFAULT_CITIES, CityTable
from tsp.tour import Tour, tour_acceptance


def _triangle() -> CityTable:
    return CityTable.from_coords([0, 3, 3], [0, 4, 0])


# --- cost ---


def test_default_order_visits_cities_in_sequence():
    tour = Tour(_triangle(), PCG32(1))
    assert tour.to_list() == [0, 1, 2, 0]


def test_cost_sums_leg_lengths():
    # (0,0) -> (3,4) -> (3,0) -> (0,0): 5 + 4 + 3
    assert Tour(_triangle(), PCG32(1)).cost() == 12


def test_cost_floors_each_leg():
    table = CityTable.from_coords([0, 1], [0, 1])
    # Two legs of sqrt(2), each floored to 1.
    assert Tour(table, PCG32(1)).cost() == 2


def test_cost_is_plain_int():
    assert type(Tour(DEFAULT_CITIES, PCG32(1)).cost()) is int


def test_explicit_order():
    tour = Tour(_triangle(), PCG32(1), visited=[0, 2, 1, 0])
    assert tour.cost() == 12
    assert tour.to_list() == [0, 2, 1, 0]


@pytest.mark.parametrize(
    "visited",
    [
        [0, 1, 2],
        [1, 0, 2, 1],
        [0, 1, 1, 0],
        [0, 1, 2, 3, 0],
    ],
)
def test_bad_order_rejected(visited):
    with pytest.raises(ValueError):
        Tour(_triangle(), PCG32(1), visited=visited)


# --- perturb ---


def test_perturb_swaps_two_interior_stops():
    tour = Tour(DEFAULT_CITIES, PCG32(5))
    for _ in range(50):
        neighbor = tour.perturb()
        before = np.array(tour.to_list())
        after = np.array(neighbor.to_list())
        changed = np.flatnonzero(before != after)
        assert len(changed) == 2
        assert 0 not in changed and len(before) - 1 not in changed
        assert sorted(after[:-1].tolist()) == list(range(len(DEFAULT_CITIES)))
        tour = neighbor


def test_perturb_does_not_mutate_original():
    tour = Tour(DEFAULT_CITIES, PCG32(5))
    original = tour.to_list()
    original_cost = tour.cost()

    tour.perturb()

    assert tour.to_list() == original
    assert tour.cost() == original_cost


def test_perturb_shares_table_and_rng():
    rng = PCG32(5)
    tour = Tour(DEFAULT_CITIES, rng)
    neighbor = tour.perturb()
    assert neighbor.table is tour.table
    assert neighbor.rng is rng
    assert neighbor.visited is not tour.visited


def test_perturb_three_cities_swaps_the_only_pair():
    tour = Tour(_triangle(), PCG32(2))
    assert tour.perturb().to_list() == [0, 2, 1, 0]


def test_perturb_two_cities_is_no_op():
    table = CityTable.from_coords([0, 10], [0, 0])
    tour = Tour(table, PCG32(2))
    assert tour.perturb().to_list() == [0, 1, 0]


def test_tour_order_is_read_only():
    tour = Tour(_triangle(), PCG32(2))
    with pytest.raises(ValueError):
        tour.visited[1] = 2


# --- with the engine ---


def test_two_city_problem_never_improves():
    table = CityTable.from_coords([0, 10], [0, 0])
    initial = Tour(table, PCG32(3))

    result = run(
        initial,
        AnnealParams(max_temps=4, iters_per_temp=5, cost_reduction_tol=0.5),
        tour_acceptance(),
    )

    assert result.status is AnnealStatus.EXHAUSTED
    assert result.final_cost == initial.cost() == 20
    assert result.best.to_list() == initial.to_list()
    assert result.function_evals == 20


def test_two_city_problem_converges_with_ratio_above_one():
    table = CityTable.from_coords([0, 10], [0, 0])
    initial = Tour(table, PCG32(3))

    result = run(
        initial,
        AnnealParams(max_temps=4, iters_per_temp=5, cost_reduction_tol=1.5),
        tour_acceptance(),
    )

    assert result.status is AnnealStatus.CONVERGED
    assert result.function_evals == 1


def test_annealing_shortens_default_tour():
    initial = Tour(DEFAULT_CITIES, PCG32(11, seq=1))

    result = run(
        initial,
        AnnealParams(max_temps=60, iters_per_temp=200, alpha=0.9, seed=11),
        tour_acceptance(),
    )

    assert result.final_cost < initial.cost()
    assert result.final_cost == result.best.cost()
    assert result.function_evals == 60 * 200
    assert result.best.to_list()[0] == 0
    assert result.best.to_list()[-1] == 0


def test_annealing_is_reproducible():
    def once():
        initial = Tour(DEFAULT_CITIES, PCG32(4, seq=1))
        return run(
            initial,
            AnnealParams(max_temps=10, iters_per_temp=50, seed=4),
            tour_acceptance(),
        )

    r1 = once()
    r2 = once()
    assert r1.final_cost == r2.final_cost
    assert r1.best.to_list() == r2.best.to_list()
    assert r1.function_evals == r2.function_evals
