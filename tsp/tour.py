"""Closed tours over a shared city table.

``Tour`` satisfies the annealing ``Solution`` protocol:

  * ``cost()`` is the tour length, summing the floor of each leg's
    Euclidean length, so costs are integers.
  * ``perturb()`` swaps two distinct interior stops and returns a new tour.
    The first and last stops are always the depot (city 0) and never move.

Every tour made from the same starting tour shares its ``CityTable`` and
its random source. Only the visiting order is copied on perturbation.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from anneal.prng import PCG32, StdlibRandomSource
from anneal.schedules import metropolis_acceptance
from anneal.types import AcceptanceFunction

from .cities import CityTable

# Typical uphill move on the default 1000x1000 table.
DEFAULT_ACCEPTANCE_SCALE = 600.0


class Tour:
    def __init__(
        self,
        table: CityTable,
        rng: PCG32 | StdlibRandomSource,
        visited: Sequence[int] | np.ndarray | None = None,
    ) -> None:
        n = len(table)
        if visited is None:
            order = np.append(np.arange(n, dtype=np.int64), 0)
        else:
            order = np.array(visited, dtype=np.int64)
            _check_order(order, n)
        order.setflags(write=False)
        self.table = table
        self.rng = rng
        self.visited = order
        self._cost: int | None = None

    @property
    def num_cities(self) -> int:
        return len(self.table)

    def cost(self) -> int:
        if self._cost is None:
            x = self.table.xs[self.visited]
            y = self.table.ys[self.visited]
            dx = np.diff(x)
            dy = np.diff(y)
            legs = np.floor(np.sqrt((dx * dx + dy * dy).astype(np.float64)))
            self._cost = int(legs.sum())
        return self._cost

    def perturb(self) -> Tour:
        n = self.num_cities
        order = self.visited.copy()
        if n >= 3:
            i = self.rng.next_int(1, n - 1)
            j = i
            while j == i:
                j = self.rng.next_int(1, n - 1)
            order[i], order[j] = order[j], order[i]
        return Tour(self.table, self.rng, order)

    def to_list(self) -> list[int]:
        return [int(c) for c in self.visited]

    def __repr__(self) -> str:
        return f"Tour(cost={self.cost()}, visited={self.to_list()})"


def _check_order(order: np.ndarray, n: int) -> None:
    if order.ndim != 1 or len(order) != n + 1:
        raise ValueError(f"a tour over {n} cities has {n + 1} stops")
    if order[0] != 0 or order[-1] != 0:
        raise ValueError("a tour must start and end at city 0")
    if sorted(order[:-1].tolist()) != list(range(n)):
        raise ValueError("a tour must visit every city exactly once")


def tour_acceptance(
    scale: float = DEFAULT_ACCEPTANCE_SCALE,
) -> AcceptanceFunction:
    """Metropolis acceptance scaled to tour-length differences.

    The default schedule keeps temperatures at or below 1.0, so the scale
    brings typical uphill moves into a range where they are sometimes taken.
    """
    return metropolis_acceptance(scale=scale)
