"""City coordinate tables for the traveling-salesman example.

A ``CityTable`` holds integer x/y coordinates as read-only NumPy arrays. One
table is shared by every ``Tour`` in a run, so perturbing a tour never copies
or touches the coordinates.

Tables can be loaded from JSON files of the form::

    {"cities": [[x0, y0], [x1, y1], ...]}

City 0 is the depot where every tour starts and ends.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import numpy as np


@dataclass(frozen=True, eq=False)
class CityTable:
    xs: np.ndarray
    ys: np.ndarray

    @staticmethod
    def from_coords(xs: Sequence[int], ys: Sequence[int]) -> CityTable:
        if len(xs) != len(ys):
            raise ValueError(
                f"coordinate lengths differ: {len(xs)} x vs {len(ys)} y"
            )
        if len(xs) == 0:
            raise ValueError("a city table needs at least one city")
        x = np.array(xs, dtype=np.int64)
        y = np.array(ys, dtype=np.int64)
        x.setflags(write=False)
        y.setflags(write=False)
        return CityTable(xs=x, ys=y)

    @staticmethod
    def from_dict(d: dict) -> CityTable:
        if not isinstance(d, dict):
            raise ValueError(
                f"expected an object with a 'cities' key, got "
                f"{type(d).__name__}"
            )
        cities = d.get("cities")
        if not isinstance(cities, list):
            raise ValueError("expected a 'cities' list of [x, y] pairs")
        for i, c in enumerate(cities):
            if not isinstance(c, (list, tuple)) or len(c) != 2:
                raise ValueError(f"city {i} is not an [x, y] pair: {c!r}")
            if not all(
                isinstance(v, int) and not isinstance(v, bool) for v in c
            ):
                raise ValueError(
                    f"city {i} has non-integer coordinates: {c!r}"
                )
        return CityTable.from_coords(
            [c[0] for c in cities], [c[1] for c in cities]
        )

    def to_dict(self) -> dict:
        return {
            "cities": [[int(x), int(y)] for x, y in zip(self.xs, self.ys)]
        }

    def __len__(self) -> int:
        return len(self.xs)


def load_city_table(path: str | Path) -> CityTable:
    """Load a city table from a JSON file."""
    with open(path, encoding="utf-8") as f:
        return CityTable.from_dict(json.load(f))


def save_city_table(table: CityTable, path: str | Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(table.to_dict(), f)


_DEFAULT_XS = [
    0, 194, 908, 585, 666, 76, 633, 963, 789, 117, 409, 257, 229, 334, 837,
    382, 921, 54, 959, 532, 934, 720, 117, 519, 933, 408, 750, 465, 790,
    983, 605, 314, 272, 902, 340, 827, 915, 483, 466, 451, 698,
]  # fmt: skip
_DEFAULT_YS = [
    0, 956, 906, 148, 196, 59, 672, 801, 752, 620, 65, 747, 377, 608, 374,
    841, 910, 903, 743, 477, 794, 973, 555, 496, 152, 52, 3, 174, 890, 861,
    790, 430, 149, 674, 780, 507, 187, 931, 503, 435, 569,
]  # fmt: skip

# 41 cities on a 1000x1000 grid, depot at the origin.
DEFAULT_CITIES = CityTable.from_coords(_DEFAULT_XS, _DEFAULT_YS)
