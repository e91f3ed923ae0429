"""Traveling-salesman example built on the annealing engine."""

from .cities import (
    DEFAULT_CITIES,
    CityTable,
    load_city_table,
    save_city_table,
)
from .tour import Tour, tour_acceptance

__all__ = [
    "DEFAULT_CITIES",
    "CityTable",
    "Tour",
    "load_city_table",
    "save_city_table",
    "tour_acceptance",
]
