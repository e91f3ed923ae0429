"""Exceptions raised by the annealing engine."""

from __future__ import annotations


class AnnealError(Exception):
    """Base class for annealing errors."""


class InvalidConfigurationError(AnnealError, ValueError):
    """A run cannot start with the given parameters or initial solution.

    Raised before the control loop is entered, never part-way through a run.
    """
