#!/usr/bin/env python3
"""Solve a traveling-salesman instance with simulated annealing.

Usage:
    # Default 41-city table, default budgets
    python -m tsp.app

    # Ask for max temps, iterations per temperature and alpha on the console
    python -m tsp.app --prompt

    # Custom cities and parameters, JSON output
    python -m tsp.app --cities cities.json --params params.json \\
        --max-temps 200 --seed 7 --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Callable, Optional, Sequence

from anneal.engine import run
from anneal.errors import InvalidConfigurationError
from anneal.prng import PCG32
from anneal.types import DEFAULT_PARAMS, AnnealParams, AnnealResult

from .cities import DEFAULT_CITIES, load_city_table
from .tour import DEFAULT_ACCEPTANCE_SCALE, Tour, tour_acceptance


def load_json(path: str) -> dict:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Traveling salesman by simulated annealing"
    )
    parser.add_argument(
        "--params", help="JSON file with annealing parameters"
    )
    parser.add_argument(
        "--cities", help='JSON file {"cities": [[x, y], ...]}'
    )
    parser.add_argument("--max-temps", type=int, help="Temperature stages")
    parser.add_argument(
        "--iters-per-temp", type=int, help="Iterations per temperature"
    )
    parser.add_argument(
        "--alpha", type=float, help="Temperature reduction factor (0 < a < 1)"
    )
    parser.add_argument(
        "--tol",
        type=float,
        help="Stop once cost / initial cost drops below this (0 disables)",
    )
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument(
        "--scale",
        type=float,
        default=DEFAULT_ACCEPTANCE_SCALE,
        help="Acceptance temperature scale (default: %(default)s)",
    )
    parser.add_argument(
        "--prompt",
        action="store_true",
        help="Ask for max temps, iterations per temperature and alpha",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the result as JSON"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log every accepted move"
    )
    return parser


def resolve_params(args: argparse.Namespace) -> AnnealParams:
    """Base parameters from --params (or defaults), then flag overrides."""
    if args.params:
        params = AnnealParams.from_dict(load_json(args.params))
    else:
        params = AnnealParams(
            max_temps=DEFAULT_PARAMS.max_temps,
            iters_per_temp=DEFAULT_PARAMS.iters_per_temp,
            cost_reduction_tol=0.0,
            alpha=DEFAULT_PARAMS.alpha,
        )
    if args.max_temps is not None:
        params.max_temps = args.max_temps
    if args.iters_per_temp is not None:
        params.iters_per_temp = args.iters_per_temp
    if args.alpha is not None:
        params.alpha = args.alpha
    if args.tol is not None:
        params.cost_reduction_tol = args.tol
    if args.seed is not None:
        params.seed = args.seed
    if args.verbose:
        params.verbose = True
    return params


def prompt_params(
    params: AnnealParams,
    input_fn: Optional[Callable[[str], str]] = None,
) -> AnnealParams:
    """Ask for the three main budgets; an empty answer keeps the value."""
    if input_fn is None:
        input_fn = input

    def ask(label: str, current, convert):
        answer = input_fn(f"Enter {label} [{current}]: ").strip()
        if not answer:
            return current
        try:
            return convert(answer)
        except ValueError:
            raise InvalidConfigurationError(
                f"invalid {label}: {answer!r}"
            ) from None

    params.max_temps = ask("max temps", params.max_temps, int)
    params.iters_per_temp = ask(
        "iterations per temperature", params.iters_per_temp, int
    )
    params.alpha = ask("alpha", params.alpha, float)
    return params


def format_result(result: AnnealResult[Tour]) -> str:
    lines = [
        f"Tour length: {result.final_cost}",
        "Computed tour: " + " ".join(str(c) for c in result.best.to_list()),
        f"Function evaluations: {result.function_evals}",
        f"Iterations: {result.iterations}",
        f"Status: {result.status.value}",
    ]
    return "\n".join(lines)


def result_to_json(result: AnnealResult[Tour], initial_cost: int) -> str:
    d = result.to_dict()
    d["initial_cost"] = initial_cost
    d["tour"] = result.best.to_list()
    return json.dumps(d)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
        stream=sys.stderr,
    )

    try:
        params = resolve_params(args)
        if args.prompt:
            params = prompt_params(params)
        table = load_city_table(args.cities) if args.cities else DEFAULT_CITIES
        # Tour perturbations and accept/reject draws use separate streams.
        tour = Tour(table, PCG32(params.seed, seq=1))
        result = run(
            tour,
            params,
            acceptance_fn=tour_acceptance(args.scale),
            random_source=PCG32(params.seed),
        )
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(result_to_json(result, tour.cost()))
    else:
        print(format_result(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
