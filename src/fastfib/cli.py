"""Command-line interface for the fastfib package.

This module is a thin wrapper: it parses a single index, hands it to the
engine and prints the single resulting value.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

import numpy as np

from .backends import available_backends, get_backend
from .engine import FibonacciEngine
from .errors import FibonacciError
from .reference import fibonacci_iterative

logger = logging.getLogger(__name__)

BACKEND_ENV_VAR = "FASTFIB_BACKEND"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI.

    Returns:
        An argparse.ArgumentParser configured for the CLI.
    """
    parser = argparse.ArgumentParser(prog="fastfib", description="Fast Fibonacci numbers by matrix exponentiation")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    fib = subparsers.add_parser("fibonacci", help="Compute the n-th Fibonacci number")
    fib.add_argument("n", type=int, help="Index n (>= 0)")
    fib.add_argument(
        "--backend",
        choices=available_backends(),
        default=os.environ.get(BACKEND_ENV_VAR, "bigint"),
        help=f"Numeric backend (default: ${BACKEND_ENV_VAR} or bigint)",
    )
    fib.add_argument("--strict", action="store_true", help="Fail instead of printing an inexact float result")
    fib.add_argument(
        "--method",
        choices=["matrix", "iterative"],
        default="matrix",
        help="Algorithm: O(log n) matrix power or the O(n) iterative reference",
    )

    subparsers.add_parser("limits", help="Show the largest exact index for each backend")

    return parser


def format_value(value: Any) -> str:
    """Render a result without exponent notation or a trailing decimal point."""
    if isinstance(value, np.floating):
        return np.format_float_positional(value, trim="-")
    return str(value)


def _configure_logging(verbose: bool) -> None:
    # basicConfig only takes effect once per process; the package level is reapplied.
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("fastfib").setLevel(logging.DEBUG if verbose else logging.NOTSET)


def _run_fibonacci(args: argparse.Namespace) -> None:
    if args.method == "iterative":
        value: Any = fibonacci_iterative(args.n)
    else:
        engine = FibonacciEngine(get_backend(args.backend), strict=args.strict)
        logger.debug("using %r", engine)
        value = engine.compute(args.n)
    print(format_value(value))


def _run_limits() -> None:
    for name in available_backends():
        limit = get_backend(name).max_exact_index
        print(f"{name}\t{'unbounded' if limit is None else limit}")


def main(argv: Sequence[str] | None = None) -> int:
    """Main entrypoint for the CLI.

    Args:
        argv: Optional iterable of arguments, defaults to sys.argv if None.

    Returns:
        Process exit code (0 on success, 1 on a computation error, 2 on usage errors).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        if args.command == "fibonacci":
            _run_fibonacci(args)
            return 0
        if args.command == "limits":
            _run_limits()
            return 0
    except FibonacciError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
