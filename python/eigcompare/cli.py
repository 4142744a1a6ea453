"""
eigcompare Command Line Interface

Usage:
    eigcompare <use_lapack_in_library: 0 or 1> [options]
    python -m eigcompare <use_lapack_in_library: 0 or 1> [options]

Examples:
    eigcompare 1                       # prompts for matrix size
    eigcompare 0 --size 200 --seed 7   # library backend without LAPACK
    eigcompare 1 --size 50 --canonical-order -o run.txt

Exit codes:
    0   comparison completed
    1   usage error, backend failure, or strict reconstruction failure
"""

import argparse
import logging
import sys
from typing import Callable, List, Optional, TextIO

import numpy as np

from eigcompare.backends import make_backends
from eigcompare.config import EIGCOMPARE_CONFIG as cfg
from eigcompare.errors import DecompositionError, ReconstructionError, UsageError
from eigcompare.harness import Harness
from eigcompare.report import Reporter

logger = logging.getLogger(__name__)

USAGE = "Usage: {prog} <use_lapack_in_library: 0 or 1> [options]"


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message):
        raise UsageError(message)


def build_parser(prog: str = "eigcompare") -> argparse.ArgumentParser:
    parser = _Parser(
        prog=prog,
        description="Compare LAPACK dgeev against a library eigen-solver "
                    "on a random square matrix.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'use_lapack',
        metavar='USE_LAPACK',
        help='1: library backend uses LAPACK internally, 0: self-contained QR solver',
    )
    parser.add_argument(
        '-n', '--size',
        type=int,
        default=None,
        help='Matrix size (prompted for when omitted)',
    )
    parser.add_argument(
        '-s', '--seed',
        type=int,
        default=None,
        help='Random seed for matrix generation',
    )
    parser.add_argument(
        '-o', '--output',
        default=cfg.report.output_path,
        metavar='FILE',
        help=f'[OUTPUT] Results file (default: {cfg.report.output_path})',
    )
    parser.add_argument(
        '--strict',
        action='store_true',
        help='Fail when an eigenvector matrix cannot be inverted (default: report inf)',
    )
    parser.add_argument(
        '--canonical-order',
        action='store_true',
        help='Sort eigenpairs by eigenvalue before comparing backends',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Debug logging on stderr',
    )
    return parser


def parse_flag(value: str) -> bool:
    """Parse the 0/1 positional argument."""
    if value.strip() == "0":
        return False
    if value.strip() == "1":
        return True
    raise UsageError(f"USE_LAPACK must be 0 or 1, got {value!r}")


def parse_size(value: str) -> int:
    try:
        n = int(value.strip())
    except (ValueError, AttributeError):
        raise UsageError(f"Matrix size must be a positive integer, got {value!r}")
    if n < 1:
        raise UsageError(f"Matrix size must be a positive integer, got {n}")
    return n


def prompt_size(read: Callable[[str], str] = input) -> int:
    try:
        answer = read("Enter the size of the matrix: ")
    except EOFError:
        raise UsageError("No matrix size given")
    return parse_size(answer)


def make_confirm(read: Callable[[str], str] = input):
    """Interactive regeneration decision: 'y' or 'Y' regenerates, anything else stops."""

    def confirm(cond: float, attempt: int) -> bool:
        if attempt == 0:
            question = ("Condition number is poor. Regenerate matrix for better "
                        "condition number? (y/n): ")
        else:
            question = "Regenerate again? (y/n): "
        try:
            answer = read(question)
        except EOFError:
            return False
        return answer.strip()[:1] in ("y", "Y")

    return confirm


def main(
    argv: Optional[List[str]] = None,
    read: Callable[[str], str] = input,
    stdout: TextIO = None,
    stderr: TextIO = None,
    backends=None,
) -> int:
    """
    Run one comparison. Returns the process exit code.

    read, stdout, stderr and backends are injectable for testing.
    """
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    if argv is None:
        argv = sys.argv[1:]
    prog = "eigcompare"

    try:
        args = build_parser(prog).parse_args(argv)
        use_lapack = parse_flag(args.use_lapack)
        if args.size is not None and args.size < 1:
            raise UsageError(f"Matrix size must be a positive integer, got {args.size}")
    except UsageError as e:
        print(USAGE.format(prog=prog), file=stderr)
        print(f"Error: {e}", file=stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=stderr,
    )

    if backends is None:
        backends = make_backends(use_native_internally=use_lapack)
    native, library = backends

    try:
        outfile = open(args.output, "w")
    except OSError as e:
        print(f"Error: cannot open results file {args.output}: {e.strerror or e}", file=stderr)
        return 1

    with outfile:
        reporter = Reporter(stdout, outfile)
        harness = Harness(
            native,
            library,
            reporter,
            confirm=make_confirm(read),
            rng=np.random.default_rng(args.seed),
            strict=args.strict,
            canonical_order=args.canonical_order,
        )

        try:
            n = args.size if args.size is not None else prompt_size(read)
            harness.run(n)
        except UsageError as e:
            print(f"Error: {e}", file=stderr)
            return 1
        except DecompositionError as e:
            print(f"Error in eigenvalue decomposition: {e}", file=stderr)
            return 1
        except ReconstructionError as e:
            print(f"Error in reconstruction check: {e}", file=stderr)
            return 1

    logger.debug("Results written to %s", args.output)
    return 0


def cli():
    """Console script entry point."""
    sys.exit(main())
