"""
mpi_run.py

Запуск розподіленого методу Стронгіна під MPI:

    mpiexec -n 4 python -m strongin_app.mpi_run --function f3 --eps 1e-6

Кожен ранг викликає minimize_distributed з однаковими параметрами;
результат друкує координатор (ранг 0). Потребує mpi4py (extra "mpi").
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from typing import List, Optional

from strongin_app.core.engine import MAX_ITERATIONS
from strongin_app.core.functions import FUNCTIONS
from strongin_app.core.mpi_comm import MPICommunicator
from strongin_app.core.strategies import ParallelStrategy
from strongin_app.core.strongin import run_strongin

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Distributed Strongin global minimization over MPI ranks",
    )
    parser.add_argument("--function", choices=sorted(FUNCTIONS), default="f3",
                        help="Target function key (default: f3)")
    parser.add_argument("--a", type=float, default=None,
                        help="Left end of the search interval (default: function's own)")
    parser.add_argument("--b", type=float, default=None,
                        help="Right end of the search interval (default: function's own)")
    parser.add_argument("--eps", type=float, default=1e-5,
                        help="Stop when the chosen segment is shorter than eps")
    parser.add_argument("--max-iter", type=int, default=MAX_ITERATIONS,
                        help=f"Iteration cap (default: {MAX_ITERATIONS})")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    comm = MPICommunicator()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format=f"%(asctime)s [rank {comm.rank}/{comm.size}] %(levelname)s %(name)s: %(message)s",
    )

    tf = FUNCTIONS[args.function]
    a = tf.a if args.a is None else args.a
    b = tf.b if args.b is None else args.b

    if comm.is_coordinator:
        logger.info("%s on [%s, %s], eps=%s, ranks=%d", tf.name, a, b, args.eps, comm.size)

    result = run_strongin(
        tf.func, a, b, args.eps,
        strategy=ParallelStrategy(comm),
        max_iter=args.max_iter,
    )

    if comm.is_coordinator:
        logger.info(
            "f* = %.10g, x* = %.10g, iterations = %d, segments = %d, stopped_by = %s",
            result.f_star, result.x_star, result.n_iter, result.n_segments, result.stopped_by,
        )
        print(result.f_star)

    return 0 if not math.isnan(result.f_star) else 1


if __name__ == "__main__":
    sys.exit(main())
