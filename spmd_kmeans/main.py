# main.py
from __future__ import annotations

import argparse
import logging
import sys
from multiprocessing import cpu_count
from typing import List, Optional

from spmd_kmeans.comm.base import run_guarded
from spmd_kmeans.comm.shared import launch
from spmd_kmeans.config import (
    DEFAULT_CLUSTERS,
    DEFAULT_INPUT,
    EPSILON_FINE,
    AggregateLayout,
    Backend,
    EngineConfig,
    SharedConfig,
)
from spmd_kmeans.program import RunSpec, spmd_main
from spmd_kmeans.utils.logging import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spmd-kmeans",
        description="K-means over single-byte observations, one observation per worker, "
        "synchronized through collective reductions.",
    )
    parser.add_argument(
        "--input",
        type=str,
        default=DEFAULT_INPUT,
        help="Binary file of unsigned bytes; only the first W bytes are used.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=cpu_count(),
        help="Number of workers W for the shared backend "
        "(ignored with --backend mpi, where mpiexec sets it).",
    )
    parser.add_argument(
        "--clusters",
        type=int,
        default=DEFAULT_CLUSTERS,
        help="Number of clusters K (seeded from the first K bytes).",
    )
    parser.add_argument(
        "--epsilon",
        type=float,
        default=EPSILON_FINE,
        help="Convergence threshold on the per-centroid change.",
    )
    parser.add_argument(
        "--max-rounds",
        type=int,
        default=None,
        help="Optional safety bound on the number of rounds.",
    )
    parser.add_argument(
        "--layout",
        type=str,
        choices=[e.value for e in AggregateLayout],
        default=AggregateLayout.INLINE.value,
        help="inline: sums and counts in one reduction; split: two reductions.",
    )
    parser.add_argument(
        "--backend",
        type=str,
        choices=[e.value for e in Backend],
        default=Backend.SHARED.value,
        help="shared: local processes over shared memory; mpi: run under mpiexec.",
    )
    parser.add_argument(
        "--barrier-timeout",
        type=float,
        default=None,
        help="Seconds a worker waits for the others at a collective (shared backend).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Debug logging: per-round global sums and counts.",
    )
    return parser


def _run_shared(spec: RunSpec, shared: SharedConfig, log_level: int, logger: logging.Logger) -> int:
    # слот должен вместить вектор из 2K float64 (раскладка inline)
    slot_bytes = 2 * spec.config.n_clusters * 8
    result = launch(
        spmd_main,
        args=(spec,),
        shared=shared,
        slot_bytes=slot_bytes,
        log_level=log_level,
    )
    if not result.ok or result.root_result is None:
        logger.error(f"Computation aborted (worker exit codes: {result.exit_codes})")
        return 1

    outcome = result.root_result
    print(outcome.report)
    logger.info(
        f"Finished in {outcome.result.rounds} rounds "
        f"(converged={outcome.result.converged})"
    )
    return 0


def _run_mpi(spec: RunSpec, logger: logging.Logger) -> int:
    from spmd_kmeans.comm.mpi import MPICommunicator

    comm = MPICommunicator()
    outcome = run_guarded(comm, spmd_main, spec, logger=logger)
    if comm.is_root:
        print(outcome.report)
        logger.info(
            f"Finished in {outcome.result.rounds} rounds "
            f"(converged={outcome.result.converged})"
        )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logger = setup_logger(log_level)

    try:
        config = EngineConfig(
            n_clusters=args.clusters,
            epsilon=args.epsilon,
            max_rounds=args.max_rounds,
            layout=AggregateLayout(args.layout),
        )
        shared = SharedConfig(
            n_workers=args.workers,
            barrier_timeout=args.barrier_timeout,
        )
    except ValueError as exc:
        parser.error(str(exc))

    spec = RunSpec(input_path=args.input, config=config)

    if Backend(args.backend) == Backend.MPI:
        return _run_mpi(spec, logger)
    return _run_shared(spec, shared, log_level, logger)


if __name__ == "__main__":
    sys.exit(main())
