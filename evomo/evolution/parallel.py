"""
Fan-out/join helpers for the optimizer's parallel phases.

Each phase (mutation, crossover, selection) is split into one contiguous
chunk per worker lane. All chunks are submitted to a fixed-size thread pool
and the caller blocks until every one of them has finished. There is no
cancellation and no timeout.

Every lane owns its own numpy Generator so workers never share random state.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from multiprocessing import cpu_count
from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)


def partition(total: int, n_chunks: int) -> List[int]:
    """
    Split ``total`` units of work into ``n_chunks`` near-equal counts.

    Earlier chunks receive the remainder, e.g. partition(10, 4) -> [3, 3, 2, 2].
    """
    if n_chunks < 1:
        raise ValueError(f"n_chunks must be positive, got {n_chunks}")
    return [len(chunk) for chunk in np.array_split(np.arange(max(total, 0)), n_chunks)]


def chunk_ranges(n_items: int, n_chunks: int) -> List[Tuple[int, int]]:
    """Contiguous (start, length) ranges covering ``range(n_items)``."""
    ranges = []
    start = 0
    for length in partition(n_items, n_chunks):
        ranges.append((start, length))
        start += length
    return ranges


def spawn_generators(
    seed: Optional[int],
    n_lanes: int,
) -> Tuple[np.random.Generator, List[np.random.Generator]]:
    """
    Create one generator for the calling thread and one per worker lane.

    All generators derive from a single SeedSequence, so a fixed seed makes
    the whole set reproducible while keeping the streams independent.
    """
    seed_seq = np.random.SeedSequence(seed)
    main_seq, *lane_seqs = seed_seq.spawn(n_lanes + 1)
    return (
        np.random.default_rng(main_seq),
        [np.random.default_rng(s) for s in lane_seqs],
    )


class WorkerPool:
    """
    Fixed-size thread pool used for every parallel phase.

    The executor is created on first use and reused until close().
    """

    def __init__(self, n_workers: Optional[int] = None):
        self.n_workers = max(1, n_workers or cpu_count())
        self._executor: Optional[ThreadPoolExecutor] = None

    def should_fan_out(self, enabled: bool, units: int) -> bool:
        """Parallelise only when enabled and every lane gets at least one unit."""
        return enabled and self.n_workers <= units

    def run(
        self,
        func: Callable[..., Any],
        args_list: Sequence[Tuple[Any, ...]],
    ) -> List[Any]:
        """
        Run ``func(*args)`` for each entry of ``args_list`` and join all.

        Returns:
            Results in submission order

        Raises:
            The first exception observed, once every task has finished
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.n_workers,
                thread_name_prefix='evomo-lane',
            )

        futures: List[Future] = [self._executor.submit(func, *args) for args in args_list]

        first_error: Optional[BaseException] = None
        for future in as_completed(futures):
            error = future.exception()
            if error is not None and first_error is None:
                first_error = error
                logger.error("Worker task failed: %r", error)

        if first_error is not None:
            raise first_error

        return [future.result() for future in futures]

    def close(self) -> None:
        """Shut the executor down, waiting for running tasks."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __repr__(self) -> str:
        return f"WorkerPool(n_workers={self.n_workers})"
