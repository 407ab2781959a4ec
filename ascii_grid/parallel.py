#!/usr/bin/env python3
"""
Image to ASCII Grid Converter - Row Workers
===========================================
Static row partitioning and the thread pool shared by all parallel stages.

Every stage splits the rows of its image into contiguous chunks, one per
worker, runs the workers on a fresh pool and returns their results in chunk
order.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Tuple, TypeVar

from ascii_grid.exceptions import WorkerFailure

logger = logging.getLogger(__name__)

T = TypeVar('T')


def clamp_threads(threads: int, rows: int) -> int:
    """There has to be at least one thread and no more threads than rows."""
    return max(1, min(threads, rows))


def partition_rows(rows: int, threads: int) -> List[Tuple[int, int]]:
    """
    Split `rows` into one contiguous range per thread.

    The thread count is clamped to [1, rows] first. Each range holds
    ceil(rows / threads) rows, the last ones may be shorter or empty.

    Returns:
        List of (start, end) tuples, end exclusive
    """
    threads = clamp_threads(threads, rows)
    rows_per_thread = math.ceil(rows / threads)
    return [
        (min(chunk * rows_per_thread, rows), min((chunk + 1) * rows_per_thread, rows))
        for chunk in range(threads)
    ]


def run_row_chunks(worker: Callable[[int, int], T],
                   rows: int,
                   threads: int,
                   stage: str = "conversion") -> List[T]:
    """
    Run `worker(start, end)` for every row range on its own thread.

    Args:
        worker: Function processing the rows [start, end)
        rows: Total number of rows
        threads: Requested number of threads
        stage: Stage name used in log and error messages

    Returns:
        Worker results in chunk order, independent of completion order

    Raises:
        WorkerFailure: if any worker raised; no partial results are returned
    """
    chunks = partition_rows(rows, threads)
    logger.debug("%s: %d threads, %d rows per thread",
                 stage, len(chunks), chunks[0][1] - chunks[0][0])

    with ThreadPoolExecutor(max_workers=len(chunks)) as executor:
        futures = [executor.submit(worker, start, end) for start, end in chunks]

        results = []
        for chunk, future in enumerate(futures):
            try:
                results.append(future.result())
            except Exception as exc:
                for pending in futures:
                    pending.cancel()
                raise WorkerFailure(stage, chunk) from exc
            logger.debug("%s: thread %d finished", stage, chunk)

    return results
