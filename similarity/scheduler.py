"""
Batch scheduling of pairwise comparisons.

All unordered pairs of students are compared in fixed-size batches.
Comparisons inside a batch run concurrently; results are folded into a
RunningStats accumulator only after the whole batch has finished, so the
hot path shares no mutable state. Scheduling stops after the first batch
that contains a perfect (100%) match.
"""
import concurrent.futures
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

from .models import ComparisonResult, StudentPair
from .scorers import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
PERFECT_SCORE = 100

CompareFn = Callable[[str, str], ComparisonResult]


@dataclass
class RunningStats:
    """Accumulated state of a scheduling run."""
    comparisons: list[ComparisonResult] = field(default_factory=list)
    total_similarity: int = 0  # Sum over comparable results only
    comparable_count: int = 0
    batches_run: int = 0
    early_exit: bool = False
    perfect_match: StudentPair | None = None

    @property
    def average(self) -> int:
        """Rounded mean similarity over comparable results, 0 if none."""
        if self.comparable_count == 0:
            return 0
        return round_half_up(self.total_similarity / self.comparable_count)


def enumerate_pairs(student_ids: Iterable[str]) -> list[tuple[str, str]]:
    """
    Build all unordered pairs (i < j) of distinct students, in input order.

    Examples:
        >>> enumerate_pairs(["a", "b", "c"])
        [('a', 'b'), ('a', 'c'), ('b', 'c')]
        >>> enumerate_pairs(["a", "a"])
        []
    """
    unique = list(dict.fromkeys(student_ids))
    return [
        (unique[i], unique[j])
        for i in range(len(unique))
        for j in range(i + 1, len(unique))
    ]


def run_batch(
    pairs: Sequence[tuple[str, str]],
    compare: CompareFn,
    max_workers: int,
) -> list[ComparisonResult]:
    """
    Compare every pair of one batch concurrently.

    Returns results in the same order as `pairs`.
    """
    if not pairs:
        return []
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(compare, a, b) for a, b in pairs]
        return [future.result() for future in futures]


def fold_batch(stats: RunningStats, results: list[ComparisonResult]) -> RunningStats:
    """
    Fold one finished batch into the accumulator.

    Non-comparable results are kept in the comparison list but do not
    contribute to the average. The first comparable 100% result, in pair
    order, triggers early exit.
    """
    stats.comparisons.extend(results)
    stats.batches_run += 1

    for result in results:
        if not result.comparable:
            continue
        stats.total_similarity += result.similarity
        stats.comparable_count += 1

    perfect = next(
        (r for r in results if r.comparable and r.similarity == PERFECT_SCORE),
        None,
    )
    if perfect is not None:
        stats.early_exit = True
        stats.perfect_match = StudentPair(student1=perfect.student1, student2=perfect.student2)
    return stats


def run_batches(
    pairs: Sequence[tuple[str, str]],
    compare: CompareFn,
    batch_size: int = DEFAULT_BATCH_SIZE,
    stats: RunningStats | None = None,
) -> RunningStats:
    """
    Run all comparisons batch by batch.

    Args:
        pairs: Student pairs to compare
        compare: Function comparing two students by id
        batch_size: Pairs per batch, also the concurrency bound
        stats: Accumulator to continue from (a fresh one by default)

    Returns:
        RunningStats with every evaluated comparison. Pairs never reached
        because of early exit are absent.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    stats = stats if stats is not None else RunningStats()
    total_batches = (len(pairs) + batch_size - 1) // batch_size

    for start in range(0, len(pairs), batch_size):
        batch_index = start // batch_size
        batch_pairs = pairs[start:start + batch_size]

        logger.info(
            f"Processing similarity batch {batch_index + 1}/{total_batches} "
            f"({len(batch_pairs)} pairs)"
        )
        batch_start = time.monotonic()
        results = run_batch(batch_pairs, compare, max_workers=batch_size)
        logger.info(
            f"Completed similarity batch {batch_index + 1}/{total_batches} "
            f"in {time.monotonic() - batch_start:.1f}s"
        )

        stats = fold_batch(stats, results)

        if stats.early_exit:
            logger.info(
                f"Found a 100% similarity match between {stats.perfect_match.student1} "
                f"and {stats.perfect_match.student2}! Stopping further similarity analysis."
            )
            break

        done = start + len(batch_pairs)
        logger.info(f"Overall progress: {min(100, round(done / len(pairs) * 100))}% complete")

    return stats
