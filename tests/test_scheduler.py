"""
Unit tests for similarity/scheduler.py

Tests pair enumeration, batching, running statistics and early exit.
"""
import threading

import pytest

from similarity.models import ComparisonResult
from similarity.scheduler import (
    RunningStats,
    enumerate_pairs,
    fold_batch,
    run_batch,
    run_batches,
)


def make_compare(scores=None, comparable=None):
    """Build a fake compare function that records every call."""
    scores = scores or {}
    comparable = comparable or {}
    calls = []
    lock = threading.Lock()

    def compare(a, b):
        with lock:
            calls.append((a, b))
        key = frozenset((a, b))
        return ComparisonResult(
            student1=a,
            student2=b,
            similarity=scores.get(key, 10),
            comparable=comparable.get(key, True),
        )

    compare.calls = calls
    return compare


class TestEnumeratePairs:
    """Tests for enumerate_pairs function."""

    def test_all_unordered_pairs(self):
        """Each unordered pair appears once in input order."""
        assert enumerate_pairs(["a", "b", "c"]) == [("a", "b"), ("a", "c"), ("b", "c")]

    def test_pair_count(self):
        """n students give n*(n-1)/2 pairs."""
        ids = [f"s{i}" for i in range(10)]
        assert len(enumerate_pairs(ids)) == 45

    def test_no_self_pairs_with_duplicates(self):
        """Repeated ids never pair with themselves."""
        pairs = enumerate_pairs(["a", "b", "a"])
        assert pairs == [("a", "b")]

    def test_single_and_empty(self):
        """Fewer than two students give no pairs."""
        assert enumerate_pairs(["a"]) == []
        assert enumerate_pairs([]) == []


class TestRunBatch:
    """Tests for run_batch function."""

    def test_preserves_order(self):
        """Results come back in pair order."""
        compare = make_compare()
        pairs = [("a", "b"), ("a", "c"), ("b", "c")]
        results = run_batch(pairs, compare, max_workers=3)
        assert [(r.student1, r.student2) for r in results] == pairs

    def test_empty_batch(self):
        """An empty batch returns no results."""
        assert run_batch([], make_compare(), max_workers=5) == []


class TestFoldBatch:
    """Tests for fold_batch function."""

    def test_non_comparable_excluded_from_average(self):
        """Non-comparable results are kept but not averaged."""
        stats = fold_batch(RunningStats(), [
            ComparisonResult(student1="a", student2="b", similarity=60),
            ComparisonResult(student1="a", student2="c", similarity=0, comparable=False),
            ComparisonResult(student1="b", student2="c", similarity=0),
        ])
        assert len(stats.comparisons) == 3
        assert stats.comparable_count == 2
        assert stats.average == 30

    def test_non_comparable_perfect_score_does_not_trigger_exit(self):
        """Only a comparable 100 stops the run."""
        stats = fold_batch(RunningStats(), [
            ComparisonResult(student1="a", student2="b", similarity=100, comparable=False),
        ])
        assert stats.early_exit is False

    def test_first_perfect_match_recorded(self):
        """The first perfect pair in batch order is recorded."""
        stats = fold_batch(RunningStats(), [
            ComparisonResult(student1="a", student2="b", similarity=50),
            ComparisonResult(student1="a", student2="c", similarity=100),
            ComparisonResult(student1="b", student2="c", similarity=100),
        ])
        assert stats.early_exit is True
        assert stats.perfect_match.student1 == "a"
        assert stats.perfect_match.student2 == "c"

    def test_average_rounds_half_up(self):
        """A mean of 40.5 rounds up to 41."""
        stats = fold_batch(RunningStats(), [
            ComparisonResult(student1="a", student2="b", similarity=40),
            ComparisonResult(student1="a", student2="c", similarity=41),
        ])
        assert stats.average == 41


class TestRunBatches:
    """Tests for run_batches function."""

    def test_all_pairs_evaluated(self):
        """Without a perfect match every batch runs."""
        compare = make_compare()
        pairs = enumerate_pairs(["a", "b", "c", "d", "e"])
        stats = run_batches(pairs, compare, batch_size=3)
        assert len(stats.comparisons) == 10
        assert stats.batches_run == 4
        assert stats.early_exit is False
        assert stats.perfect_match is None
        assert stats.average == 10

    def test_early_exit_stops_scheduling(self):
        """A perfect match in the first batch prevents any further batch."""
        compare = make_compare(scores={frozenset(("a", "b")): 100})
        pairs = enumerate_pairs(["a", "b", "c", "d", "e"])
        stats = run_batches(pairs, compare, batch_size=2)
        assert stats.early_exit is True
        assert stats.perfect_match.student1 == "a"
        assert stats.perfect_match.student2 == "b"
        assert stats.batches_run == 1
        assert len(compare.calls) == 2
        assert len(stats.comparisons) == 2

    def test_batch_in_flight_completes(self):
        """Pairs in the same batch as the perfect match are still evaluated."""
        compare = make_compare(scores={frozenset(("a", "b")): 100})
        pairs = enumerate_pairs(["a", "b", "c", "d"])
        stats = run_batches(pairs, compare, batch_size=4)
        assert len(stats.comparisons) == 4
        assert ("c", "d") not in compare.calls

    def test_average_excludes_non_comparable(self):
        """Missing content does not drag the average down."""
        compare = make_compare(
            scores={frozenset(("a", "b")): 80},
            comparable={frozenset(("a", "c")): False, frozenset(("b", "c")): False},
        )
        stats = run_batches(enumerate_pairs(["a", "b", "c"]), compare, batch_size=50)
        assert stats.comparable_count == 1
        assert stats.average == 80

    def test_no_comparable_pairs_average_zero(self):
        """The average is 0 when nothing was comparable."""
        compare = make_compare(comparable={frozenset(("a", "b")): False})
        stats = run_batches([("a", "b")], compare)
        assert stats.average == 0

    def test_no_pairs(self):
        """No pairs means no batches."""
        stats = run_batches([], make_compare())
        assert stats.comparisons == []
        assert stats.batches_run == 0

    def test_continues_existing_accumulator(self):
        """A second run adds to the given statistics."""
        first = run_batches([("a", "b")], make_compare(scores={frozenset(("a", "b")): 40}))
        stats = run_batches([("c", "d")], make_compare(scores={frozenset(("c", "d")): 60}), stats=first)
        assert len(stats.comparisons) == 2
        assert stats.average == 50

    def test_invalid_batch_size(self):
        """A batch size below 1 is rejected."""
        with pytest.raises(ValueError):
            run_batches([("a", "b")], make_compare(), batch_size=0)
