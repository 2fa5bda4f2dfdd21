"""
Similarity analysis orchestrator.

This module provides the SimilarityAnalyzer class that runs a full
analysis: pairwise comparison of all submissions in batches, the
reference implementation check, and report assembly.
"""
import logging
from typing import Iterable, Optional

from .comparator import compare_submissions
from .config import AnalysisConfig
from .exceptions import NothingToAnalyzeError
from .models import ComparisonResult, SimilarityReport, Submission
from .providers import ContentProvider, load_submissions
from .reference import ReferenceImplementation
from .report import build_report
from .scheduler import enumerate_pairs, run_batches

logger = logging.getLogger(__name__)


class SimilarityAnalyzer:
    """
    Runs similarity analysis over a set of submissions.

    Content is loaded once per submission before any comparison; the
    analyzer holds no state between runs.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    def analyze(
        self,
        submissions: Iterable[Submission],
        reference: Optional[Submission] = None,
        threshold: Optional[int] = None,
    ) -> SimilarityReport:
        """
        Analyze similarity across all submissions.

        Args:
            submissions: Loaded submissions, one per student
            reference: The reference implementation; the default
                implementation check is skipped when None
            threshold: High-similarity threshold (config value by default)

        Returns:
            SimilarityReport

        Raises:
            NothingToAnalyzeError: If there are no submissions
        """
        by_id: dict[str, Submission] = {}
        for submission in submissions:
            by_id.setdefault(submission.student_id, submission)
        if not by_id:
            raise NothingToAnalyzeError()

        threshold = threshold if threshold is not None else self.config.threshold
        files = self.config.files

        pairs = enumerate_pairs(by_id)
        logger.info(
            f"Analyzing similarity across {len(by_id)} students "
            f"({len(pairs)} pairs of submissions)"
        )

        def compare(student1: str, student2: str) -> ComparisonResult:
            return compare_submissions(by_id[student1], by_id[student2], files)

        stats = run_batches(pairs, compare, batch_size=self.config.batch_size)

        findings = []
        if reference is not None:
            logger.info("Checking for default implementations...")
            findings = self.check_default_implementations(by_id.values(), reference)
            flagged = sum(1 for f in findings if f.default_functions)
            if flagged:
                logger.info(f"Found {flagged} students with default implementations.")
            else:
                logger.info("No students with default implementations found.")

        report = build_report(
            comparisons=stats.comparisons,
            average_similarity=stats.average,
            findings=findings,
            threshold=threshold,
            early_exit=stats.early_exit,
            perfect_match=stats.perfect_match,
            integrity_threshold=self.config.integrity_threshold,
        )

        if report.early_exit:
            logger.info(
                f"Analysis stopped early after finding a 100% match. "
                f"Found {len(report.high_similarity_pairs)} high-similarity pairs."
            )
        else:
            logger.info(
                f"Analysis complete. Found {len(report.high_similarity_pairs)} high-similarity pairs."
            )
        return report

    def check_default_implementations(self, submissions: Iterable[Submission], reference: Submission):
        """Run the reference check for every submission."""
        path = self.config.reference_file
        baseline = ReferenceImplementation(
            reference.get(path),
            self.config.function_names,
            whole_file_threshold=self.config.whole_file_threshold,
            function_threshold=self.config.function_threshold,
        )
        return [baseline.check(s.student_id, s.get(path)) for s in submissions]

    def analyze_from_provider(
        self,
        provider: ContentProvider,
        student_ids: Iterable[str],
        reference_provider: Optional[ContentProvider] = None,
        reference_id: str = "",
        threshold: Optional[int] = None,
    ) -> SimilarityReport:
        """
        Load submissions through a content provider and analyze them.

        Args:
            provider: Source of student files
            student_ids: Students to compare
            reference_provider: Source of the reference files, if any
            reference_id: Identifier of the reference within its provider
            threshold: High-similarity threshold (config value by default)
        """
        paths = self.config.paths
        submissions = load_submissions(provider, student_ids, paths)
        reference = None
        if reference_provider is not None:
            reference = reference_provider.load(reference_id, [self.config.reference_file])
        return self.analyze(submissions, reference=reference, threshold=threshold)
