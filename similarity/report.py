"""
Aggregation of comparison results into a similarity report.

This module contains pure functions that filter, rank and classify
comparison results for the reporting layer, the score adjustment step
and the console summary.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable

from .models import (
    ComparisonResult,
    DefaultImplementationFinding,
    SimilarityReport,
    StudentPair,
)

DEFAULT_THRESHOLD = 80
INTEGRITY_THRESHOLD = 95
# Findings with this many functions are treated as the unmodified reference file
WHOLE_FILE_FUNCTION_COUNT = 5


class SimilarityBand(Enum):
    """Presentation band of a similarity score."""
    VERY_LOW = "very-low"    # 0-20
    LOW = "low"              # 21-40
    MEDIUM = "medium"        # 41-60
    HIGH = "high"            # 61-80
    VERY_HIGH = "very-high"  # 81-100


def similarity_band(score: int) -> SimilarityBand:
    """
    Band of a score, used only for rendering.

    Examples:
        >>> similarity_band(20)
        <SimilarityBand.VERY_LOW: 'very-low'>
        >>> similarity_band(81)
        <SimilarityBand.VERY_HIGH: 'very-high'>
    """
    if score > 80:
        return SimilarityBand.VERY_HIGH
    if score > 60:
        return SimilarityBand.HIGH
    if score > 40:
        return SimilarityBand.MEDIUM
    if score > 20:
        return SimilarityBand.LOW
    return SimilarityBand.VERY_LOW


def high_similarity(
    comparisons: Iterable[ComparisonResult],
    threshold: int = DEFAULT_THRESHOLD
) -> list[ComparisonResult]:
    """Comparable results at or above threshold, highest first."""
    flagged = [c for c in comparisons if c.comparable and c.similarity >= threshold]
    return sorted(flagged, key=lambda c: c.similarity, reverse=True)


def find_highest_similarity_per_student(
    comparisons: Iterable[ComparisonResult]
) -> list[ComparisonResult]:
    """
    Each student's single highest-scoring match with another student.

    When two students are each other's best match the pair is listed once.

    Args:
        comparisons: Comparison results (non-comparable ones are ignored)

    Returns:
        Deduplicated best matches, highest first

    Examples:
        >>> rows = find_highest_similarity_per_student([
        ...     ComparisonResult(student1="a", student2="b", similarity=95),
        ...     ComparisonResult(student1="a", student2="c", similarity=40),
        ... ])
        >>> [(r.student1, r.student2) for r in rows]
        [('a', 'b'), ('a', 'c')]
    """
    comparable = [c for c in comparisons if c.comparable]

    best: dict[str, ComparisonResult] = {}
    for comparison in comparable:
        for student in (comparison.student1, comparison.student2):
            current = best.get(student)
            if current is None or comparison.similarity > current.similarity:
                best[student] = comparison

    seen_pairs = set()
    rows = []
    for comparison in best.values():
        if comparison.pair_key in seen_pairs:
            continue
        seen_pairs.add(comparison.pair_key)
        rows.append(comparison)

    return sorted(rows, key=lambda c: c.similarity, reverse=True)


def is_integrity_violation(score: int, threshold: int = INTEGRITY_THRESHOLD) -> bool:
    """Whether a pair score warrants an academic integrity review."""
    return score >= threshold


def integrity_violations(
    report: SimilarityReport,
    threshold: int | None = None
) -> list[ComparisonResult]:
    """
    Pairs classified as integrity violations.

    Classification only: any grade override is applied by the caller.
    The report's own integrity_threshold is used unless one is given.
    """
    if threshold is None:
        threshold = report.integrity_threshold
    return [
        c for c in report.comparisons
        if c.comparable and is_integrity_violation(c.similarity, threshold)
    ]


def build_similarity_matrix(
    report: SimilarityReport,
    students: Iterable[str] | None = None
) -> dict[str, dict[str, int | None]]:
    """
    Student-by-student similarity matrix.

    Cells are None on the diagonal and for pairs that were not compared
    (early exit) or could not be compared. A None cell does not mean the
    two students are dissimilar.

    Args:
        report: Similarity report
        students: Row/column order; by default, students in order of
            appearance in the comparisons
    """
    students = list(dict.fromkeys(students)) if students is not None else []
    for comparison in report.comparisons:
        for student in (comparison.student1, comparison.student2):
            if student not in students:
                students.append(student)

    matrix: dict[str, dict[str, int | None]] = {
        row: {col: None for col in students} for row in students
    }
    for comparison in report.comparisons:
        if not comparison.comparable:
            continue
        matrix[comparison.student1][comparison.student2] = comparison.similarity
        matrix[comparison.student2][comparison.student1] = comparison.similarity
    return matrix


def build_report(
    comparisons: list[ComparisonResult],
    average_similarity: int,
    findings: Iterable[DefaultImplementationFinding] = (),
    threshold: int = DEFAULT_THRESHOLD,
    early_exit: bool = False,
    perfect_match: StudentPair | None = None,
    integrity_threshold: int = INTEGRITY_THRESHOLD,
) -> SimilarityReport:
    """Assemble the final report; only findings with matches are kept."""
    return SimilarityReport(
        timestamp=datetime.now(timezone.utc),
        threshold=threshold,
        integrity_threshold=integrity_threshold,
        comparisons=comparisons,
        high_similarity_pairs=high_similarity(comparisons, threshold),
        average_similarity=average_similarity,
        early_exit=early_exit,
        perfect_match=perfect_match,
        default_implementations={
            finding.student_id: finding
            for finding in findings
            if finding.default_functions
        },
    )


def format_similarity_summary(report: SimilarityReport) -> list[str]:
    """
    Build the console summary of a similarity analysis.

    Returns:
        Lines to print, without trailing newlines
    """
    lines = ["", "=== Similarity Analysis Summary ==="]

    if report.early_exit and report.perfect_match:
        lines.append("Analysis stopped early after finding a 100% match between:")
        lines.append(f"{report.perfect_match.student1} and {report.perfect_match.student2}")

    lines.append(f"Average similarity: {report.average_similarity}%")

    highest = find_highest_similarity_per_student(report.high_similarity_pairs)
    lines.append(f"High similarity pairs: {len(highest)}")

    if highest:
        lines.append("")
        lines.append("Top high similarity pairs:")
        for index, pair in enumerate(highest[:5], 1):
            lines.append(f"{index}. {pair.student1} - {pair.student2}: {pair.similarity}%")
        if len(highest) > 5:
            lines.append(f"... and {len(highest) - 5} more pairs.")

    findings = report.default_implementations
    if findings:
        whole_file = [
            f for f in findings.values()
            if f.whole_copy_paste or len(f.default_functions) >= WHOLE_FILE_FUNCTION_COUNT
        ]
        lines.append(f"Students with default implementations: {len(findings)}")
        if whole_file:
            lines.append(f"⚠️ Students who submitted the reference file: {len(whole_file)}")

        lines.append("")
        lines.append("Top students with default implementations:")
        top = sorted(findings.values(), key=lambda f: len(f.default_functions), reverse=True)[:5]
        for finding in top:
            marker = " - UNMODIFIED DEFAULT FILE" if finding in whole_file else ""
            lines.append(
                f"  - {finding.student_id}: {len(finding.default_functions)} functions "
                f"({', '.join(finding.default_functions)}){marker}"
            )

    return lines


def print_similarity_summary(report: SimilarityReport) -> None:
    """Print the similarity summary to the console."""
    for line in format_similarity_summary(report):
        print(line)
