"""
Score adjustment based on similarity findings.

This module contains pure functions for the grading step that consumes a
SimilarityReport: deductions for unmodified starter code and the
academic integrity override for high pair similarity.
"""
from .models import DefaultImplementationFinding, SimilarityReport
from .report import WHOLE_FILE_FUNCTION_COUNT, find_highest_similarity_per_student

# Best pair similarity at which a grade is zeroed; separate from the
# integrity classification threshold in report.py
AUTO_ZERO_THRESHOLD = 80


def is_reference_submission(
    finding: DefaultImplementationFinding,
    whole_file_function_count: int = WHOLE_FILE_FUNCTION_COUNT
) -> bool:
    """
    Whether a finding means the student handed in the reference file.

    Examples:
        >>> is_reference_submission(DefaultImplementationFinding(student_id="s", whole_copy_paste=True))
        True
        >>> is_reference_submission(DefaultImplementationFinding(student_id="s", default_functions=["f"]))
        False
    """
    return finding.whole_copy_paste or len(finding.default_functions) >= whole_file_function_count


def calculate_default_deduction(
    finding: DefaultImplementationFinding,
    unimplemented_count: int,
    points_per_function: int = 5,
    max_deduction: int = 25,
    full_deduction: int = 30,
    whole_file_function_count: int = WHOLE_FILE_FUNCTION_COUNT
) -> int:
    """
    Calculate points deducted for unimplemented or default functions.

    Args:
        finding: Reference check result for the student
        unimplemented_count: Functions not implemented, default ones included
        points_per_function: Points per unimplemented function
        max_deduction: Cap for the per-function deduction
        full_deduction: Deduction when the reference file was submitted
        whole_file_function_count: Default functions that count as the reference file

    Returns:
        Points to deduct

    Examples:
        >>> f = DefaultImplementationFinding(student_id="s", default_functions=["a", "b"])
        >>> calculate_default_deduction(f, 2)
        10
        >>> calculate_default_deduction(f, 9)
        25
    """
    if is_reference_submission(finding, whole_file_function_count):
        return full_deduction
    return min(max(unimplemented_count, 0) * points_per_function, max_deduction)


def best_match_by_student(report: SimilarityReport) -> dict[str, tuple[str, int]]:
    """
    Each student's best high-similarity partner.

    Returns:
        {student_id: (other_student_id, similarity)}
    """
    matches: dict[str, tuple[str, int]] = {}
    for pair in report.high_similarity_pairs:
        for student in (pair.student1, pair.student2):
            current = matches.get(student)
            if current is None or pair.similarity > current[1]:
                matches[student] = (pair.other(student), pair.similarity)
    return matches


def apply_integrity_override(
    score: float,
    best_similarity: int | None,
    threshold: int = AUTO_ZERO_THRESHOLD
) -> float:
    """
    Zero a score when the student's best pair similarity meets the threshold.

    Examples:
        >>> apply_integrity_override(27.5, 96)
        0
        >>> apply_integrity_override(27.5, 40)
        27.5
        >>> apply_integrity_override(27.5, None)
        27.5
    """
    if best_similarity is not None and best_similarity >= threshold:
        return 0
    return score


def flagged_students(report: SimilarityReport, threshold: int = AUTO_ZERO_THRESHOLD) -> set[str]:
    """Students appearing in a best-match row at or above the threshold."""
    return {
        student
        for row in find_highest_similarity_per_student(report.high_similarity_pairs)
        if row.similarity >= threshold
        for student in (row.student1, row.student2)
    }
