"""
Pairwise comparison of submissions.

This module combines the Jaccard and Levenshtein scorers into a single
0-100 score for one artifact, and into a weighted score across several
files of two submissions.
"""
import logging
from dataclasses import dataclass, field

from .models import ComparisonResult, FileSpec, Submission
from .normalizer import normalize
from .scorers import jaccard, levenshtein_similarity, round_half_up

logger = logging.getLogger(__name__)

JACCARD_WEIGHT = 0.7
LEVENSHTEIN_WEIGHT = 0.3


@dataclass
class ArtifactScore:
    """Weighted score of a multi-file comparison."""
    similarity: int
    comparable: bool
    details: dict[str, int] = field(default_factory=dict)  # only comparable files


def _to_percent(ratio: float) -> int:
    return max(0, min(100, round_half_up(ratio * 100)))


def artifact_ratio(content_a: str, content_b: str) -> float:
    """Combined similarity of two source texts as a ratio in [0, 1]."""
    content_a = content_a or ""
    content_b = content_b or ""
    token_score = jaccard(normalize(content_a), normalize(content_b))
    edit_score = levenshtein_similarity(content_a, content_b)
    return JACCARD_WEIGHT * token_score + LEVENSHTEIN_WEIGHT * edit_score


def compare_artifact(content_a: str, content_b: str) -> int:
    """
    Compare two pieces of source code.

    score = 0.7 * jaccard + 0.3 * levenshtein, on a 0-100 scale, rounded.

    Args:
        content_a: First source text
        content_b: Second source text

    Returns:
        Integer score in [0, 100]

    Examples:
        >>> compare_artifact("let x = 1;", "let x = 1;")
        100
        >>> compare_artifact("", "let x = 1;")
        0
    """
    return _to_percent(artifact_ratio(content_a, content_b))


def compare_files(
    submission_a: Submission,
    submission_b: Submission,
    files: list[FileSpec]
) -> ArtifactScore:
    """
    Compare the configured files of two submissions.

    A file missing on either side is excluded from the weighted mean
    rather than scored as 0. If no included file carries weight, the
    result is 0 and marked non-comparable.

    Args:
        submission_a: First submission
        submission_b: Second submission
        files: Files to compare with their weights

    Returns:
        ArtifactScore with overall score and per-file breakdown
    """
    weighted_sum = 0.0
    total_weight = 0.0
    details: dict[str, int] = {}

    for spec in files:
        content_a = submission_a.get(spec.path)
        content_b = submission_b.get(spec.path)
        if content_a is None or content_b is None:
            logger.debug(
                f"Skipping {spec.path} for {submission_a.student_id} / "
                f"{submission_b.student_id}: file missing"
            )
            continue

        ratio = artifact_ratio(content_a, content_b)
        details[spec.path] = _to_percent(ratio)
        weighted_sum += ratio * spec.weight
        total_weight += spec.weight

    if total_weight <= 0:
        return ArtifactScore(similarity=0, comparable=False, details=details)

    return ArtifactScore(
        similarity=_to_percent(weighted_sum / total_weight),
        comparable=True,
        details=details,
    )


def compare_submissions(
    submission_a: Submission,
    submission_b: Submission,
    files: list[FileSpec]
) -> ComparisonResult:
    """
    Compare two submissions and wrap the score into a ComparisonResult.

    Never raises: a failure while scoring one pair is logged and the pair
    is reported as non-comparable, so a single bad submission cannot abort
    the whole run.
    """
    try:
        score = compare_files(submission_a, submission_b, files)
    except Exception as e:
        logger.error(
            f"Error comparing {submission_a.student_id} and {submission_b.student_id}: {e}",
            exc_info=True,
        )
        score = ArtifactScore(similarity=0, comparable=False)

    return ComparisonResult(
        student1=submission_a.student_id,
        student2=submission_b.student_id,
        similarity=score.similarity,
        comparable=score.comparable,
        details=score.details,
    )
