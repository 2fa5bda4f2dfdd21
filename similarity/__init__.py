"""
Similarity analysis for student code submissions.

This package compares every pair of submissions to detect copying and
compares each submission against a reference implementation to detect
unmodified starter code:
- normalizer: comment/whitespace stripping and tokenization
- scorers: Jaccard and Levenshtein similarity
- comparator: combined per-file and per-submission scores
- reference: function extraction and default implementation detection
- scheduler: batched pairwise comparison with early exit
- report: report assembly, rankings, bands and console summary
- adjustment: grade adjustments driven by the report
- analyzer: orchestrator for a full analysis run
- cli: similarity-check command line entry point
"""

from .normalizer import (
    normalize,
    normalize_for_distance,
    strip_comments,
)

from .scorers import (
    jaccard,
    levenshtein_distance,
    levenshtein_similarity,
    round_half_up,
)

from .comparator import (
    ArtifactScore,
    compare_artifact,
    compare_files,
    compare_submissions,
)

from .reference import (
    ReferenceImplementation,
    detect_default_implementation,
    extract_function,
)

from .scheduler import (
    RunningStats,
    enumerate_pairs,
    run_batches,
    DEFAULT_BATCH_SIZE,
)

from .report import (
    SimilarityBand,
    similarity_band,
    high_similarity,
    find_highest_similarity_per_student,
    is_integrity_violation,
    integrity_violations,
    build_similarity_matrix,
    build_report,
    format_similarity_summary,
    print_similarity_summary,
)

from .adjustment import (
    AUTO_ZERO_THRESHOLD,
    calculate_default_deduction,
    apply_integrity_override,
    best_match_by_student,
    flagged_students,
    is_reference_submission,
)

from .models import (
    Submission,
    FileSpec,
    ComparisonResult,
    StudentPair,
    DefaultImplementationFinding,
    SimilarityReport,
)

from .providers import (
    ContentProvider,
    InMemoryContentProvider,
    DirectoryContentProvider,
    load_submissions,
)

from .config import (
    AnalysisConfig,
    load_config,
    parse_threshold_arg,
)

from .exceptions import (
    SimilarityError,
    NothingToAnalyzeError,
    ConfigError,
)

from .analyzer import SimilarityAnalyzer

__all__ = [
    # normalizer
    "normalize",
    "normalize_for_distance",
    "strip_comments",
    # scorers
    "jaccard",
    "levenshtein_distance",
    "levenshtein_similarity",
    "round_half_up",
    # comparator
    "ArtifactScore",
    "compare_artifact",
    "compare_files",
    "compare_submissions",
    # reference
    "ReferenceImplementation",
    "detect_default_implementation",
    "extract_function",
    # scheduler
    "RunningStats",
    "enumerate_pairs",
    "run_batches",
    "DEFAULT_BATCH_SIZE",
    # report
    "SimilarityBand",
    "similarity_band",
    "high_similarity",
    "find_highest_similarity_per_student",
    "is_integrity_violation",
    "integrity_violations",
    "build_similarity_matrix",
    "build_report",
    "format_similarity_summary",
    "print_similarity_summary",
    # adjustment
    "AUTO_ZERO_THRESHOLD",
    "calculate_default_deduction",
    "apply_integrity_override",
    "best_match_by_student",
    "flagged_students",
    "is_reference_submission",
    # models
    "Submission",
    "FileSpec",
    "ComparisonResult",
    "StudentPair",
    "DefaultImplementationFinding",
    "SimilarityReport",
    # providers
    "ContentProvider",
    "InMemoryContentProvider",
    "DirectoryContentProvider",
    "load_submissions",
    # config
    "AnalysisConfig",
    "load_config",
    "parse_threshold_arg",
    # exceptions
    "SimilarityError",
    "NothingToAnalyzeError",
    "ConfigError",
    # analyzer
    "SimilarityAnalyzer",
]
