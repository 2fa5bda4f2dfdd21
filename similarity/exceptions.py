"""
Exceptions raised by the similarity engine.

Scoring functions never raise; only orchestration and configuration do.
"""


class SimilarityError(Exception):
    """Base class for similarity engine errors."""


class NothingToAnalyzeError(SimilarityError):
    """Raised when an analysis is requested over zero submissions."""

    def __init__(self, message: str = "Нет работ для анализа: список студентов пуст"):
        super().__init__(message)


class ConfigError(SimilarityError):
    """Raised when the analysis configuration cannot be loaded or is invalid."""
