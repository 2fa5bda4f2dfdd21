"""
Command line entry point.

Usage:
    similarity-check SUBMISSIONS_DIR [--threshold=N] [--reference=DIR] [--config=PATH]

Every subdirectory of SUBMISSIONS_DIR is one student's submission.
"""
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .analyzer import SimilarityAnalyzer
from .config import load_config, parse_threshold_arg
from .exceptions import ConfigError, NothingToAnalyzeError
from .providers import DirectoryContentProvider
from .report import print_similarity_summary

logger = logging.getLogger(__name__)


def _option(args: List[str], name: str) -> Optional[str]:
    prefix = f"--{name}="
    value = next((arg[len(prefix):] for arg in args if arg.startswith(prefix)), None)
    return value or None


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run an analysis over a submissions directory and print the summary.

    Returns:
        Process exit code: 0 on success, 1 if nothing could be analyzed
    """
    args = list(sys.argv[1:] if argv is None else argv)

    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )

    positional = [arg for arg in args if not arg.startswith("--")]
    if not positional:
        logger.error("Usage: similarity-check SUBMISSIONS_DIR [--threshold=N] [--reference=DIR]")
        return 1

    submissions_dir = Path(positional[0])
    if not submissions_dir.is_dir():
        logger.error(f"Submissions directory not found: {submissions_dir}")
        return 1

    try:
        config = load_config(_option(args, "config") or os.getenv("SIMILARITY_CONFIG"))
    except ConfigError as e:
        logger.error(str(e))
        return 1

    threshold = parse_threshold_arg(args, default=config.threshold)
    logger.info(f"Using similarity threshold: {threshold}%")

    reference_provider = None
    reference_dir = _option(args, "reference")
    if reference_dir is not None:
        if not Path(reference_dir).is_dir():
            logger.error(f"Reference directory not found: {reference_dir}")
            return 1
        reference_provider = DirectoryContentProvider(reference_dir)

    students = sorted(p.name for p in submissions_dir.iterdir() if p.is_dir())
    try:
        report = SimilarityAnalyzer(config).analyze_from_provider(
            DirectoryContentProvider(submissions_dir),
            students,
            reference_provider=reference_provider,
            threshold=threshold,
        )
    except NothingToAnalyzeError as e:
        logger.error(str(e))
        return 1

    print_similarity_summary(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
