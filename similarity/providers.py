"""
Submission content providers.

A provider answers "what is the text of <path> in <student>'s submission?"
with the content or None. A missing file is not an error: it only makes
the file non-comparable.
"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, Optional

from .models import Submission

logger = logging.getLogger(__name__)


class ContentProvider(ABC):
    """Abstract source of submission files."""

    @abstractmethod
    def read(self, student_id: str, path: str) -> Optional[str]:
        """
        Read one file of one submission.

        :param student_id: Student identifier
        :param path: File path relative to the submission root
        :return: File text, or None if the file does not exist
        """
        pass

    def load(self, student_id: str, paths: Iterable[str]) -> Submission:
        """Read every requested file of a submission once."""
        files = {}
        for path in paths:
            content = self.read(student_id, path)
            if content is not None:
                files[path] = content
        return Submission(student_id=student_id, files=files)


class InMemoryContentProvider(ContentProvider):
    """Provider over already-loaded texts: {student_id: {path: text}}."""

    def __init__(self, contents: Dict[str, Dict[str, str]]):
        self.contents = contents

    def read(self, student_id: str, path: str) -> Optional[str]:
        return self.contents.get(student_id, {}).get(path)


class DirectoryContentProvider(ContentProvider):
    """Provider over a directory laid out as <root>/<student_id>/<path>."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def _resolve(self, student_id: str, path: str) -> Optional[Path]:
        candidate = (self.root / student_id / path).resolve()
        base = self.root.resolve()
        if base != candidate and base not in candidate.parents:
            logger.warning(f"Refusing to read {path} outside submissions root for {student_id}")
            return None
        return candidate

    def read(self, student_id: str, path: str) -> Optional[str]:
        file_path = self._resolve(student_id, path)
        if file_path is None:
            return None
        try:
            return file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug(f"{file_path} not found")
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {file_path}: {e}")
            return None


def load_submissions(
    provider: ContentProvider,
    student_ids: Iterable[str],
    paths: Iterable[str]
) -> list[Submission]:
    """Load every submission once, before any comparison starts."""
    paths = list(paths)
    return [provider.load(student_id, paths) for student_id in dict.fromkeys(student_ids)]
