from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Submission content as loaded from a content provider
class Submission(BaseModel):
    model_config = ConfigDict(frozen=True)

    student_id: str
    files: Dict[str, str] = Field(default_factory=dict)  # relative path -> text

    def get(self, path: str) -> Optional[str]:
        """Return file content, or None if the submission has no such file."""
        return self.files.get(path)

# One file compared across a pair, with its weight in the overall score
class FileSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    weight: float = Field(default=1.0, ge=0)

# Result of comparing two submissions
class ComparisonResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    student1: str
    student2: str
    similarity: int = Field(ge=0, le=100)      # Overall score, 0-100
    comparable: bool = True                    # False when no file could be compared
    details: Dict[str, int] = Field(default_factory=dict)  # path -> per-file score

    def involves(self, student_id: str) -> bool:
        return student_id in (self.student1, self.student2)

    def other(self, student_id: str) -> str:
        return self.student2 if student_id == self.student1 else self.student1

    @property
    def pair_key(self) -> tuple[str, str]:
        return tuple(sorted((self.student1, self.student2)))

class StudentPair(BaseModel):
    model_config = ConfigDict(frozen=True)

    student1: str
    student2: str

# Per-student result of the reference (starter code) check
class DefaultImplementationFinding(BaseModel):
    model_config = ConfigDict(frozen=True)

    student_id: str
    default_functions: List[str] = Field(default_factory=list)
    whole_copy_paste: bool = False

# Everything handed over to the reporting layer
class SimilarityReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    threshold: int = 80
    integrity_threshold: int = 95           # Integrity classification cut-off
    comparisons: List[ComparisonResult] = Field(default_factory=list)
    high_similarity_pairs: List[ComparisonResult] = Field(default_factory=list)
    average_similarity: int = 0               # Mean over comparable pairs only
    early_exit: bool = False
    perfect_match: Optional[StudentPair] = None
    default_implementations: Dict[str, DefaultImplementationFinding] = Field(default_factory=dict)

    @property
    def comparable_count(self) -> int:
        return sum(1 for c in self.comparisons if c.comparable)
