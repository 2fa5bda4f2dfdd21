from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from dotenv import load_dotenv
from pathlib import Path
from typing import Dict, List, Optional
import os
import logging

from similarity import (
    AnalysisConfig,
    DirectoryContentProvider,
    NothingToAnalyzeError,
    SimilarityAnalyzer,
    SimilarityReport,
    Submission,
    compare_artifact,
    load_config,
    print_similarity_summary,
    similarity_band,
)

# Configure logging to both file and console
LOG_DIR = os.getenv("LOG_DIR", "logs")
os.makedirs(LOG_DIR, exist_ok=True)

# Set log level from environment (default: INFO)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
log_level = getattr(logging, LOG_LEVEL, logging.INFO)

log_formatter = logging.Formatter(
    '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

root_logger = logging.getLogger()
root_logger.setLevel(log_level)

# Console handler (for docker logs)
console_handler = logging.StreamHandler()
console_handler.setFormatter(log_formatter)
root_logger.addHandler(console_handler)

# File handler (persistent logs)
log_file = os.path.join(LOG_DIR, "similarity.log")
file_handler = logging.FileHandler(log_file, encoding='utf-8')
file_handler.setFormatter(log_formatter)
root_logger.addHandler(file_handler)

# Configure uvicorn loggers to use the same format
for uvicorn_logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
    logging.getLogger(uvicorn_logger_name).handlers = [console_handler, file_handler]

logger = logging.getLogger(__name__)
logger.info(f"Logging initialized. Log file: {log_file}")

load_dotenv()
app = FastAPI()
CONFIG_FILE = os.getenv("SIMILARITY_CONFIG")
PRINT_SUMMARY = os.getenv("SIMILARITY_PRINT_SUMMARY", "false").lower() == "true"

config = load_config(CONFIG_FILE)
logger.info(
    f"Similarity config loaded from {CONFIG_FILE or 'defaults'}: "
    f"threshold={config.threshold}, batch_size={config.batch_size}"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class SubmissionPayload(BaseModel):
    student_id: str
    files: Dict[str, str] = Field(default_factory=dict)


class AnalyzeRequest(BaseModel):
    submissions: List[SubmissionPayload]
    reference: Optional[Dict[str, str]] = None   # path -> text
    threshold: Optional[int] = Field(default=None, ge=1, le=100)


class AnalyzeDirectoryRequest(BaseModel):
    submissions_dir: str
    students: List[str]
    reference_dir: Optional[str] = None
    threshold: Optional[int] = Field(default=None, ge=1, le=100)


class CompareRequest(BaseModel):
    first: str
    second: str


def _finish(report: SimilarityReport) -> SimilarityReport:
    if PRINT_SUMMARY:
        print_similarity_summary(report)
    return report


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/config", response_model=AnalysisConfig)
def get_config():
    """Текущая конфигурация анализа"""
    return config


@app.post("/similarity/analyze", response_model=SimilarityReport)
def analyze(request: AnalyzeRequest):
    """Анализ схожести для работ, переданных в теле запроса"""
    submissions = [
        Submission(student_id=s.student_id, files=s.files) for s in request.submissions
    ]
    reference = None
    if request.reference is not None:
        reference = Submission(student_id="reference", files=request.reference)

    logger.info(f"Similarity analysis requested for {len(submissions)} submissions")
    try:
        report = SimilarityAnalyzer(config).analyze(
            submissions, reference=reference, threshold=request.threshold
        )
    except NothingToAnalyzeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _finish(report)


@app.post("/similarity/analyze-directory", response_model=SimilarityReport)
def analyze_directory(request: AnalyzeDirectoryRequest):
    """Анализ схожести для работ, лежащих в каталоге <submissions_dir>/<student>/"""
    submissions_dir = Path(request.submissions_dir)
    if not submissions_dir.is_dir():
        raise HTTPException(status_code=404, detail="Каталог с работами не найден")

    reference_provider = None
    if request.reference_dir is not None:
        if not Path(request.reference_dir).is_dir():
            raise HTTPException(status_code=404, detail="Каталог с эталонным решением не найден")
        reference_provider = DirectoryContentProvider(request.reference_dir)

    logger.info(
        f"Directory similarity analysis requested: {submissions_dir}, "
        f"{len(request.students)} students"
    )
    try:
        report = SimilarityAnalyzer(config).analyze_from_provider(
            DirectoryContentProvider(submissions_dir),
            request.students,
            reference_provider=reference_provider,
            threshold=request.threshold,
        )
    except NothingToAnalyzeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _finish(report)


@app.post("/similarity/compare")
def compare(request: CompareRequest):
    """Сравнение двух фрагментов кода"""
    score = compare_artifact(request.first, request.second)
    return {"similarity": score, "band": similarity_band(score).value}
