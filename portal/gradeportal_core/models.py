import mimetypes
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, List, Optional, Tuple

from .config import config

# ================= SELECTION =================

class SelectedFile(BaseModel):
    name: str
    media_type: str = ""  # declared type, "" when unknown
    size: int = Field(ge=0)
    data: Optional[bytes] = None
    path: Optional[Path] = None

    @classmethod
    def from_path(cls, path) -> "SelectedFile":
        path = Path(path)
        media_type, _ = mimetypes.guess_type(path.name)
        return cls(name=path.name, media_type=media_type or "", size=path.stat().st_size, path=path)

    @classmethod
    def from_bytes(cls, name: str, data: bytes, media_type: Optional[str] = None) -> "SelectedFile":
        if media_type is None:
            media_type, _ = mimetypes.guess_type(name)
        return cls(name=name, media_type=media_type or "", size=len(data), data=data)

    def read(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is not None:
            return self.path.read_bytes()
        raise ValueError(f"File {self.name} has no content source")

    def as_upload(self, field_name: str) -> Tuple[str, Tuple[str, bytes, str]]:
        return field_name, (self.name, self.read(), self.media_type or "application/octet-stream")


class FileSelection(BaseModel):
    question: Optional[SelectedFile] = None
    students: List[SelectedFile] = Field(default_factory=list)

    @property
    def total_student_size(self) -> int:
        return sum(f.size for f in self.students)

# ================= RESPONSE =================

class Metrics(BaseModel):
    tfidf_score: Optional[float] = None   # lexical similarity
    sbert_score: Optional[float] = None   # semantic similarity


class EvaluationResult(BaseModel):
    # Services may send numeric student identifiers
    model_config = ConfigDict(coerce_numbers_to_str=True)

    student_id: str
    filename: str = ""
    score: float = Field(ge=0.0, le=1.0)
    grade: str
    metrics: Optional[Metrics] = None
    feedback: Optional[str] = None

    @property
    def passed(self) -> bool:
        # Independent of grade on purpose: the engine's grade bands may not match this cut
        return self.score >= config.PASS_THRESHOLD


class PlagiarismCase(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    student_1: str
    student_2: str
    combined_similarity: float = Field(ge=0.0, le=1.0)
    is_plagiarism: bool = False
    severity: str = ""
    common_phrases: List[str] = Field(default_factory=list)

    @field_validator("common_phrases", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return [] if v is None else v

    @property
    def is_critical(self) -> bool:
        return self.severity == "Critical"


class SummaryStats(BaseModel):
    total_students: int
    passed: int
    failed: int
    plagiarism_cases: int


class EvaluationResponse(BaseModel):
    success: bool
    summary: Optional[SummaryStats] = None
    results: List[EvaluationResult] = Field(default_factory=list)
    plagiarism: List[PlagiarismCase] = Field(default_factory=list)
    report_filename: Optional[str] = None
    error: Optional[str] = None

    @field_validator("results", "plagiarism", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return [] if v is None else v

    @model_validator(mode="after")
    def summary_required_on_success(self):
        if self.success and self.summary is None:
            raise ValueError("summary is required when success is true")
        return self


class HealthStatus(BaseModel):
    status: str
    features: Optional[Any] = None

    @property
    def healthy(self) -> bool:
        return self.status == "healthy"
