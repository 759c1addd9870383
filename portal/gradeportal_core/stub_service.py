"""
Stand-in for the evaluation service, for local development and tests.

Scores are derived from a hash of each upload, so the same files always get
the same results. Nothing here resembles real grading.
"""

import hashlib
import io
import logging
import uuid
from itertools import combinations
from typing import Dict, List, Optional

import pandas as pd
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

GRADE_BANDS = [(0.9, "A"), (0.8, "B"), (0.7, "C"), (0.6, "D")]


def grade_for(score: float) -> str:
    for cutoff, grade in GRADE_BANDS:
        if score >= cutoff:
            return grade
    return "F"


def _fraction(digest: str, start: int) -> float:
    return round(int(digest[start:start + 8], 16) / 0xFFFFFFFF, 3)

# ================= STATE MANAGEMENT =================
# In-memory report storage
class ReportStore:
    def __init__(self):
        self.reports: Dict[str, bytes] = {}

    def add(self, content: bytes) -> str:
        filename = f"evaluation_report_{uuid.uuid4().hex[:8]}.csv"
        self.reports[filename] = content
        return filename

    def get(self, filename: str) -> Optional[bytes]:
        return self.reports.get(filename)


def build_results(uploads: List[dict]) -> List[dict]:
    results = []
    for item in uploads:
        score = _fraction(item["digest"], 0)
        results.append({
            "student_id": item["student_id"],
            "filename": item["filename"],
            "score": score,
            "grade": grade_for(score),
            "metrics": {
                "tfidf_score": _fraction(item["digest"], 8),
                "sbert_score": _fraction(item["digest"], 16),
            },
            "feedback": f"Stub evaluation of {item['filename']}",
        })
    return results


def build_plagiarism(uploads: List[dict]) -> List[dict]:
    cases = []
    for a, b in combinations(uploads, 2):
        identical = a["digest"] == b["digest"]
        cases.append({
            "student_1": a["student_id"],
            "student_2": b["student_id"],
            "combined_similarity": 1.0 if identical else 0.0,
            "is_plagiarism": identical,
            "severity": "Critical" if identical else "Low",
            "common_phrases": [],
        })
    return cases


def build_report_csv(results: List[dict]) -> bytes:
    df = pd.DataFrame([
        {
            "student_id": r["student_id"],
            "filename": r["filename"],
            "score": r["score"],
            "grade": r["grade"],
            "tfidf_score": r["metrics"]["tfidf_score"],
            "sbert_score": r["metrics"]["sbert_score"],
            "feedback": r["feedback"],
        }
        for r in results
    ])
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")


def create_app() -> FastAPI:
    app = FastAPI(title="GradePortal Stub Evaluation Service")

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    store = ReportStore()
    app.state.reports = store

    # ================= ROUTES =================

    @app.get("/health")
    def health():
        return {"status": "healthy", "features": {"openai": False, "vision": False, "stub": True}}

    @app.post("/upload")
    async def upload(
        question_file: UploadFile = File(...),
        student_files: List[UploadFile] = File(...),
        use_openai: bool = Form(False),
        use_vision: bool = Form(False),
    ):
        logger.info(f"Received question {question_file.filename} and {len(student_files)} student file(s)")
        question = await question_file.read()
        if not question:
            return JSONResponse(status_code=400, content={"success": False, "error": "Question file is empty"})

        uploads = []
        for i, f in enumerate(student_files, 1):
            content = await f.read()
            if not content:
                return JSONResponse(status_code=400, content={"success": False, "error": f"File {f.filename} is empty"})
            uploads.append({
                "student_id": f"S{i}",
                "filename": f.filename,
                "digest": hashlib.sha256(content).hexdigest(),
            })

        results = build_results(uploads)
        plagiarism = build_plagiarism(uploads)
        passed = sum(1 for r in results if r["score"] >= 0.6)
        flagged = sum(1 for c in plagiarism if c["is_plagiarism"])

        return {
            "success": True,
            "summary": {
                "total_students": len(results),
                "passed": passed,
                "failed": len(results) - passed,
                "plagiarism_cases": flagged,
            },
            "results": results,
            "plagiarism": plagiarism,
            "report_filename": store.add(build_report_csv(results)),
            "options": {"use_openai": use_openai, "use_vision": use_vision},
        }

    @app.get("/download-report/{filename}")
    def download_report(filename: str):
        content = store.get(filename)
        if content is None:
            raise HTTPException(status_code=404, detail="Report not found")
        return Response(
            content=content,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return app


app = create_app()
