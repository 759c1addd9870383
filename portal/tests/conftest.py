import pytest
from fastapi.testclient import TestClient

from gradeportal_core.client import EvaluationClient
from gradeportal_core.models import SelectedFile
from gradeportal_core.stub_service import create_app

MB = 1024 * 1024


def pdf(name: str = "answer.pdf", size: int = 1024) -> SelectedFile:
    """A selected PDF that only declares its size."""
    return SelectedFile(name=name, media_type="application/pdf", size=size)


def pdf_bytes(name: str, content: bytes) -> SelectedFile:
    return SelectedFile.from_bytes(name, content, "application/pdf")


class FakeResponse:
    def __init__(self, status_code=200, body=None, chunks=None):
        self.status_code = status_code
        self._body = body
        self._chunks = chunks or []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body

    def iter_content(self, chunk_size=1):
        yield from self._chunks


class FakeSession:
    """Stands in for requests.Session; returns or raises whatever it is given."""

    def __init__(self, result):
        self.result = result
        self.calls = []

    def _respond(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result

    def post(self, url, **kwargs):
        return self._respond("POST", url, **kwargs)

    def get(self, url, **kwargs):
        return self._respond("GET", url, **kwargs)


@pytest.fixture
def scenario_payload():
    return {
        "success": True,
        "summary": {"total_students": 2, "passed": 1, "failed": 1, "plagiarism_cases": 0},
        "results": [
            {"student_id": "S1", "score": 0.75, "grade": "B"},
            {"student_id": "S2", "score": 0.4, "grade": "F"},
        ],
        "plagiarism": [],
    }


@pytest.fixture
def stub_app():
    return create_app()


@pytest.fixture
def stub_client(stub_app):
    return EvaluationClient(base_url="http://testserver", session=TestClient(stub_app))
