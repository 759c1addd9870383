import pytest
import requests
from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.testclient import TestClient

from conftest import FakeResponse, FakeSession, pdf, pdf_bytes
from gradeportal_core.client import EvaluationClient
from gradeportal_core.errors import ApplicationError, TransportError, ValidationError
from gradeportal_core.models import FileSelection, SelectedFile


def selection(*students):
    question = SelectedFile.from_bytes("q.txt", b"What is feudalism?", "text/plain")
    return FileSelection(question=question, students=list(students) or [pdf_bytes("a.pdf", b"%PDF-1 answer")])


def test_payload_fields():
    client = EvaluationClient(base_url="http://svc", session=FakeSession(None))
    files, data = client.build_payload(
        selection(pdf_bytes("a.pdf", b"1"), pdf_bytes("b.pdf", b"2")),
        use_openai=True,
        use_vision=False,
        fields={"course": "HIST101"},
    )
    assert [f[0] for f in files] == ["question_file", "student_files", "student_files"]
    assert files[1][1] == ("a.pdf", b"1", "application/pdf")
    assert data == {"course": "HIST101", "use_openai": "true", "use_vision": "false"}


def test_submit_against_stub(stub_client):
    response = stub_client.submit(selection(pdf_bytes("a.pdf", b"alpha"), pdf_bytes("b.pdf", b"beta")))
    assert response.success
    assert response.summary.total_students == 2
    assert [r.filename for r in response.results] == ["a.pdf", "b.pdf"]
    assert response.report_filename.endswith(".csv")


def test_submit_validates_before_network():
    session = FakeSession(FakeResponse(200, {"success": True}))
    client = EvaluationClient(base_url="http://svc", session=session)
    with pytest.raises(ValidationError):
        client.submit(FileSelection(question=pdf("q.pdf")))
    assert session.calls == []


def test_service_error_message_wins():
    app = FastAPI()

    @app.post("/upload")
    def upload():
        return JSONResponse(status_code=500, content={"success": False, "error": "scoring service unavailable"})

    client = EvaluationClient(base_url="http://testserver", session=TestClient(app))
    with pytest.raises(ApplicationError) as exc:
        client.submit(selection())
    assert exc.value.message == "scoring service unavailable"
    assert exc.value.status_code == 500


def test_non_json_error_body_gets_generic_message():
    app = FastAPI()

    @app.post("/upload")
    def upload():
        return PlainTextResponse("Bad gateway", status_code=502)

    client = EvaluationClient(base_url="http://testserver", session=TestClient(app))
    with pytest.raises(ApplicationError) as exc:
        client.submit(selection())
    assert exc.value.message == "Evaluation failed"


def test_fastapi_detail_used_when_no_error_field():
    session = FakeSession(FakeResponse(422, {"detail": "Field required"}))
    client = EvaluationClient(base_url="http://svc", session=session)
    with pytest.raises(ApplicationError) as exc:
        client.submit(selection())
    assert exc.value.message == "Field required"


def test_success_false_with_ok_status():
    session = FakeSession(FakeResponse(200, {"success": False}))
    client = EvaluationClient(base_url="http://svc", session=session)
    with pytest.raises(ApplicationError) as exc:
        client.submit(selection())
    assert exc.value.message == "Evaluation failed"


def test_network_failure_is_transport_error():
    client = EvaluationClient(base_url="http://svc", session=FakeSession(requests.ConnectionError("refused")))
    with pytest.raises(TransportError):
        client.submit(selection())


def test_unparseable_success_body_is_transport_error():
    client = EvaluationClient(base_url="http://svc", session=FakeSession(FakeResponse(200, ValueError("bad json"))))
    with pytest.raises(TransportError):
        client.submit(selection())


def test_shape_mismatch_is_transport_error(scenario_payload):
    scenario_payload["results"][0]["score"] = "high"
    client = EvaluationClient(base_url="http://svc", session=FakeSession(FakeResponse(200, scenario_payload)))
    with pytest.raises(TransportError):
        client.submit(selection())


def test_missing_summary_is_transport_error(scenario_payload):
    del scenario_payload["summary"]
    client = EvaluationClient(base_url="http://svc", session=FakeSession(FakeResponse(200, scenario_payload)))
    with pytest.raises(TransportError):
        client.submit(selection())


def test_null_lists_accepted(scenario_payload):
    scenario_payload["plagiarism"] = None
    client = EvaluationClient(base_url="http://svc", session=FakeSession(FakeResponse(200, scenario_payload)))
    assert client.submit(selection()).plagiarism == []


def test_check_health(stub_client):
    health = stub_client.check_health()
    assert health.healthy
    assert health.features["stub"] is True


def test_check_health_http_error():
    client = EvaluationClient(base_url="http://svc", session=FakeSession(FakeResponse(503, {"status": "down"})))
    with pytest.raises(ApplicationError):
        client.check_health()


def test_download_report_streams_to_disk(tmp_path):
    session = FakeSession(FakeResponse(200, chunks=[b"student_id,score\n", b"", b"S1,0.75\n"]))
    client = EvaluationClient(base_url="http://svc", session=session)

    path = client.download_report("report.csv", tmp_path / "out")

    assert path == tmp_path / "out" / "report.csv"
    assert path.read_bytes() == b"student_id,score\nS1,0.75\n"
    method, url, kwargs = session.calls[0]
    assert url == "http://svc/download-report/report.csv"
    assert kwargs["stream"] is True


def test_download_report_not_found(tmp_path):
    session = FakeSession(FakeResponse(404, {"detail": "Report not found"}))
    client = EvaluationClient(base_url="http://svc", session=session)
    with pytest.raises(ApplicationError) as exc:
        client.download_report("missing.csv", tmp_path)
    assert exc.value.message == "Report not found"


@pytest.mark.parametrize("filename", ["..", ".", "reports/", ""])
def test_download_report_rejects_directory_names(tmp_path, filename):
    session = FakeSession(FakeResponse(200, chunks=[b"data"]))
    client = EvaluationClient(base_url="http://svc", session=session)
    with pytest.raises(TransportError):
        client.download_report(filename, tmp_path)
    assert session.calls == []


def test_download_report_save_failure_is_transport_error(tmp_path):
    blocker = tmp_path / "out"
    blocker.write_text("a file where the directory should be")
    client = EvaluationClient(base_url="http://svc", session=FakeSession(FakeResponse(200, chunks=[b"data"])))
    with pytest.raises(TransportError):
        client.download_report("report.csv", blocker)


def test_download_report_closes_response(tmp_path):
    ok = FakeResponse(200, chunks=[b"data"])
    EvaluationClient(base_url="http://svc", session=FakeSession(ok)).download_report("r.csv", tmp_path)
    assert ok.closed

    missing = FakeResponse(404, {"detail": "Report not found"})
    with pytest.raises(ApplicationError):
        EvaluationClient(base_url="http://svc", session=FakeSession(missing)).download_report("r.csv", tmp_path)
    assert missing.closed


def test_numeric_identifiers_accepted(scenario_payload):
    scenario_payload["results"][0]["student_id"] = 101
    scenario_payload["plagiarism"] = [
        {"student_1": 101, "student_2": 102, "combined_similarity": 0.2, "is_plagiarism": False, "severity": "Low"},
    ]
    client = EvaluationClient(base_url="http://svc", session=FakeSession(FakeResponse(200, scenario_payload)))
    response = client.submit(selection())
    assert response.results[0].student_id == "101"
    assert (response.plagiarism[0].student_1, response.plagiarism[0].student_2) == ("101", "102")
