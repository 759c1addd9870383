import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError as SchemaError

from .config import config
from .errors import ApplicationError, TransportError
from .models import EvaluationResponse, FileSelection, HealthStatus
from .renderer import download_href
from .validator import ensure_valid
from .view import QUESTION_FIELD, STUDENT_FIELD

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Evaluation failed"


def _form_bool(value: bool) -> str:
    return "true" if value else "false"


def _json_or_none(response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(body: Any, default: str = GENERIC_FAILURE) -> str:
    """Most specific message a failure body offers ("error", then FastAPI's "detail")."""
    if isinstance(body, dict):
        for key in ("error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return default


class EvaluationClient:
    """
    HTTP boundary to the evaluation service.
    Every response is narrowed to a typed model here; anything else becomes
    a TransportError or ApplicationError.
    """

    def __init__(self, base_url: Optional[str] = None, session=None):
        self.base_url = (base_url or config.EVALUATION_SERVICE_URL).rstrip("/")
        self.session = session if session is not None else requests.Session()

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def download_url(self, filename: str) -> str:
        return download_href(filename, self.base_url)

    # ================= SUBMISSION =================

    def build_payload(self, selection: FileSelection, use_openai: bool = False,
                      use_vision: bool = False, fields: Optional[Dict[str, str]] = None):
        try:
            files = [selection.question.as_upload(QUESTION_FIELD)]
            files.extend(f.as_upload(STUDENT_FIELD) for f in selection.students)
        except (OSError, ValueError) as e:
            raise TransportError(f"Could not read selected file: {e}") from e

        data = {k: str(v) for k, v in (fields or {}).items()}
        data["use_openai"] = _form_bool(use_openai)
        data["use_vision"] = _form_bool(use_vision)
        return files, data

    def submit(self, selection: FileSelection, use_openai: bool = False,
               use_vision: bool = False, fields: Optional[Dict[str, str]] = None) -> EvaluationResponse:
        ensure_valid(selection)
        files, data = self.build_payload(selection, use_openai, use_vision, fields)

        url = self.url(config.UPLOAD_PATH)
        logger.info(f"Submitting {len(selection.students)} student file(s) to {url}")
        try:
            response = self.session.post(url, files=files, data=data)
        except requests.RequestException as e:
            logger.error(f"Submission to {url} failed: {e}")
            raise TransportError(f"Unable to reach evaluation service ({e.__class__.__name__})") from e

        status = response.status_code
        body = _json_or_none(response)
        logger.info(f"Evaluation service responded with HTTP {status}")

        if not 200 <= status < 300:
            raise ApplicationError(_error_message(body), status_code=status)
        if not isinstance(body, dict):
            raise TransportError("Malformed response from evaluation service")
        if body.get("success") is not True:
            raise ApplicationError(_error_message(body), status_code=status)

        try:
            return EvaluationResponse.model_validate(body)
        except SchemaError as e:
            logger.error(f"Response failed schema validation: {e}")
            raise TransportError(
                f"Malformed response from evaluation service ({e.error_count()} invalid field(s))"
            ) from e

    # ================= HEALTH =================

    def check_health(self) -> HealthStatus:
        url = self.url(config.HEALTH_PATH)
        try:
            response = self.session.get(url, timeout=config.HEALTH_TIMEOUT)
        except requests.RequestException as e:
            raise TransportError(f"Unable to reach evaluation service ({e.__class__.__name__})") from e

        body = _json_or_none(response)
        if not 200 <= response.status_code < 300:
            raise ApplicationError(_error_message(body, "Health check failed"), status_code=response.status_code)
        try:
            return HealthStatus.model_validate(body)
        except SchemaError as e:
            raise TransportError("Malformed health response") from e

    # ================= REPORT =================

    def download_report(self, filename: str, output_dir) -> Path:
        """Stream the report artifact to output_dir and return the written path."""
        # Never let a served name escape the output directory
        name = os.path.basename(filename)
        if name in ("", ".", ".."):
            raise TransportError(f"Unusable report filename: {filename!r}")

        url = self.download_url(filename)
        logger.info(f"Downloading report from {url}")
        try:
            with self.session.get(url, stream=True) as response:
                if not 200 <= response.status_code < 300:
                    raise ApplicationError(
                        _error_message(_json_or_none(response), "Report download failed"),
                        status_code=response.status_code,
                    )

                output_dir = Path(output_dir)
                output_dir.mkdir(parents=True, exist_ok=True)
                file_path = output_dir / name
                with open(file_path, "wb") as f:
                    for chunk in response.iter_content(chunk_size=8192):
                        if chunk:
                            f.write(chunk)
        except requests.RequestException as e:
            raise TransportError(f"Report download failed ({e.__class__.__name__})") from e
        except OSError as e:
            raise TransportError(f"Could not save report: {e}") from e

        logger.info(f"Downloaded: {file_path.name} ({file_path.stat().st_size} bytes)")
        return file_path
