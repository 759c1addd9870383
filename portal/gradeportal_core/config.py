import os
from urllib.parse import urlparse
from dotenv import load_dotenv

load_dotenv()

class Config:
    # Evaluation service
    EVALUATION_SERVICE_URL = os.getenv("EVALUATION_SERVICE_URL", "http://127.0.0.1:8000").rstrip("/")
    UPLOAD_PATH = os.getenv("UPLOAD_PATH", "/upload")
    HEALTH_PATH = os.getenv("HEALTH_PATH", "/health")
    DOWNLOAD_PATH = os.getenv("DOWNLOAD_PATH", "/download-report")

    # Only the health probe gets a timeout; submissions use the transport default
    HEALTH_TIMEOUT = float(os.getenv("HEALTH_TIMEOUT", "5"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Fixed limits
    MAX_FILE_SIZE = 50 * 1024 * 1024  # 50MB in bytes
    PASS_THRESHOLD = 0.6
    QUESTION_TYPES = ("application/pdf", "text/plain")
    STUDENT_TYPE = "application/pdf"

    @classmethod
    def validate(cls, service_url=None):
        """Validate required configuration"""
        url = service_url or cls.EVALUATION_SERVICE_URL
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"EVALUATION_SERVICE_URL must be an http(s) URL, got {url!r}")
        return True

config = Config()
