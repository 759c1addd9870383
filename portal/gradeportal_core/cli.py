"""
Command line front end for the evaluation portal.

Usage:
    python portal/main.py health
    python portal/main.py evaluate -q question.pdf -s a.pdf b.pdf -o report.html
    python portal/main.py serve-stub --port 8000
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .client import EvaluationClient
from .config import config
from .errors import GradePortalError
from .health import UNREACHABLE_WARNING
from .models import SelectedFile
from .page import EvaluationPage

def parse_field(text: str) -> Tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got {text!r}")
    return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Submit grading jobs and render the evaluation report")
    parser.add_argument(
        "--service-url",
        default=config.EVALUATION_SERVICE_URL,
        help="Base URL of the evaluation service",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="Check that the evaluation service is reachable")

    evaluate = sub.add_parser("evaluate", help="Submit files for evaluation")
    evaluate.add_argument("-q", "--question", type=Path, required=True, help="Question file (PDF or TXT)")
    evaluate.add_argument("-s", "--students", type=Path, nargs="+", required=True, help="Student answer PDFs")
    evaluate.add_argument("--use-openai", action="store_true", help="Ask the service to use external scoring")
    evaluate.add_argument("--use-vision", action="store_true", help="Ask the service to use vision-based extraction")
    evaluate.add_argument(
        "-f", "--field",
        type=parse_field,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Extra form field sent with the submission",
    )
    evaluate.add_argument("-o", "--output", type=Path, help="Write the rendered HTML report here")
    evaluate.add_argument("-d", "--download", type=Path, help="Download the report artifact into this directory")

    stub = sub.add_parser("serve-stub", help="Run the stub evaluation service")
    stub.add_argument("--host", default="127.0.0.1")
    stub.add_argument("--port", type=int, default=8000)

    return parser


async def run_health(client: EvaluationClient) -> int:
    page = EvaluationPage(client=client)
    healthy = await page.health_probe.run()
    if healthy:
        print("Backend connection healthy")
        return 0
    print(page.view.notification.message)
    return 1


async def run_evaluate(args, client: EvaluationClient) -> int:
    page = EvaluationPage(client=client)
    view = page.view
    view.use_openai = args.use_openai
    view.use_vision = args.use_vision
    view.form_fields = dict(args.field)

    try:
        question = SelectedFile.from_path(args.question)
        students = [SelectedFile.from_path(p) for p in args.students]
    except OSError as e:
        print(f"Error: {e}")
        return 1

    page.select_question([question])
    page.select_students(students)

    # Health check runs alongside the submission and is collected afterwards
    health = await page.start()
    response = await page.submit()
    if view.notification is not None:
        print(view.notification.message)

    if args.output:
        args.output.write_text(page.render_html(), encoding="utf-8")
        print(f"Report view written to {args.output}")

    if not await health:
        print(UNREACHABLE_WARNING)

    if response is None:
        return 1

    if args.download and response.report_filename:
        try:
            path = client.download_report(response.report_filename, args.download)
            print(f"Report saved to {path}")
        except GradePortalError as e:
            print(f"Error: {e.message}")
            return 1

    return 0


def serve_stub(host: str, port: int) -> int:
    import uvicorn

    uvicorn.run("gradeportal_core.stub_service:app", host=host, port=port)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve-stub":
        return serve_stub(args.host, args.port)

    service_url = args.service_url.rstrip("/")
    try:
        config.validate(service_url)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    client = EvaluationClient(base_url=service_url)
    if args.command == "health":
        return asyncio.run(run_health(client))
    return asyncio.run(run_evaluate(args, client))


if __name__ == "__main__":
    sys.exit(main())
