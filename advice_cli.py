"""Command-line client: extract a PDF report and ask Gemini for advice directly."""

import argparse
import sys
from typing import List, Optional

from dotenv import load_dotenv

from advice_errors import (
    AdviceRequestError,
    ConfigurationError,
    ExtractionError,
    InvalidInputError,
    UnexpectedResponseShapeError,
)
from advice_settings import Settings
from llm_client import (
    EXTRACTION_FAILED_MESSAGE,
    FETCH_FAILED_MESSAGE,
    NO_ADVICE_PLACEHOLDER,
    UNEXPECTED_RESPONSE_MESSAGE,
    request_advice,
)
from log_setup import setup_logging
from text_utils import pdf_to_text


def positive_seconds(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number of seconds: {value!r}")
    if seconds <= 0:
        raise argparse.ArgumentTypeError(f"timeout must be greater than zero, got {value}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="med-advice",
        description="Extract the text of a PDF medical report and ask Gemini for advice.",
    )
    parser.add_argument("report", help="path to the PDF report")
    parser.add_argument(
        "--text-only",
        action="store_true",
        help="print the extracted text and skip the advice request",
    )
    parser.add_argument("--timeout", type=positive_seconds, help="seconds to wait for Gemini")
    parser.add_argument("--log-level", default="WARNING", help="logging level (default: WARNING)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv()
    setup_logging(args.log_level)

    try:
        with open(args.report, "rb") as f:
            data = f.read()
    except OSError as exc:
        print(f"Failed to read the PDF file: {exc}", file=sys.stderr)
        return 2

    try:
        text = pdf_to_text(data)
    except ExtractionError:
        print(EXTRACTION_FAILED_MESSAGE, file=sys.stderr)
        return 1

    if args.text_only:
        print(text, end="")
        return 0

    try:
        settings = Settings.from_env()
    except ConfigurationError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    if args.timeout is not None:
        settings.timeout = args.timeout

    try:
        advice = request_advice(
            text,
            settings.api_key,
            model=settings.model,
            api_base=settings.api_base,
            timeout=settings.timeout,
        )
    except InvalidInputError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except UnexpectedResponseShapeError:
        print(UNEXPECTED_RESPONSE_MESSAGE, file=sys.stderr)
        return 1
    except AdviceRequestError:
        print(FETCH_FAILED_MESSAGE, file=sys.stderr)
        return 1

    print(advice or NO_ADVICE_PLACEHOLDER)
    return 0


if __name__ == "__main__":
    sys.exit(main())
