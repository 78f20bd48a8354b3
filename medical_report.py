from dataclasses import dataclass
from typing import Optional

import requests

from advice_settings import Settings
from llm_client import request_advice
from text_utils import pdf_to_text


@dataclass
class ReportAnalysis:
    extracted_text: str
    advice: Optional[str]


def analyze_report(
    pdf_bytes: bytes,
    settings: Settings,
    session: Optional[requests.Session] = None,
) -> ReportAnalysis:
    """Extract the report's text, then ask for advice on it.

    An ExtractionError stops the flow before anything is sent upstream.
    """
    text = pdf_to_text(pdf_bytes)
    advice = request_advice(
        text,
        settings.api_key,
        model=settings.model,
        api_base=settings.api_base,
        timeout=settings.timeout,
        session=session,
    )
    return ReportAnalysis(extracted_text=text, advice=advice)
