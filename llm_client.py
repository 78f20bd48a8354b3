import logging
from typing import Any, Dict, Optional

import requests

from advice_errors import (
    ConfigurationError,
    InvalidInputError,
    NetworkError,
    UnexpectedResponseShapeError,
    UpstreamError,
    UpstreamTimeoutError,
)
from advice_settings import (
    DEFAULT_API_BASE,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT,
    MISSING_API_KEY_MESSAGE,
)

logger = logging.getLogger(__name__)

NO_TEXT_MESSAGE = "No text provided for analysis."
NO_ADVICE_PLACEHOLDER = "No advice available."
NO_FILE_MESSAGE = "Please select a PDF file first."
EXTRACTION_FAILED_MESSAGE = "Error extracting text from PDF."
UNEXPECTED_RESPONSE_MESSAGE = "Unexpected response from Gemini API."
FETCH_FAILED_MESSAGE = "Failed to fetch advice from Gemini AI."
ADVICE_INSTRUCTION = "Analyze the following medical report and provide medical advice:"


def mask_secret(message: str, secret: Optional[str]) -> str:
    """Hide an API key (and its prefix) inside an error or log message."""
    if not secret:
        return message
    message = message.replace(secret, "***MASKED***")
    if len(secret) > 10:
        message = message.replace(secret[:10], "***MASKED***")
    return message


def build_advice_prompt(text: str) -> str:
    return f"{ADVICE_INSTRUCTION}\n\n{text}"


def build_advice_payload(text: str) -> Dict[str, Any]:
    return {"contents": [{"parts": [{"text": build_advice_prompt(text)}]}]}


def parse_advice(payload: Any) -> Optional[str]:
    """Return the first candidate's text, or None when the service has no advice.

    A candidate's ``content`` is either plain text or a ``{"parts": [{"text": ...}]}``
    object; anything else is an unexpected shape.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("candidates"), list):
        raise UnexpectedResponseShapeError("Response has no candidates list")

    candidates = payload["candidates"]
    if not candidates:
        return None

    first = candidates[0]
    if not isinstance(first, dict):
        raise UnexpectedResponseShapeError("Candidate is not an object")

    content = first.get("content")
    if not content:
        return None
    if isinstance(content, str):
        return content
    if not isinstance(content, dict):
        raise UnexpectedResponseShapeError("Candidate content has an unknown type")

    parts = content.get("parts") or []
    if not isinstance(parts, list):
        raise UnexpectedResponseShapeError("Candidate parts is not a list")
    if parts and isinstance(parts[0], dict) and parts[0].get("text"):
        return parts[0]["text"]
    return None


def _error_body(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text or None


def request_advice(
    text: str,
    api_key: Optional[str],
    model: str = DEFAULT_MODEL,
    api_base: str = DEFAULT_API_BASE,
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> Optional[str]:
    """Ask the Gemini API for advice on a medical report.

    Sends exactly one request; nothing is retried.

    Returns:
        The first candidate's text, or None when the service returned no candidates.

    Raises:
        InvalidInputError: ``text`` is empty. No request is sent.
        ConfigurationError: ``api_key`` is missing. No request is sent.
        UpstreamTimeoutError: No answer within ``timeout`` seconds.
        NetworkError: Transport failure.
        UpstreamError: Non-2xx status, with the status code and body.
        UnexpectedResponseShapeError: 2xx answer without the candidate structure.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidInputError(NO_TEXT_MESSAGE)
    if not api_key:
        raise ConfigurationError(MISSING_API_KEY_MESSAGE)

    url = f"{api_base.rstrip('/')}/models/{model}:generateContent"
    http = session or requests

    logger.info("Requesting advice from %s (%d characters)", model, len(text))
    logger.debug("Extracted text: %s", text)

    try:
        resp = http.post(
            url,
            params={"key": api_key},
            headers={"Content-Type": "application/json"},
            json=build_advice_payload(text),
            timeout=timeout,
        )
    except requests.Timeout as exc:
        logger.error("Gemini API request timed out after %ss", timeout)
        raise UpstreamTimeoutError(f"No answer within {timeout} seconds") from exc
    except requests.RequestException as exc:
        error_msg = mask_secret(str(exc), api_key)
        logger.error("Gemini API request failed: %s", error_msg)
        raise NetworkError(error_msg) from exc

    if not 200 <= resp.status_code < 300:
        body = _error_body(resp)
        logger.error(
            "Gemini API returned an error: status=%s body=%s",
            resp.status_code,
            mask_secret(str(body), api_key),
        )
        raise UpstreamError(resp.status_code, body)

    try:
        data = resp.json()
    except ValueError as exc:
        logger.error("Gemini API returned a non-JSON body: %.200s", resp.text)
        raise UnexpectedResponseShapeError("Response body is not JSON") from exc

    logger.debug("Gemini API response: %s", data)

    try:
        return parse_advice(data)
    except UnexpectedResponseShapeError:
        logger.error("Unexpected response from Gemini API: %s", data)
        raise
