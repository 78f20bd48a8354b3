"""Exceptions raised while turning a PDF report into medical advice."""

from typing import Any, Optional


class AdviceServiceError(Exception):
    """Base exception for the advice service."""

    pass


class ExtractionError(AdviceServiceError):
    """Raised when a PDF cannot be opened or one of its pages cannot be decoded."""

    pass


class InvalidInputError(AdviceServiceError):
    """Raised when no text is supplied for analysis."""

    pass


class ConfigurationError(AdviceServiceError):
    """Raised when required configuration (the API key) is missing or malformed."""

    pass


class AdviceRequestError(AdviceServiceError):
    """Base class for failures of the upstream advice call."""

    pass


class NetworkError(AdviceRequestError):
    """Raised on transport failures (DNS, connection refused, TLS...)."""

    pass


class UpstreamTimeoutError(NetworkError):
    """Raised when the upstream call does not complete within the timeout."""

    pass


class UpstreamError(AdviceRequestError):
    """Raised when the AI service answers with a non-2xx status."""

    def __init__(self, status_code: int, body: Optional[Any] = None):
        super().__init__(f"Upstream returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class UnexpectedResponseShapeError(AdviceRequestError):
    """Raised when a 2xx response lacks the expected candidate structure."""

    pass
