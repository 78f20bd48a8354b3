import io
import logging
from typing import Iterator, List

from PyPDF2 import PdfReader

from advice_errors import ExtractionError

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


def page_fragments(page) -> Iterator[str]:
    """Yield a page's text fragments in reading order.

    Each non-blank line is followed by an empty end-of-line marker.
    """
    txt = page.extract_text() or ""
    for line in txt.splitlines():
        line = line.strip()
        if line:
            yield line
            yield ""


def pdf_to_text(pdf_bytes: bytes) -> str:
    """Concatenate the text of every page, in page order.

    Fragments within a page are joined with single spaces and every page is
    followed by a blank line. A document without pages gives an empty string.

    Raises:
        ExtractionError: If the document cannot be opened or any page fails
            to decode. No partial text is returned.
    """
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
        page_count = len(reader.pages)
    except Exception as exc:
        logger.error("Could not open PDF (%d bytes): %s", len(pdf_bytes or b""), exc)
        raise ExtractionError("Failed to read the PDF file.") from exc

    page_texts: List[str] = []
    for page_num in range(1, page_count + 1):
        try:
            page = reader.pages[page_num - 1]
            page_texts.append(" ".join(page_fragments(page)))
        except Exception as exc:
            logger.error("Failed to decode page %d of %d: %s", page_num, page_count, exc)
            raise ExtractionError(f"Error extracting text from page {page_num}.") from exc

    text = "".join(t + PAGE_SEPARATOR for t in page_texts)
    logger.info("Extracted %d characters from %d page(s)", len(text), page_count)
    return text
