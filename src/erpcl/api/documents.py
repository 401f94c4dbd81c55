"""Saving downloaded PDF documents."""

import json
import logging
from pathlib import Path

from erpcl.api.base import BinaryResponse
from erpcl.api.errors import ApiError

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


def pdf_content(response: BinaryResponse) -> bytes:
    """Return the PDF bytes of a download.

    The backend answers some PDF requests with a 200 JSON error body, so the
    content type is checked before anything is written.

    Raises:
        ApiError: If the response is not a PDF
    """
    if PDF_CONTENT_TYPE in (response.content_type or "").lower():
        return response.content

    message = "Response is not a PDF document"
    try:
        body = json.loads(response.content.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        body = None
    if isinstance(body, dict) and body.get("error"):
        message = str(body["error"])
    raise ApiError(message, response.status_code)


def save_pdf(response: BinaryResponse, destination: Path) -> Path:
    """Write a PDF download to ``destination`` and return the path.

    Raises:
        ApiError: If the response is not a PDF; nothing is written then
    """
    content = pdf_content(response)
    destination = Path(destination)
    destination.write_bytes(content)
    logger.info("Saved %d bytes to %s", len(content), destination)
    return destination
