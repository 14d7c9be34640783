"""DOCX to module content conversion.

Module content is stored as a string; this module only extracts the text of
uploaded Word documents so a teacher can paste it into a module.
"""

import io
import logging

from docx import Document as DocxDocument

from core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def extract_docx_text(payload: bytes) -> str:
    """Extract paragraph text from a DOCX payload.

    Args:
        payload: Raw bytes of a .docx file.

    Returns:
        Paragraph texts joined by newlines.

    Raises:
        ValidationError: If the payload is not a readable DOCX document.
    """
    try:
        doc = DocxDocument(io.BytesIO(payload))
    except Exception as e:
        # python-docx surfaces zip, xml and package errors with several types
        raise ValidationError("Could not read the document. Is it a .docx file?") from e

    text = "\n".join(paragraph.text for paragraph in doc.paragraphs)
    logger.info("Extracted %d characters from DOCX", len(text))
    return text
