import io
import logging
import re
from typing import Optional

import docx
import pdfplumber

logger = logging.getLogger('extractor')


class ResumeExtractor:
    """Pull plain text out of an uploaded resume for question personalization."""

    def __init__(self):
        self.supported_formats = {'.pdf', '.docx', '.txt'}

    def extract_text(self, file_bytes: bytes, filename: str) -> Optional[str]:
        """Extract text from a PDF, DOCX or TXT upload.

        Raises ValueError for unsupported extensions. Returns None when the
        file cannot be read or holds no text.
        """
        file_ext = self._get_file_extension(filename)

        if file_ext not in self.supported_formats:
            raise ValueError(f"Unsupported file format: {file_ext or filename}")

        try:
            if file_ext == '.pdf':
                text = self._extract_from_pdf(file_bytes)
            elif file_ext == '.docx':
                text = self._extract_from_docx(file_bytes)
            else:
                text = file_bytes.decode('utf-8', errors='replace')
        except Exception as e:
            logger.error(f"Error extracting text from {filename}: {str(e)}")
            return None

        text = self._clean_text(text)
        if not text:
            logger.warning(f"No text found in {filename}")
            return None
        return text

    def _get_file_extension(self, filename: str) -> str:
        """Get the lowercase file extension including the dot."""
        dot = filename.rfind('.')
        return filename[dot:].lower() if dot != -1 else ""

    def _extract_from_pdf(self, file_bytes: bytes) -> str:
        with pdfplumber.open(io.BytesIO(file_bytes)) as pdf:
            return " ".join(page.extract_text() or "" for page in pdf.pages)

    def _extract_from_docx(self, file_bytes: bytes) -> str:
        document = docx.Document(io.BytesIO(file_bytes))
        return " ".join(paragraph.text for paragraph in document.paragraphs)

    def _clean_text(self, text: str) -> str:
        """Collapse whitespace and drop characters that only add noise to a prompt."""
        text = re.sub(r'\s+', ' ', text)
        text = re.sub(r'[^\w\s.,()@+#/:%&\'-]', '', text)
        return text.strip()
