"""OCR engines used when a pitch deck has no usable text layer."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Dict, List, Optional

import pytesseract
from google.api_core.exceptions import GoogleAPICallError, RetryError
from google.cloud import documentai
from google.oauth2 import service_account
from pdf2image import convert_from_bytes
from pdf2image.exceptions import PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError
from PIL import Image

from app.errors import OCRFailure


logger = logging.getLogger(__name__)

OCR_FAILED_PLACEHOLDER = "OCR failed to extract text from image"


@dataclass(frozen=True)
class OcrOutcome:
    text: str
    succeeded: bool


class OcrEngine:
    """Turns image or scanned-PDF bytes into text, raising :class:`OCRFailure`."""

    name = "base"

    def image_to_text(self, image_bytes: bytes) -> str:
        raise NotImplementedError

    def pdf_to_text(self, pdf_bytes: bytes) -> str:
        raise NotImplementedError


class TesseractOcrEngine(OcrEngine):
    """Local OCR through Tesseract; PDFs are rasterized with Poppler first."""

    name = "tesseract"

    def __init__(
        self,
        *,
        max_pages: int = 5,
        dpi: int = 200,
        timeout_seconds: float = 30.0,
        lang: str = "eng",
    ) -> None:
        self.max_pages = max(1, max_pages)
        self.dpi = dpi
        self.timeout_seconds = timeout_seconds
        self.lang = lang

    def image_to_text(self, image_bytes: bytes) -> str:
        try:
            with Image.open(BytesIO(image_bytes)) as image:
                return self._recognize(image)
        except (OSError, RuntimeError, ValueError) as exc:
            raise OCRFailure(f"Tesseract could not read image: {exc}") from exc

    def pdf_to_text(self, pdf_bytes: bytes) -> str:
        try:
            images = convert_from_bytes(
                pdf_bytes, dpi=self.dpi, first_page=1, last_page=self.max_pages
            )
        except (PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError, OSError) as exc:
            raise OCRFailure(f"Failed to render PDF pages for OCR: {exc}") from exc

        parts: List[str] = []
        for index, image in enumerate(images, start=1):
            try:
                text = self._recognize(image)
            except (OSError, RuntimeError) as exc:
                logger.warning("OCR failed on page %s: %s", index, exc)
                continue
            parts.append(f"--- Slide {index} ---\n{text.strip()}")
        if not parts:
            raise OCRFailure("Tesseract produced no text for any rendered page")
        return "\n".join(parts)

    def _recognize(self, image: Image.Image) -> str:
        # pytesseract raises RuntimeError once the timeout elapses.
        return pytesseract.image_to_string(image, lang=self.lang, timeout=self.timeout_seconds) or ""


class DocumentAiOcrEngine(OcrEngine):
    """OCR through a Google Document AI processor."""

    name = "document_ai"

    def __init__(
        self,
        *,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        processor_id: Optional[str] = None,
        credentials_path: Optional[str] = None,
        timeout_seconds: float = 30.0,
        client: Optional[documentai.DocumentProcessorServiceClient] = None,
    ) -> None:
        if not processor_id:
            raise ValueError("DocumentAiOcrEngine requires a Document AI processor id")
        if "/" not in processor_id and (not project_id or not location):
            raise ValueError(
                "DocumentAiOcrEngine requires GCP project and location for a short processor id"
            )

        client_kwargs: Dict[str, Any] = {}
        if credentials_path:
            client_kwargs["credentials"] = service_account.Credentials.from_service_account_file(
                credentials_path
            )

        self.client = client or documentai.DocumentProcessorServiceClient(**client_kwargs)
        self.timeout_seconds = timeout_seconds
        if "/" in processor_id:
            # Fully-qualified processor name supplied via configuration.
            self.processor_name = processor_id
        else:
            self.processor_name = self.client.processor_path(project_id, location, processor_id)

    def image_to_text(self, image_bytes: bytes) -> str:
        return self._process(image_bytes, self._image_mime_type(image_bytes))

    def pdf_to_text(self, pdf_bytes: bytes) -> str:
        return self._process(pdf_bytes, "application/pdf")

    def _process(self, content: bytes, mime_type: str) -> str:
        raw_document = documentai.RawDocument(content=content, mime_type=mime_type)
        request = documentai.ProcessRequest(name=self.processor_name, raw_document=raw_document)
        try:
            result = self.client.process_document(request=request, timeout=self.timeout_seconds)
        except (GoogleAPICallError, RetryError) as exc:
            raise OCRFailure(f"Document AI request failed: {exc}") from exc

        document = result.document
        if document is None:
            return ""
        return document.text or ""

    @staticmethod
    def _image_mime_type(image_bytes: bytes) -> str:
        try:
            with Image.open(BytesIO(image_bytes)) as image:
                image_format = image.format
        except OSError as exc:
            raise OCRFailure(f"Unrecognized image payload: {exc}") from exc
        return Image.MIME.get(image_format or "", "image/png")


def clean_ocr_text(text: str) -> str:
    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def run_ocr(engine: OcrEngine, data: bytes, *, source: str) -> OcrOutcome:
    """Run OCR over ``data`` and absorb failures into a placeholder outcome.

    ``source`` is ``"pdf"`` for whole documents and ``"image"`` for single
    embedded pictures.
    """

    reader = engine.pdf_to_text if source == "pdf" else engine.image_to_text
    try:
        text = clean_ocr_text(reader(data))
    except OCRFailure as exc:
        logger.warning(
            "OCR failed, using placeholder text",
            extra={"ocr_engine": engine.name, "ocr_source": source, "reason": exc.message},
        )
        return OcrOutcome(text=OCR_FAILED_PLACEHOLDER, succeeded=False)

    if not text:
        logger.info("OCR returned no text", extra={"ocr_engine": engine.name, "ocr_source": source})
        return OcrOutcome(text=OCR_FAILED_PLACEHOLDER, succeeded=False)
    return OcrOutcome(text=text, succeeded=True)
