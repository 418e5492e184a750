"""Utilities for turning uploaded pitch decks into plain text."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import PurePath
from typing import Iterator, List

from pptx import Presentation
from pptx.enum.shapes import MSO_SHAPE_TYPE
from pypdf import PdfReader

from app.errors import ExtractionFailure, UnsupportedFormat
from app.models.analysis_models import ExtractionPath
from app.services.ocr import OCR_FAILED_PLACEHOLDER, OcrEngine, run_ocr


logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("pdf", "pptx")


def slide_marker(number: int) -> str:
    return f"--- Slide {number} ---"


def file_extension(filename: str) -> str:
    return PurePath(filename).suffix.lower().lstrip(".")


@dataclass(frozen=True)
class ExtractionResult:
    text: str
    path: ExtractionPath
    ocr_invocations: int = 0


class TextExtractor:
    """Extract text from PDF and PPTX buffers, falling back to OCR."""

    def __init__(self, ocr_engine: OcrEngine, *, min_pdf_text_chars: int = 100) -> None:
        self.ocr_engine = ocr_engine
        self.min_pdf_text_chars = min_pdf_text_chars

    def extract(self, file_bytes: bytes, extension: str) -> ExtractionResult:
        extension = extension.lower().lstrip(".")
        if extension == "pdf":
            result = self._extract_pdf(file_bytes)
        elif extension == "pptx":
            result = self._extract_pptx(file_bytes)
        else:
            raise UnsupportedFormat(extension)

        logger.info(
            "Extracted pitch deck text",
            extra={
                "extension": extension,
                "extraction_path": result.path.value,
                "text_length": len(result.text),
                "ocr_invocations": result.ocr_invocations,
            },
        )
        return result

    def _extract_pdf(self, file_bytes: bytes) -> ExtractionResult:
        try:
            pages = self._read_pdf_pages(file_bytes)
        except ExtractionFailure as exc:
            logger.warning("PDF text layer unreadable, attempting OCR: %s", exc.message)
            return self._ocr_fallback(file_bytes, source="pdf")

        body_length = sum(len(page) for page in pages)
        if body_length < self.min_pdf_text_chars:
            logger.info(
                "PDF seems to be image-based (%s chars of text). Attempting OCR...", body_length
            )
            return self._ocr_fallback(file_bytes, source="pdf")

        text = "\n\n".join(
            f"{slide_marker(number)}\n{page}" for number, page in enumerate(pages, start=1)
        )
        return ExtractionResult(text=text, path=ExtractionPath.EXTRACTED)

    def _read_pdf_pages(self, file_bytes: bytes) -> List[str]:
        try:
            reader = PdfReader(BytesIO(file_bytes))
            return [(page.extract_text() or "").strip() for page in reader.pages]
        except Exception as exc:  # pypdf has no common base error
            raise ExtractionFailure(f"pypdf failed to read document: {exc}") from exc

    def _extract_pptx(self, file_bytes: bytes) -> ExtractionResult:
        try:
            presentation = Presentation(BytesIO(file_bytes))
        except Exception as exc:  # zip, xml and package errors
            logger.warning("PPTX unreadable, attempting OCR: %s", exc)
            return self._ocr_fallback(file_bytes, source="image")

        lines: List[str] = []
        ocr_invocations = 0
        has_content = False
        for number, slide in enumerate(presentation.slides, start=1):
            lines.append(slide_marker(number))
            slide_start = len(lines)
            title = slide.shapes.title
            if title is not None and title.has_text_frame and title.text_frame.text.strip():
                lines.append(title.text_frame.text.strip())
            for shape in slide.shapes:
                if title is not None and shape.shape_id == title.shape_id:
                    continue
                for line, used_ocr in self._shape_lines(shape):
                    lines.append(line)
                    ocr_invocations += int(used_ocr)
            has_content = has_content or len(lines) > slide_start

        if not has_content:
            logger.warning("PPTX contained no readable text")
            return ExtractionResult(
                text=OCR_FAILED_PLACEHOLDER,
                path=ExtractionPath.FAILED,
                ocr_invocations=ocr_invocations,
            )
        return ExtractionResult(
            text="\n".join(lines), path=ExtractionPath.EXTRACTED, ocr_invocations=ocr_invocations
        )

    def _shape_lines(self, shape) -> Iterator[tuple[str, bool]]:
        if shape.shape_type == MSO_SHAPE_TYPE.GROUP:
            for child in shape.shapes:
                yield from self._shape_lines(child)
            return

        if shape.shape_type == MSO_SHAPE_TYPE.PICTURE:
            try:
                blob = shape.image.blob
            except (KeyError, ValueError) as exc:
                # Linked pictures carry no embedded image part.
                logger.warning("Skipping OCR for picture %r: %s", shape.name, exc)
                yield f"Image content: {OCR_FAILED_PLACEHOLDER}", False
                return
            logger.info("Found image in PowerPoint. Attempting OCR...")
            outcome = run_ocr(self.ocr_engine, blob, source="image")
            yield f"Image content: {outcome.text}", True
            return

        if shape.has_text_frame:
            text = shape.text_frame.text.strip()
            if text:
                yield text, False
        elif shape.has_table:
            for row in shape.table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    yield " | ".join(cells), False

    def _ocr_fallback(self, file_bytes: bytes, *, source: str) -> ExtractionResult:
        outcome = run_ocr(self.ocr_engine, file_bytes, source=source)
        path = ExtractionPath.FELL_BACK_TO_OCR if outcome.succeeded else ExtractionPath.FAILED
        return ExtractionResult(text=outcome.text, path=path, ocr_invocations=1)
