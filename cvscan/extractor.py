"""
Document Extractors
===================
Adapters over PyMuPDF (fitz) that turn PDF bytes into the inputs of the
scoring core:

    - TextExtractor:       flat text + reading-order lines (DocumentText)
    - PageSignalExtractor: per-page operator list and rendered font names

Text extraction failure is fatal for a scan. Page signal extraction is
best-effort: a failing page is recorded with its error and skipped by the
detectors.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import fitz  # PyMuPDF

from .content_stream import iter_operations
from .errors import ExtractionError
from .models import DocumentText, OperatorKind, PageOperator, PageSignals

logger = logging.getLogger(__name__)

# Operator keyword → kind, for operators whose kind does not depend on args
SIMPLE_OPERATORS = {
    "g": OperatorKind.SET_FILL_COLOR_GRAY,
    "rg": OperatorKind.SET_FILL_COLOR_RGB,
    "k": OperatorKind.SET_FILL_COLOR_CMYK,
    "f": OperatorKind.FILL_PATH,
    "F": OperatorKind.FILL_PATH,
    "f*": OperatorKind.EO_FILL_PATH,
    "sh": OperatorKind.SHADING_FILL,
}

# sc / scn carry as many components as the current fill color space
COMPONENT_COUNT_KINDS = {
    1: OperatorKind.SET_FILL_COLOR_GRAY,
    3: OperatorKind.SET_FILL_COLOR_RGB,
    4: OperatorKind.SET_FILL_COLOR_CMYK,
}

MAX_FORM_DEPTH = 8


def open_pdf(data: bytes) -> fitz.Document:
    """Open a PDF from memory."""
    return fitz.open(stream=data, filetype="pdf")


class TextExtractor:
    """Extracts the plain text of every page, in page order."""

    def extract(self, data: bytes) -> DocumentText:
        """
        Extract the document text.

        Raises:
            ExtractionError: If the document cannot be opened or read.
        """
        try:
            with open_pdf(data) as doc:
                if doc.needs_pass:
                    raise ExtractionError("Document is password protected")
                if doc.page_count == 0:
                    raise ExtractionError("Document has no pages")
                text = "\n".join(page.get_text() for page in doc)
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"Could not extract text: {e}") from e

        document = DocumentText.from_text(text)
        logger.debug(
            f"Extracted {len(document.raw)} chars, "
            f"{len(document.lines)} lines"
        )
        return document


class PageSignalExtractor:
    """
    Recovers low-level rendering signals from the first pages of a PDF.

    Operators are read from the page content stream (and the Form XObjects
    it paints), so fills and color changes inside forms appear in the
    order they are rendered.
    """

    def __init__(self, max_pages: int = 3):
        self.max_pages = max_pages

    def extract(self, data: bytes) -> list[PageSignals]:
        """
        Extract signals for up to `max_pages` pages.

        Never raises: an unopenable document yields an empty list and a
        failing page yields a PageSignals with `error` set.
        """
        try:
            doc = open_pdf(data)
        except Exception as e:
            logger.warning(f"Page signal extraction unavailable: {e}")
            return []

        signals: list[PageSignals] = []
        with doc:
            last_page = min(doc.page_count, self.max_pages)
            for page_idx in range(last_page):
                page_num = page_idx + 1
                try:
                    page_signals = self._extract_page(doc[page_idx], page_num)
                except Exception as e:
                    logger.warning(
                        f"Failed extracting signals on page {page_num}: {e}"
                    )
                    page_signals = PageSignals(page_number=page_num, error=str(e))
                signals.append(page_signals)

        return signals

    def _extract_page(self, page: fitz.Page, page_num: int) -> PageSignals:
        operators = self._read_operators(page)
        fonts = self._read_fonts(page)
        logger.debug(
            f"Page {page_num}: {len(operators)} operators, "
            f"fonts={sorted(fonts)}"
        )
        return PageSignals(page_number=page_num, operators=operators, fonts=fonts)

    # ─── Operators ────────────────────────────────────────────────────────────

    def _read_operators(self, page: fitz.Page) -> list[PageOperator]:
        # XObject name → image filter / form xref
        images = {img[7]: img[8] or "" for img in page.get_images(full=True)}
        forms = {xobj[1]: xobj[0] for xobj in page.get_xobjects()}

        operators: list[PageOperator] = []
        self._collect(
            page.read_contents(),
            page.parent,
            images,
            forms,
            operators,
            visited=set(),
            depth=0,
        )
        return operators

    def _collect(
        self,
        stream: bytes,
        doc: fitz.Document,
        images: dict[str, str],
        forms: dict[str, int],
        operators: list[PageOperator],
        visited: set[int],
        depth: int,
    ):
        for op, operands in iter_operations(stream):
            if op != "Do":
                operators.append(to_page_operator(op, operands))
                continue

            name = _xobject_name(operands)
            if name in images:
                kind = (
                    OperatorKind.PAINT_JPEG
                    if "DCT" in images[name]
                    else OperatorKind.PAINT_IMAGE
                )
                operators.append(PageOperator(kind=kind))
            elif (
                name in forms
                and forms[name] not in visited
                and depth < MAX_FORM_DEPTH
            ):
                xref = forms[name]
                visited.add(xref)
                self._collect(
                    doc.xref_stream(xref) or b"",
                    doc,
                    images,
                    forms,
                    operators,
                    visited,
                    depth + 1,
                )
            else:
                operators.append(PageOperator(kind=OperatorKind.OTHER))

    # ─── Fonts ────────────────────────────────────────────────────────────────

    def _read_fonts(self, page: fitz.Page) -> set[str]:
        """Collect the font names of every rendered text span."""
        fonts: set[str] = set()
        page_dict = page.get_text("dict")
        for block in page_dict.get("blocks", []):
            if block.get("type") != 0:  # Text
                continue
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    font = span.get("font")
                    if font:
                        fonts.add(font)
        return fonts


def to_page_operator(op: str, operands: list[Any]) -> PageOperator:
    """Map a raw content stream operation onto a PageOperator."""
    numbers = tuple(v for v in operands if isinstance(v, float))

    if op in ("sc", "scn"):
        kind = COMPONENT_COUNT_KINDS.get(len(numbers), OperatorKind.OTHER)
        return PageOperator(kind=kind, args=numbers)

    kind = SIMPLE_OPERATORS.get(op, OperatorKind.OTHER)
    return PageOperator(kind=kind, args=numbers)


def _xobject_name(operands: list[Any]) -> Optional[str]:
    for value in operands:
        if isinstance(value, str) and value.startswith("/"):
            return value[1:]
    return None
