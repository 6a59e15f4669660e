"""
Visual Feature Detectors
========================
Independent analyzers over per-page rendering signals:

    - Photo:              an image is painted on the first page
    - Colored background: a non-white fill or a shading on the first pages
    - Template font:      a rendered font belongs to the Inter family

Detectors are pure and never raise. Pages whose signal extraction failed
are skipped, and any unexpected error degrades to a negative result.
"""

from __future__ import annotations

import logging
from functools import wraps
from numbers import Real
from typing import Callable, Optional, Sequence

from .models import (
    FILL_COLOR_KINDS,
    FILL_PATH_KINDS,
    IMAGE_KINDS,
    OperatorKind,
    PageOperator,
    PageSignals,
    VisualSignals,
)

logger = logging.getLogger(__name__)

DETECTION_PAGE_LIMIT = 3

# A fill is "white" when every channel reaches this value
WHITE_THRESHOLD = 0.95

TEMPLATE_FONT_FAMILY = "inter"

RGB = tuple[float, float, float]
BLACK: RGB = (0.0, 0.0, 0.0)


def never_raises(detector: Callable[..., bool]) -> Callable[..., bool]:
    """Log and swallow detector failures, reporting no detection."""

    @wraps(detector)
    def wrapper(*args, **kwargs) -> bool:
        try:
            return detector(*args, **kwargs)
        except Exception as e:
            logger.warning(f"{detector.__name__} failed: {e}")
            return False

    return wrapper


def _usable_pages(
    pages: Sequence[PageSignals], max_pages: int
) -> list[PageSignals]:
    usable = []
    for page in pages:
        if page.page_number > max_pages:
            continue
        if not page.ok:
            logger.warning(
                f"Skipping page {page.page_number}: {page.error}"
            )
            continue
        usable.append(page)
    return usable


# ─── Photo ────────────────────────────────────────────────────────────────────


@never_raises
def detect_photo(pages: Sequence[PageSignals]) -> bool:
    """True iff an image is painted on page 1."""
    for page in _usable_pages(pages, max_pages=1):
        if any(op.kind in IMAGE_KINDS for op in page.operators):
            logger.debug("Photo detected on page 1")
            return True
    return False


# ─── Colored Background ───────────────────────────────────────────────────────


def fill_color_from_args(args: Sequence) -> Optional[RGB]:
    """
    Resolve a fill color setter's arguments to RGB.

    1 argument is gray, 3 are RGB, 4 are CMYK. Returns None when the
    arguments are missing, non-numeric or of an unknown arity.
    """
    if not args or not all(
        isinstance(v, Real) and not isinstance(v, bool) for v in args
    ):
        return None

    values = [float(v) for v in args]
    if len(values) == 1:
        return (values[0], values[0], values[0])
    if len(values) == 3:
        return (values[0], values[1], values[2])
    if len(values) == 4:
        c, m, y, k = values
        return ((1 - c) * (1 - k), (1 - m) * (1 - k), (1 - y) * (1 - k))
    return None


def is_white(color: RGB) -> bool:
    return all(channel >= WHITE_THRESHOLD for channel in color)


def page_has_colored_fill(operators: Sequence[PageOperator]) -> bool:
    """Replay a page's fill color state and report the first colored fill."""
    color = BLACK
    for op in operators:
        if op.kind in FILL_COLOR_KINDS:
            resolved = fill_color_from_args(op.args)
            if resolved is not None:
                color = resolved
        elif op.kind in FILL_PATH_KINDS:
            if not is_white(color):
                logger.debug(f"Colored fill detected: {color}")
                return True
        elif op.kind == OperatorKind.SHADING_FILL:
            logger.debug("Shading fill detected")
            return True
    return False


@never_raises
def detect_colored_background(
    pages: Sequence[PageSignals],
    max_pages: int = DETECTION_PAGE_LIMIT,
) -> bool:
    """True on the first non-white fill or shading in the first pages."""
    for page in _usable_pages(pages, max_pages):
        if page_has_colored_fill(page.operators):
            logger.debug(f"Colored background on page {page.page_number}")
            return True
    return False


# ─── Template Font ────────────────────────────────────────────────────────────


@never_raises
def detect_template_font(
    pages: Sequence[PageSignals],
    max_pages: int = DETECTION_PAGE_LIMIT,
) -> bool:
    """True iff a rendered font name contains "inter" (any case)."""
    for page in _usable_pages(pages, max_pages):
        for font in page.fonts:
            if TEMPLATE_FONT_FAMILY in font.lower():
                logger.debug(
                    f"Template font '{font}' on page {page.page_number}"
                )
                return True
    return False


def detect_visual_features(
    pages: Sequence[PageSignals],
    max_pages: int = DETECTION_PAGE_LIMIT,
) -> VisualSignals:
    """Run all three detectors."""
    return VisualSignals(
        has_photo=detect_photo(pages),
        has_colored_background=detect_colored_background(pages, max_pages),
        has_template_font=detect_template_font(pages, max_pages),
    )
