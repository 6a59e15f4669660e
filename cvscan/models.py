"""
Data Models
===========
Pydantic models for scan inputs, intermediate signals and the final result.
The result serializes with camelCase aliases for the HTTP layer.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


# ─── Enums ────────────────────────────────────────────────────────────────────


class OperatorKind(str, Enum):
    """Kind of a page-level drawing operator."""
    SET_FILL_COLOR_GRAY = "set_fill_color_gray"
    SET_FILL_COLOR_RGB = "set_fill_color_rgb"
    SET_FILL_COLOR_CMYK = "set_fill_color_cmyk"
    FILL_PATH = "fill_path"
    EO_FILL_PATH = "eo_fill_path"
    SHADING_FILL = "shading_fill"
    PAINT_IMAGE = "paint_image"
    PAINT_JPEG = "paint_jpeg"
    OTHER = "other"


FILL_COLOR_KINDS = frozenset({
    OperatorKind.SET_FILL_COLOR_GRAY,
    OperatorKind.SET_FILL_COLOR_RGB,
    OperatorKind.SET_FILL_COLOR_CMYK,
})

FILL_PATH_KINDS = frozenset({
    OperatorKind.FILL_PATH,
    OperatorKind.EO_FILL_PATH,
})

IMAGE_KINDS = frozenset({
    OperatorKind.PAINT_IMAGE,
    OperatorKind.PAINT_JPEG,
})


# ─── Document Text ────────────────────────────────────────────────────────────


class DocumentText(BaseModel):
    """
    Flat text extraction of a document.
    `lines` holds the trimmed, non-empty lines in reading order.
    """
    model_config = ConfigDict(frozen=True)

    raw: str = ""
    lines: tuple[str, ...] = ()

    @classmethod
    def from_text(cls, raw: str) -> DocumentText:
        raw = raw or ""
        lines = tuple(
            stripped
            for stripped in (line.strip() for line in raw.split("\n"))
            if stripped
        )
        return cls(raw=raw, lines=lines)


# ─── Page Signals ─────────────────────────────────────────────────────────────


class PageOperator(BaseModel):
    """
    One entry of a page's rendering instruction sequence.
    Color setters carry 1 (gray), 3 (RGB) or 4 (CMYK) arguments.
    """
    model_config = ConfigDict(frozen=True)

    kind: OperatorKind
    args: tuple[Any, ...] = ()


class PageSignals(BaseModel):
    """Low-level rendering signals recovered from a single page."""
    page_number: int = Field(ge=1)
    operators: list[PageOperator] = Field(default_factory=list)
    fonts: set[str] = Field(
        default_factory=set,
        description="Resolved font names actually rendered on the page",
    )
    error: Optional[str] = Field(
        default=None,
        description="Set when signal extraction for this page failed",
    )

    @property
    def ok(self) -> bool:
        return self.error is None


class VisualSignals(BaseModel):
    """Combined output of the visual feature detectors."""
    has_photo: bool = False
    has_colored_background: bool = False
    has_template_font: bool = False


# ─── Findings ─────────────────────────────────────────────────────────────────


class Finding(BaseModel):
    """
    A single scoring event.

    Applying a finding adds `delta` to the running score and then, when
    `cap` is set, lowers the score to at most `cap`.
    """
    model_config = ConfigDict(frozen=True)

    message: str
    delta: int = 0
    cap: Optional[int] = Field(default=None, ge=0, le=100)


class StructureReport(BaseModel):
    """Output of the template & structure analyzer."""
    is_official_template: bool = False
    findings: list[Finding] = Field(default_factory=list)


class ScoreCard(BaseModel):
    """Aggregated score before it is turned into a ScanResult."""
    score: int = Field(ge=0, le=100)
    is_official_template: bool = False
    visual: VisualSignals = Field(default_factory=VisualSignals)
    findings: list[Finding] = Field(default_factory=list)


# ─── Scan Result ──────────────────────────────────────────────────────────────


class ScanResult(BaseModel):
    """
    Final output of one scan.
    This is the top-level JSON structure returned to HTTP clients.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ats_score: int = Field(ge=0, le=100)
    is_official_template: bool = False
    has_photo: bool = False
    has_colored_background: bool = False
    has_template_font: bool = False
    message: str = ""
    issues: list[str] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)

    @computed_field
    @property
    def passed(self) -> bool:
        return self.ats_score >= 90
