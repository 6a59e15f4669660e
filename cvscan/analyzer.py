"""
Template & Structure Analyzer
=============================
Text-level rules over the extracted résumé text.

Each check is a pure function from DocumentText to a list of Findings, so
rules can be evaluated and tested in isolation. StructureAnalyzer runs
them in scoring order:

    template → mandatory sections → summary length →
    section order → bullets → font family
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

from .models import DocumentText, Finding, StructureReport
from .scoring import TEMPLATE_CAP

logger = logging.getLogger(__name__)

# ─── Template Markers ─────────────────────────────────────────────────────────

# Verbatim, case-sensitive substrings of the official template text
TEMPLATE_MARKERS = ("Inter", "Size 12", "size 8.6", "50–80 words")

# Matches the template's name line, e.g. "Name – Inter Bold, Size 12"
NAME_LINE_PATTERN = re.compile(r"Name.*Inter.*Size 12", re.IGNORECASE)
NAME_LINE_WINDOW = 20

# ─── Sections ─────────────────────────────────────────────────────────────────

MANDATORY_SECTIONS = (
    "PROFESSIONAL SUMMARY",
    "WORK EXPERIENCE",
    "EDUCATION",
    "SKILLS",
    "LANGUAGES",
)

SECTION_ORDER = (
    "PROFESSIONAL SUMMARY",
    "WORK EXPERIENCE",
    "EDUCATION",
    "SKILLS",
    "CORE COMPETENCIES",
    "CERTIFICATIONS",
    "LANGUAGES",
)

SUMMARY_PATTERN = re.compile(r"PROFESSIONAL SUMMARY", re.IGNORECASE)

# A whole line of capitals and spaces, at least 8 long, starts a new section
HEADING_PATTERN = re.compile(r"[A-Z\s]{8,}")

SUMMARY_MIN_WORDS = 50
SUMMARY_MAX_WORDS = 80

# ─── Formatting ───────────────────────────────────────────────────────────────

BULLET_PATTERN = re.compile(r"^[•●◦\-–]")

TEMPLATE_FONT_NAME = "Inter"

# Deltas
MISSING_SECTION_PENALTY = -10
SUMMARY_LENGTH_PENALTY = -10
SECTION_ORDER_PENALTY = -5
NO_BULLETS_PENALTY = -5
FONT_PENALTY = -5


# ─── Predicates ───────────────────────────────────────────────────────────────


def has_section(document: DocumentText, section: str) -> bool:
    return find_section(document, section) is not None


def find_section(document: DocumentText, section: str) -> Optional[int]:
    """Index of the first line containing `section` (case-insensitive)."""
    for idx, line in enumerate(document.lines):
        if section in line.upper():
            return idx
    return None


def is_section_heading(line: str) -> bool:
    return HEADING_PATTERN.fullmatch(line) is not None


def is_official_template(document: DocumentText) -> bool:
    """All template markers present and a name line in the first lines."""
    has_markers = all(marker in document.raw for marker in TEMPLATE_MARKERS)
    has_name_line = any(
        NAME_LINE_PATTERN.search(line)
        for line in document.lines[:NAME_LINE_WINDOW]
    )
    return has_markers and has_name_line


def count_summary_words(document: DocumentText) -> Optional[int]:
    """
    Count the words of the professional summary.

    Counting starts on the line after the first summary heading and stops
    at the next all-caps heading. Returns None when there is no summary.
    """
    start = None
    for idx, line in enumerate(document.lines):
        if SUMMARY_PATTERN.search(line):
            start = idx
            break
    if start is None:
        return None

    words = 0
    for line in document.lines[start + 1:]:
        if is_section_heading(line):
            break
        words += len(line.split())
    return words


def locate_sections(document: DocumentText) -> dict[str, int]:
    """Line index of each canonically ordered section that is present."""
    positions = {}
    for section in SECTION_ORDER:
        idx = find_section(document, section)
        if idx is not None:
            positions[section] = idx
    return positions


def has_bullets(document: DocumentText) -> bool:
    return any(BULLET_PATTERN.match(line) for line in document.lines)


# ─── Checks ───────────────────────────────────────────────────────────────────


def template_findings(official: bool) -> list[Finding]:
    if official:
        return []
    return [Finding(message="Not using official template", cap=TEMPLATE_CAP)]


def check_template(document: DocumentText) -> list[Finding]:
    return template_findings(is_official_template(document))


def check_mandatory_sections(document: DocumentText) -> list[Finding]:
    return [
        Finding(message=f"Missing: {section}", delta=MISSING_SECTION_PENALTY)
        for section in MANDATORY_SECTIONS
        if not has_section(document, section)
    ]


def check_summary_length(document: DocumentText) -> list[Finding]:
    words = count_summary_words(document)
    if words is None:
        return []
    if SUMMARY_MIN_WORDS <= words <= SUMMARY_MAX_WORDS:
        return []
    return [Finding(
        message=f"Summary: {words} words (must 50–80)",
        delta=SUMMARY_LENGTH_PENALTY,
    )]


def check_section_order(document: DocumentText) -> list[Finding]:
    """
    Flag every found section that sits on the wrong side of another found
    section. Missing sections are ignored.
    """
    positions = locate_sections(document)
    findings = []

    for expected_idx, section in enumerate(SECTION_ORDER):
        if section not in positions:
            continue
        current = positions[section]

        predecessors = SECTION_ORDER[:expected_idx]
        successors = SECTION_ORDER[expected_idx + 1:]
        out_of_order = any(
            positions[pred] > current
            for pred in predecessors
            if pred in positions
        ) or any(
            positions[succ] < current
            for succ in successors
            if succ in positions
        )

        if out_of_order:
            findings.append(Finding(
                message=f"Wrong order: {section}",
                delta=SECTION_ORDER_PENALTY,
            ))

    return findings


def check_bullets(document: DocumentText) -> list[Finding]:
    if has_bullets(document):
        return []
    return [Finding(message="No bullet points", delta=NO_BULLETS_PENALTY)]


def check_font_family(document: DocumentText) -> list[Finding]:
    if TEMPLATE_FONT_NAME in document.raw:
        return []
    return [Finding(message="Font not Inter", delta=FONT_PENALTY)]


# Scoring order
STRUCTURE_CHECKS: tuple[Callable[[DocumentText], list[Finding]], ...] = (
    check_mandatory_sections,
    check_summary_length,
    check_section_order,
    check_bullets,
    check_font_family,
)


class StructureAnalyzer:
    """Runs the template check followed by every structure check."""

    def analyze(self, document: DocumentText) -> StructureReport:
        official = is_official_template(document)
        findings = template_findings(official)

        for check in STRUCTURE_CHECKS:
            findings.extend(check(document))

        logger.info(
            f"Structure analysis: official_template={official}, "
            f"{len(findings)} findings"
        )
        for finding in findings:
            logger.debug(f"  • {finding.message} ({finding.delta:+d})")

        return StructureReport(is_official_template=official, findings=findings)
