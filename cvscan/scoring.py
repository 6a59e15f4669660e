"""
Scoring Aggregator
==================
Folds findings into the final score.

Order of application:
    1. Structure findings, in analyzer order
    2. Photo cap (90), then colored background (-30, cap 60)
    3. Template cap (85) re-applied when not official
    4. +5 bonus for a perfect official document (score >= 95)
    5. Clamp to [0, 100]

A cap only ever lowers the score.
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import Iterable, Optional

from .models import (
    Finding,
    ScanResult,
    ScoreCard,
    StructureReport,
    VisualSignals,
)

logger = logging.getLogger(__name__)

START_SCORE = 100
MIN_SCORE = 0
MAX_SCORE = 100
PASS_THRESHOLD = 90

PHOTO_CAP = 90
COLORED_BACKGROUND_PENALTY = -30
COLORED_BACKGROUND_CAP = 60
TEMPLATE_CAP = 85
BONUS_THRESHOLD = 95
PERFECT_FORMAT_BONUS = 5

NO_ISSUES_PLACEHOLDER = "Perfect CV!"
FAILURE_MESSAGE = "PDF Error"
FAILURE_ISSUE = "Processing failed"


def apply_cap(score: int, ceiling: int) -> int:
    return min(score, ceiling)


def apply_finding(score: int, finding: Finding) -> int:
    score += finding.delta
    if finding.cap is not None:
        score = apply_cap(score, finding.cap)
    return score


def fold_findings(findings: Iterable[Finding], start: int = START_SCORE) -> int:
    return reduce(apply_finding, findings, start)


def clamp(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def visual_findings(visual: VisualSignals) -> list[Finding]:
    """Penalties for the rendering-level signals."""
    findings = []
    if visual.has_photo:
        findings.append(Finding(
            message="Photo detected → Max score: 90",
            cap=PHOTO_CAP,
        ))
    if visual.has_colored_background:
        findings.append(Finding(
            message="Colored background → -30 & Max score: 60",
            delta=COLORED_BACKGROUND_PENALTY,
            cap=COLORED_BACKGROUND_CAP,
        ))
    return findings


def bonus_finding(
    score: int,
    is_official_template: bool,
    visual: VisualSignals,
) -> Optional[Finding]:
    """The perfect-format bonus, when every condition holds."""
    if (
        score >= BONUS_THRESHOLD
        and is_official_template
        and not visual.has_photo
        and not visual.has_colored_background
    ):
        return Finding(
            message="Perfect format → +5 bonus",
            delta=PERFECT_FORMAT_BONUS,
        )
    return None


class ScoringAggregator:
    """Combines analyzer and detector output into a ScoreCard."""

    def aggregate(
        self,
        report: StructureReport,
        visual: VisualSignals,
    ) -> ScoreCard:
        findings = list(report.findings) + visual_findings(visual)
        score = fold_findings(findings)

        if not report.is_official_template:
            score = apply_cap(score, TEMPLATE_CAP)

        bonus = bonus_finding(score, report.is_official_template, visual)
        if bonus is not None:
            findings.append(bonus)
            score = apply_finding(score, bonus)

        final = clamp(score)
        logger.debug(f"Aggregated score {score} → {final}")

        return ScoreCard(
            score=final,
            is_official_template=report.is_official_template,
            visual=visual,
            findings=findings,
        )


def status_message(score: int) -> str:
    if score >= PASS_THRESHOLD:
        return "PASSED! 90+ only with the official template"
    return f"Score: {score}/100 – Use Official Template"


def build_result(card: ScoreCard) -> ScanResult:
    issues = [f.message for f in card.findings] or [NO_ISSUES_PLACEHOLDER]
    return ScanResult(
        ats_score=card.score,
        is_official_template=card.is_official_template,
        has_photo=card.visual.has_photo,
        has_colored_background=card.visual.has_colored_background,
        has_template_font=card.visual.has_template_font,
        message=status_message(card.score),
        issues=issues,
        findings=card.findings,
    )


def failed_result() -> ScanResult:
    """Terminal result for a document whose text could not be extracted."""
    return ScanResult(
        ats_score=0,
        message=FAILURE_MESSAGE,
        issues=[FAILURE_ISSUE],
    )
